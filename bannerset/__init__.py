"""
Banner set mosaic thumbnails.

Builds a single 960x884 preview mosaic from the six canonical IAB banner
sizes of a banner set, filling sizes not yet uploaded with placeholders, and
downscales it (or a standalone image) to a 640px-wide PNG thumbnail.

Supports both S3 and local filesystem storage.
"""

__version__ = "1.0.0"

from .errors import (
    BannerSetError,
    UnknownSizeKey,
    UnsupportedImageFormat,
    AssetNotFound,
    InvalidMetadata,
)
from .size_catalog import SizeKey, SizeSpec, SizeCatalog, CANVAS_WIDTH, CANVAS_HEIGHT
from .placeholders import PlaceholderProvider
from .asset_formatter import AssetFormatter
from .asset_fetcher import AssetFetcher
from .metadata import BannerSetMetadata
from .scratch import ScratchArena
from .mosaic_composer import MosaicComposer, Mosaic, SizePartition
from .thumbnail_downscaler import ThumbnailDownscaler
from .processor import BannerSetProcessor
from .config import MosaicConfig
from .s3_config import S3Config
from .s3_client import S3Client
from .local_client import LocalConfig, LocalClient

__all__ = [
    "BannerSetError",
    "UnknownSizeKey",
    "UnsupportedImageFormat",
    "AssetNotFound",
    "InvalidMetadata",
    "SizeKey",
    "SizeSpec",
    "SizeCatalog",
    "CANVAS_WIDTH",
    "CANVAS_HEIGHT",
    "PlaceholderProvider",
    "AssetFormatter",
    "AssetFetcher",
    "BannerSetMetadata",
    "ScratchArena",
    "MosaicComposer",
    "Mosaic",
    "SizePartition",
    "ThumbnailDownscaler",
    "BannerSetProcessor",
    "MosaicConfig",
    "S3Config",
    "S3Client",
    "LocalConfig",
    "LocalClient",
]
