"""
BannerSetProcessor - Produces the preview thumbnail for an uploaded banner.
"""

import logging
import re
from typing import Dict, Mapping, Optional, Union

from .errors import AssetNotFound, BannerSetError
from .metadata import MEMBERSHIP_FIELDS, BannerSetMetadata
from .mosaic_composer import MosaicComposer
from .thumbnail_downscaler import ThumbnailDownscaler

# '<prefix>-<sizeKey>-bannerset' or '<prefix>-bannerset'
_SIZED_SUFFIX = re.compile(r'-[^-]+-bannerset$')
_SUFFIX = re.compile(r'-bannerset$')

THUMBNAIL_SUFFIX = '-thumbnail'
THUMBNAIL_CONTENT_TYPE = 'image/png'


def object_key_prefix(object_key: str) -> str:
    """Strip the upload suffix from a banner object key."""
    return _SUFFIX.sub('', _SIZED_SUFFIX.sub('', object_key))


def original_object_key(object_key: str) -> str:
    """Key an upload is stored under once processed: '<prefix>-<sizeKey>'."""
    return _SUFFIX.sub('', object_key)


def thumbnail_metadata(metadata: Mapping[str, str]) -> Dict[str, str]:
    """Metadata to attach to the thumbnail: everything but set membership."""
    return {
        name: value for name, value in metadata.items()
        if name.lower() not in MEMBERSHIP_FIELDS
    }


class BannerSetProcessor:
    """
    Builds a thumbnail for one banner: a downscaled mosaic when the banner
    belongs to a set, otherwise the banner itself downscaled.
    """

    def __init__(
        self,
        storage_client,
        composer: MosaicComposer,
        downscaler: Optional[ThumbnailDownscaler] = None,
        logger: Optional[logging.Logger] = None
    ):
        """
        Initialize processor.

        Args:
            storage_client: Storage client instance (S3Client or LocalClient)
            composer: Mosaic composer
            downscaler: Thumbnail downscaler (default: 640px wide)
            logger: Optional logger instance
        """
        self.store = storage_client
        self.composer = composer
        self.downscaler = downscaler or ThumbnailDownscaler()
        self.logger = logger or logging.getLogger(__name__)

    def process_image(
        self,
        base_data: bytes,
        container_id: str,
        object_key_prefix: str,
        metadata: Union[BannerSetMetadata, Mapping[str, str], None] = None
    ) -> bytes:
        """
        Produce the thumbnail bytes for a banner.

        Args:
            base_data: Bytes of the uploaded banner
            container_id: Bucket holding the banner set
            object_key_prefix: Common key prefix of the set's siblings
            metadata: Parsed metadata or the raw object metadata

        Returns:
            PNG thumbnail bytes
        """
        if not isinstance(metadata, BannerSetMetadata):
            metadata = BannerSetMetadata.from_mapping(metadata)

        mosaic = self.composer.compose(base_data, container_id, object_key_prefix, metadata)
        if mosaic is None:
            return self.downscaler.downscale(base_data)
        return self.downscaler.downscale(mosaic.data)

    def process_object(
        self,
        container_id: str,
        object_key: str,
        key_prefix: Optional[str] = None
    ) -> str:
        """
        Read a stored banner, build its thumbnail and upload it.

        The thumbnail is written to '{prefix}-thumbnail' only once fully built.
        A '-bannerset' upload is then moved to its key without that suffix,
        keeping its bytes, content type and metadata.

        Args:
            container_id: Bucket holding the banner
            object_key: Key of the uploaded banner
            key_prefix: Sibling key prefix (default: derived from object_key)

        Returns:
            Key of the uploaded thumbnail
        """
        prefix = key_prefix or object_key_prefix(object_key)

        head = self.store.get_object_metadata(container_id, object_key)
        if head is None:
            raise AssetNotFound(container_id, object_key)
        raw_metadata = head.get('metadata', {})

        self.logger.debug(f"Downloading: {container_id}/{object_key}")
        data = self.store.download_object(container_id, object_key)

        try:
            thumb_data = self.process_image(data, container_id, prefix, raw_metadata)
        except BannerSetError as e:
            self.logger.error(f"Error processing {object_key}: {e}")
            raise

        thumb_key = f"{prefix}{THUMBNAIL_SUFFIX}"
        self.logger.debug(f"Uploading: {thumb_key}")
        self.store.upload_object(
            container_id,
            thumb_key,
            thumb_data,
            THUMBNAIL_CONTENT_TYPE,
            metadata=thumbnail_metadata(raw_metadata),
        )
        self.logger.info(f"Generated: {container_id}/{thumb_key} ({len(thumb_data)} bytes)")

        original_key = original_object_key(object_key)
        if original_key != object_key:
            # Siblings are fetched from '<prefix>-<sizeKey>'.
            self.store.upload_object(
                container_id,
                original_key,
                data,
                head.get('content_type', 'application/octet-stream'),
                metadata=raw_metadata,
            )
            self.store.delete_object(container_id, object_key)
            self.logger.info(f"Moved: {container_id}/{object_key} -> {original_key}")
        return thumb_key
