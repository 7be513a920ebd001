"""
MosaicComposer - Builds the banner set preview mosaic.

The uploaded asset becomes the base layer. Siblings already in the store are
fetched, missing sizes get placeholders, and every layer is composited onto
the shared 960x884 canvas.
"""

import io
import logging
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional, Sequence, Tuple

from PIL import Image, PngImagePlugin

from .asset_fetcher import AssetFetcher
from .asset_formatter import AssetFormatter, encode_png, sharpen
from .errors import InvalidMetadata, UnknownSizeKey
from .metadata import BannerSetMetadata
from .placeholders import PlaceholderProvider
from .scratch import ScratchArena
from .size_catalog import SizeCatalog, SizeKey, parse_key


@dataclass(frozen=True)
class SizePartition:
    """
    How the six canonical sizes are sourced for one mosaic.

    Attributes:
        valid: Size of the asset being processed (the base layer)
        remaining: Sizes fetched from the store, canonical order
        missing: Sizes filled with placeholders, canonical order
    """
    valid: SizeKey
    remaining: Tuple[SizeKey, ...]
    missing: Tuple[SizeKey, ...]


@dataclass
class Mosaic:
    """
    A composited 960x884 mosaic.

    Attributes:
        data: PNG bytes
        metadata: Pass-through metadata embedded as PNG text chunks
        partition: Where each layer came from
    """
    data: bytes
    metadata: Dict[str, str] = field(default_factory=dict)
    partition: Optional[SizePartition] = None

    @property
    def size(self) -> Tuple[int, int]:
        with Image.open(io.BytesIO(self.data)) as img:
            return img.size


class MosaicComposer:
    """
    Composes a banner set mosaic from the uploaded asset and its siblings.

    Dependencies are injected and treated as read-only, so one composer can
    serve concurrent invocations.
    """

    def __init__(
        self,
        fetcher: AssetFetcher,
        formatter: Optional[AssetFormatter] = None,
        placeholders: Optional[PlaceholderProvider] = None,
        catalog: Optional[SizeCatalog] = None,
        max_workers: int = 4,
        scratch_dir: Optional[str] = None,
        logger: Optional[logging.Logger] = None
    ):
        """
        Initialize mosaic composer.

        Args:
            fetcher: Sibling asset fetcher
            formatter: Asset formatter (default: canonical catalog)
            placeholders: Placeholder provider
            catalog: Size catalog
            max_workers: Layer workers; 1 formats layers in the calling thread
            scratch_dir: If set, spool layers to an invocation arena under
                this directory instead of holding them in memory
            logger: Optional logger instance
        """
        self.logger = logger or logging.getLogger(__name__)
        self.catalog = catalog or SizeCatalog()
        self.fetcher = fetcher
        self.formatter = formatter or AssetFormatter(self.catalog, logger=self.logger)
        self.placeholders = placeholders or PlaceholderProvider(logger=self.logger)
        self.max_workers = max(1, max_workers)
        self.scratch_dir = scratch_dir

    def classify(self, metadata: BannerSetMetadata) -> SizePartition:
        """
        Partition the canonical sizes into valid, remaining and missing.

        Raises:
            InvalidMetadata: If validsize is absent or not among sizes
        """
        try:
            requested = {parse_key(k) for k in metadata.sizes}
            valid = parse_key(metadata.valid_size) if metadata.valid_size is not None else None
        except UnknownSizeKey as e:
            raise InvalidMetadata(str(e)) from e

        if valid is None:
            raise InvalidMetadata("validsize is required when sizes is present")
        if valid not in requested:
            raise InvalidMetadata(f"validsize {valid} is not one of sizes")

        keys = self.catalog.keys()
        return SizePartition(
            valid=valid,
            remaining=tuple(k for k in keys if k in requested and k != valid),
            missing=tuple(k for k in keys if k not in requested),
        )

    def compose(
        self,
        base_data: bytes,
        container_id: str,
        object_key_prefix: str,
        metadata: BannerSetMetadata,
        order: Optional[Sequence[SizeKey]] = None
    ) -> Optional[Mosaic]:
        """
        Compose the mosaic for a banner set.

        Args:
            base_data: Bytes of the asset for `metadata.valid_size`
            container_id: Bucket (or local container) holding the siblings
            object_key_prefix: Sibling keys are '{prefix}-{sizeKey}'
            metadata: Parsed banner set metadata
            order: Optional overlay order for the non-base layers

        Returns:
            Mosaic, or None when the asset is not part of a set
        """
        if not metadata.is_set:
            self.logger.debug("No sizes in metadata, not a banner set")
            return None

        partition = self.classify(metadata)
        self.logger.info(
            f"Composing {container_id}/{object_key_prefix}: valid={partition.valid}, "
            f"fetch={[str(k) for k in partition.remaining]}, "
            f"placeholders={[str(k) for k in partition.missing]}"
        )

        jobs: Dict[SizeKey, Callable[[], bytes]] = {
            partition.valid: lambda: base_data,
        }
        for key in partition.remaining:
            jobs[key] = self._fetch_job(container_id, object_key_prefix, key)
        for key in partition.missing:
            jobs[key] = self._placeholder_job(key)

        overlay = self._overlay_order(partition, order)

        if self.scratch_dir:
            with ScratchArena(self.scratch_dir, logger=self.logger) as arena:
                self._build_layers(jobs, sink=lambda k, img: arena.write(f"{k}.png", encode_png(img)))
                base = Image.open(io.BytesIO(arena.read(f"{partition.valid}.png")))
                layers = [Image.open(io.BytesIO(arena.read(f"{k}.png"))) for k in overlay]
                image = self._composite(base, layers)
        else:
            built: Dict[SizeKey, Image.Image] = {}
            self._build_layers(jobs, sink=built.__setitem__)
            image = self._composite(built[partition.valid], [built[k] for k in overlay])

        return Mosaic(
            data=encode_png(image, pnginfo=self._pnginfo(metadata.extra)),
            metadata=dict(metadata.extra),
            partition=partition,
        )

    def _fetch_job(self, container_id: str, prefix: str, key: SizeKey) -> Callable[[], bytes]:
        return lambda: self.fetcher.fetch(container_id, prefix, key)

    def _placeholder_job(self, key: SizeKey) -> Callable[[], bytes]:
        return lambda: self.placeholders.placeholder(key)

    def _overlay_order(
        self,
        partition: SizePartition,
        order: Optional[Sequence[SizeKey]]
    ) -> List[SizeKey]:
        expected = list(partition.remaining) + list(partition.missing)
        if order is None:
            return expected
        overlay = [parse_key(k) for k in order]
        if sorted(overlay) != sorted(expected):
            raise ValueError(f"Overlay order must be a permutation of {[str(k) for k in expected]}")
        return overlay

    def _build_layers(
        self,
        jobs: Dict[SizeKey, Callable[[], bytes]],
        sink: Callable[[SizeKey, Image.Image], object]
    ) -> None:
        """Run source-then-format for every size; any failure aborts them all."""

        def build(key: SizeKey) -> Image.Image:
            return self.formatter.format_image(jobs[key](), key)

        if self.max_workers == 1:
            for key in jobs:
                sink(key, build(key))
            return

        with ThreadPoolExecutor(max_workers=min(self.max_workers, len(jobs))) as ex:
            futures = {ex.submit(build, key): key for key in jobs}
            for fut in as_completed(futures):
                key = futures.pop(fut)
                error = fut.exception()
                if error is not None:
                    for pending in futures:
                        pending.cancel()
                    self.logger.error(f"Layer {key} failed: {error}")
                    raise error
                # Each layer is handed off as soon as it is built.
                sink(key, fut.result())

    def _composite(self, base: Image.Image, layers: Sequence[Image.Image]) -> Image.Image:
        image = base.convert('RGBA')
        for layer in layers:
            image.alpha_composite(layer.convert('RGBA'))
        return sharpen(image)

    @staticmethod
    def _pnginfo(extra: Dict[str, str]) -> Optional[PngImagePlugin.PngInfo]:
        if not extra:
            return None
        pnginfo = PngImagePlugin.PngInfo()
        for name in sorted(extra):
            pnginfo.add_text(name, str(extra[name]))
        return pnginfo
