"""
ThumbnailDownscaler - Reduces a finished mosaic (or a lone image) to preview width.
"""

import logging
from typing import Optional, Tuple

from PIL import Image, PngImagePlugin

from .asset_formatter import decode_image, encode_png, is_svg, render_svg


class ThumbnailDownscaler:
    """
    Resizes images to a fixed width, preserving their own aspect ratio.

    Output is always PNG. Text chunks carried by the source are kept.
    """

    def __init__(self, width: int = 640, logger: Optional[logging.Logger] = None):
        """
        Initialize thumbnail downscaler.

        Args:
            width: Output width in pixels (default: 640)
            logger: Optional logger instance
        """
        self.width = width
        self.logger = logger or logging.getLogger(__name__)

    def target_size(self, size: Tuple[int, int]) -> Tuple[int, int]:
        """Output (width, height) for a source of the given size."""
        src_width, src_height = size
        height = max(1, int(round(src_height * self.width / src_width)))
        return self.width, height

    def downscale(self, data: bytes) -> bytes:
        """
        Downscale raster or SVG bytes to the configured width.

        Args:
            data: Source image bytes

        Returns:
            PNG thumbnail bytes
        """
        try:
            if is_svg(data):
                data = render_svg(data, self.width)
            img = decode_image(data)
        except Exception as e:
            self.logger.error(f"Error generating thumbnail: {e}")
            raise

        pnginfo = self._text_chunks(img)
        img = self._convert_color_mode(img)
        img = img.resize(self.target_size(img.size), Image.Resampling.LANCZOS)

        self.logger.debug(f"Downscaled thumbnail to {img.size[0]}x{img.size[1]}")
        return encode_png(img, optimize=True, pnginfo=pnginfo)

    def _convert_color_mode(self, img: Image.Image) -> Image.Image:
        """Convert to a mode PNG can hold and LANCZOS can resample."""
        if img.mode in ('RGBA', 'RGB', 'L', 'LA'):
            return img
        if img.mode == 'P' and 'transparency' not in img.info:
            return img.convert('RGB')
        if img.mode in ('P', 'PA'):
            return img.convert('RGBA')
        return img.convert('RGB')

    @staticmethod
    def _text_chunks(img: Image.Image) -> Optional[PngImagePlugin.PngInfo]:
        text = getattr(img, 'text', None)
        if not text:
            return None
        pnginfo = PngImagePlugin.PngInfo()
        for name, value in text.items():
            pnginfo.add_text(name, str(value))
        return pnginfo
