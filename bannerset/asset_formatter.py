"""
AssetFormatter - Turns one raw banner image into a canvas-sized transparent layer.
"""

import io
import logging
from typing import Optional, Union

import cairosvg
from PIL import Image, ImageFilter, PngImagePlugin

from .errors import UnsupportedImageFormat
from .size_catalog import SizeCatalog, SizeKey, parse_key

TRANSPARENT = (0, 0, 0, 0)


def is_svg(data: bytes) -> bool:
    """Sniff for an SVG document."""
    head = data[:1024].lstrip(b'\xef\xbb\xbf \t\r\n').lower()
    # Covers a bare root as well as XML declarations, comments and DOCTYPEs before it.
    return head.startswith(b'<') and b'<svg' in head


def render_svg(data: bytes, width: int, key: Optional[str] = None) -> bytes:
    """
    Rasterize SVG bytes to PNG at the given width.

    Raises:
        UnsupportedImageFormat: If cairosvg cannot render the document
    """
    try:
        return cairosvg.svg2png(bytestring=data, output_width=width)
    except Exception as e:
        raise UnsupportedImageFormat(key, f"SVG render failed: {e}") from e


def decode_image(data: bytes, key: Optional[str] = None) -> Image.Image:
    """
    Decode raster bytes with Pillow and load the pixels.

    Raises:
        UnsupportedImageFormat: If Pillow cannot read the data
    """
    try:
        img = Image.open(io.BytesIO(data))
        img.load()
    except (OSError, ValueError, Image.DecompressionBombError) as e:
        raise UnsupportedImageFormat(key, str(e)) from e
    return img


def sharpen(img: Image.Image) -> Image.Image:
    """Unsharp-mask the colour channels of an RGBA image, keeping alpha as is."""
    alpha = img.getchannel('A')
    rgb = img.convert('RGB').filter(
        ImageFilter.UnsharpMask(radius=1, percent=100, threshold=0)
    )
    rgb.putalpha(alpha)
    return rgb


def encode_png(
    img: Image.Image,
    optimize: bool = False,
    pnginfo: Optional[PngImagePlugin.PngInfo] = None
) -> bytes:
    output = io.BytesIO()
    img.save(output, format='PNG', optimize=optimize, pnginfo=pnginfo)
    return output.getvalue()


class AssetFormatter:
    """
    Normalizes banner images (uploads or placeholders) into layers.

    A layer is a full-canvas RGBA image that is transparent everywhere
    except the rectangle assigned to its size key.
    """

    def __init__(
        self,
        catalog: Optional[SizeCatalog] = None,
        logger: Optional[logging.Logger] = None
    ):
        """
        Initialize asset formatter.

        Args:
            catalog: Size catalog (default: the canonical one)
            logger: Optional logger instance
        """
        self.catalog = catalog or SizeCatalog()
        self.logger = logger or logging.getLogger(__name__)

    def format(self, data: bytes, key: Union[str, SizeKey]) -> bytes:
        """
        Format raw image bytes into a PNG-encoded layer.

        Args:
            data: Raw image bytes (any Pillow format, or SVG)
            key: Size key the image belongs to

        Returns:
            PNG bytes of the 960x884 layer
        """
        return encode_png(self.format_image(data, key))

    def format_image(self, data: bytes, key: Union[str, SizeKey]) -> Image.Image:
        """Format raw image bytes into an in-memory RGBA layer."""
        size_key = parse_key(key)
        spec = self.catalog.lookup(size_key)

        try:
            img = self._decode(data, size_key, spec.target_width)
        except UnsupportedImageFormat as e:
            self.logger.error(f"Error formatting {size_key}: {e}")
            raise

        # Slots are fixed; aspect ratio is not preserved.
        img = img.resize((spec.target_width, spec.target_height), Image.Resampling.LANCZOS)

        layer = Image.new('RGBA', spec.canvas_size, TRANSPARENT)
        layer.paste(img, spec.canvas_position)

        self.logger.debug(
            f"Formatted {size_key}: {spec.target_width}x{spec.target_height} "
            f"at {spec.canvas_position}"
        )
        return sharpen(layer)

    def _decode(self, data: bytes, key: SizeKey, width: int) -> Image.Image:
        if is_svg(data):
            data = render_svg(data, width, str(key))
        return decode_image(data, str(key)).convert('RGBA')
