"""
PlaceholderProvider - Stand-in artwork for banner sizes missing from a set.

Each placeholder is a semi-transparent rectangle at the native aspect ratio
of its IAB size. The SVG is fed through AssetFormatter like a real upload.
"""

import logging
from typing import Dict, Optional, Tuple, Union

import cairosvg

from .size_catalog import SizeKey, parse_key

# viewBox width/height per size key
_VIEWBOXES: Dict[SizeKey, Tuple[float, float]] = {
    SizeKey.HALF_PAGE: (48.9, 97.9),            # 300x600
    SizeKey.WIDE_SKYSCRAPER: (21.1, 80.6),      # 160x600
    SizeKey.LARGE_RECTANGLE: (76.8, 63.3),      # 336x280
    SizeKey.FULL_BANNER: (76.8, 11.5),          # 468x60
    SizeKey.LEADERBOARD: (102.7, 12.5),         # 728x90
    SizeKey.HALF_BANNER: (157.4, 40.3),         # 234x60
}

_SVG_TEMPLATE = """\
<svg xmlns="http://www.w3.org/2000/svg" viewBox="0 0 {w} {h}">
  <path fill="rgba(0,0,0,0.2)" d="M0 0h{w}v{h}H0z" />
</svg>"""


def _build_placeholders() -> Dict[SizeKey, bytes]:
    return {
        key: _SVG_TEMPLATE.format(w=w, h=h).encode('utf-8')
        for key, (w, h) in _VIEWBOXES.items()
    }


class PlaceholderProvider:
    """
    Supplies SVG placeholders for the canonical banner sizes.

    The artwork is built once per process and never mutated.
    """

    _PLACEHOLDERS = _build_placeholders()

    def __init__(self, logger: Optional[logging.Logger] = None):
        self.logger = logger or logging.getLogger(__name__)

    def placeholder(self, key: Union[str, SizeKey]) -> bytes:
        """Return the raw SVG bytes for a size key."""
        return self._PLACEHOLDERS[parse_key(key)]

    def rasterize(self, key: Union[str, SizeKey], width: Optional[int] = None) -> bytes:
        """
        Render a placeholder to PNG.

        Args:
            key: Size key
            width: Output width; height follows the viewBox aspect ratio.
                Defaults to the intrinsic viewBox size.

        Returns:
            PNG bytes
        """
        size_key = parse_key(key)
        self.logger.debug(f"Rasterizing placeholder: {size_key} (width={width})")
        return cairosvg.svg2png(
            bytestring=self._PLACEHOLDERS[size_key],
            output_width=width,
        )
