"""
SizeCatalog - The six canonical banner sizes and where they sit on the mosaic canvas.

Layout (960 x 884), clockwise from the top left:

    halfPage        300x600 at (0, 0)
    wideSkyscraper  130x488 at (330, 0)
    largeRectangle  470x391 at (490, 0)
    fullBanner      470x60  at (490, 428)
    leaderboard     630x77  at (330, 523)
    halfBanner      960x246 at (0, 638)
"""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Tuple, Union

from .errors import UnknownSizeKey

CANVAS_WIDTH = 960
CANVAS_HEIGHT = 884


class SizeKey(str, Enum):
    HALF_PAGE = "halfPage"
    WIDE_SKYSCRAPER = "wideSkyscraper"
    LARGE_RECTANGLE = "largeRectangle"
    FULL_BANNER = "fullBanner"
    LEADERBOARD = "leaderboard"
    HALF_BANNER = "halfBanner"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class SizeSpec:
    """
    Target dimensions and canvas insets for one size key.

    Attributes:
        target_width: Width after the (non-uniform) resize
        target_height: Height after the resize
        inset_left/right/top/bottom: Transparent padding that places the
            resized image on the shared canvas
    """
    target_width: int
    target_height: int
    inset_left: int
    inset_right: int
    inset_top: int
    inset_bottom: int

    @property
    def canvas_size(self) -> Tuple[int, int]:
        return (
            self.target_width + self.inset_left + self.inset_right,
            self.target_height + self.inset_top + self.inset_bottom,
        )

    @property
    def canvas_position(self) -> Tuple[int, int]:
        return (self.inset_left, self.inset_top)

    @property
    def canvas_box(self) -> Tuple[int, int, int, int]:
        """(x0, y0, x1, y1) of the image on the canvas, exclusive end."""
        x, y = self.canvas_position
        return (x, y, x + self.target_width, y + self.target_height)


_SPECS: Dict[SizeKey, SizeSpec] = {
    SizeKey.HALF_PAGE: SizeSpec(300, 600, 0, 660, 0, 284),
    SizeKey.WIDE_SKYSCRAPER: SizeSpec(130, 488, 330, 500, 0, 396),
    SizeKey.LARGE_RECTANGLE: SizeSpec(470, 391, 490, 0, 0, 493),
    SizeKey.FULL_BANNER: SizeSpec(470, 60, 490, 0, 428, 396),
    SizeKey.LEADERBOARD: SizeSpec(630, 77, 330, 0, 523, 284),
    SizeKey.HALF_BANNER: SizeSpec(960, 246, 0, 0, 638, 0),
}


def parse_key(name: Union[str, SizeKey]) -> SizeKey:
    """Convert a wire name (e.g. 'halfPage') to a SizeKey."""
    if isinstance(name, SizeKey):
        return name
    try:
        return SizeKey(name)
    except ValueError:
        raise UnknownSizeKey(name) from None


class SizeCatalog:
    """
    Read-only lookup table of the canonical banner sizes.

    Safe to share between threads and invocations.
    """

    canvas_width = CANVAS_WIDTH
    canvas_height = CANVAS_HEIGHT

    def lookup(self, key: Union[str, SizeKey]) -> SizeSpec:
        return _SPECS[parse_key(key)]

    @staticmethod
    def keys() -> Tuple[SizeKey, ...]:
        """All size keys in canonical order."""
        return tuple(SizeKey)

    def __contains__(self, key) -> bool:
        try:
            parse_key(key)
        except UnknownSizeKey:
            return False
        return True
