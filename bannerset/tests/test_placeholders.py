"""Tests for PlaceholderProvider."""

import io

import pytest
from PIL import Image

from bannerset.errors import UnknownSizeKey
from bannerset.placeholders import PlaceholderProvider
from bannerset.size_catalog import SizeKey


class TestPlaceholderProvider:
    """Tests for PlaceholderProvider."""

    def test_placeholder_is_svg(self):
        """Test placeholders are SVG documents."""
        svg = PlaceholderProvider().placeholder('halfPage')

        assert svg.startswith(b'<svg')
        assert b'viewBox="0 0 48.9 97.9"' in svg
        assert b'rgba(0,0,0,0.2)' in svg

    def test_distinct_per_key(self):
        """Test every size has its own artwork."""
        provider = PlaceholderProvider()
        artwork = {provider.placeholder(key) for key in SizeKey}

        assert len(artwork) == 6

    def test_placeholder_is_stable(self):
        """Test the same bytes are returned on every call."""
        provider = PlaceholderProvider()

        assert provider.placeholder(SizeKey.LEADERBOARD) == PlaceholderProvider().placeholder('leaderboard')

    def test_unknown_key(self):
        """Test unknown size keys are rejected."""
        with pytest.raises(UnknownSizeKey):
            PlaceholderProvider().placeholder('banner')

    def test_rasterize_with_width(self):
        """Test rasterizing keeps the viewBox aspect ratio."""
        png = PlaceholderProvider().rasterize('halfPage', width=300)

        img = Image.open(io.BytesIO(png))
        assert img.size[0] == 300
        assert abs(img.size[1] - 600) <= 1

    def test_rasterize_is_semi_transparent(self):
        """Test the placeholder rectangle is 20% opaque."""
        png = PlaceholderProvider().rasterize('largeRectangle', width=200)

        img = Image.open(io.BytesIO(png)).convert('RGBA')
        alpha = img.getpixel((img.size[0] // 2, img.size[1] // 2))[3]
        assert 45 <= alpha <= 57

