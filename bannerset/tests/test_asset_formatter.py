"""Tests for AssetFormatter."""

import io

import pytest
from PIL import Image

from bannerset.asset_formatter import AssetFormatter, is_svg
from bannerset.errors import UnknownSizeKey, UnsupportedImageFormat
from bannerset.placeholders import PlaceholderProvider
from bannerset.size_catalog import SizeCatalog, SizeKey


def _alpha(png_bytes):
    return Image.open(io.BytesIO(png_bytes)).convert('RGBA').getchannel('A')


class TestAssetFormatter:
    """Tests for AssetFormatter."""

    @pytest.mark.parametrize('key', list(SizeKey))
    def test_layer_fills_canvas(self, key, make_image_bytes):
        """Test every layer is a full 960x884 RGBA canvas."""
        layer = AssetFormatter().format(make_image_bytes((50, 50)), key)

        img = Image.open(io.BytesIO(layer))
        assert img.format == 'PNG'
        assert img.mode == 'RGBA'
        assert img.size == (960, 884)

    @pytest.mark.parametrize('key', list(SizeKey))
    def test_opaque_region_is_slot(self, key, make_image_bytes):
        """Test only the size's rectangle is opaque."""
        layer = AssetFormatter().format(make_image_bytes((123, 45)), key)

        alpha = _alpha(layer)
        box = SizeCatalog().lookup(key).canvas_box
        assert alpha.getbbox() == box
        assert alpha.crop(box).getextrema() == (255, 255)

    def test_resize_ignores_aspect_ratio(self, make_image_bytes):
        """Test a square source is stretched to the banner slot."""
        layer = AssetFormatter().format(make_image_bytes((100, 100), (0, 255, 0)), 'fullBanner')

        img = Image.open(io.BytesIO(layer))
        assert img.getpixel((495, 430)) == (0, 255, 0, 255)
        assert img.getpixel((955, 485)) == (0, 255, 0, 255)
        assert img.getpixel((485, 430))[3] == 0
        assert img.getpixel((955, 490))[3] == 0

    def test_content_colour_kept(self, make_image_bytes):
        """Test a solid source stays solid after sharpening."""
        layer = AssetFormatter().format(make_image_bytes((300, 600), (200, 40, 10)), 'halfPage')

        img = Image.open(io.BytesIO(layer))
        assert img.getpixel((150, 300)) == (200, 40, 10, 255)

    def test_placeholder_round_trip(self):
        """Test a formatted halfBanner placeholder covers exactly its slot."""
        svg = PlaceholderProvider().placeholder('halfBanner')

        alpha = _alpha(AssetFormatter().format(svg, 'halfBanner'))

        assert alpha.getbbox() == (0, 638, 960, 884)
        low, high = alpha.crop((0, 638, 960, 884)).getextrema()
        assert low > 0
        assert high <= 60

    def test_placeholder_matches_upload_shape(self, make_image_bytes):
        """Test placeholder and upload layers share size and mode."""
        formatter = AssetFormatter()

        placeholder = Image.open(io.BytesIO(formatter.format(PlaceholderProvider().placeholder('leaderboard'), 'leaderboard')))
        upload = Image.open(io.BytesIO(formatter.format(make_image_bytes((728, 90)), 'leaderboard')))

        assert placeholder.size == upload.size
        assert placeholder.mode == upload.mode

    def test_transparent_source(self, sample_png_bytes):
        """Test source transparency is kept inside the slot."""
        layer = AssetFormatter().format(sample_png_bytes, 'largeRectangle')

        img = Image.open(io.BytesIO(layer))
        assert img.getpixel((700, 200))[3] == 128

    def test_jpeg_source(self, sample_image_bytes):
        """Test JPEG input is accepted."""
        layer = AssetFormatter().format(sample_image_bytes, 'leaderboard')

        assert Image.open(io.BytesIO(layer)).size == (960, 884)

    def test_deterministic(self, make_image_bytes):
        """Test formatting the same input twice is byte-identical."""
        data = make_image_bytes((64, 32), (10, 20, 30))
        formatter = AssetFormatter()

        assert formatter.format(data, 'halfBanner') == formatter.format(data, 'halfBanner')

    def test_invalid_image(self):
        """Test undecodable bytes raise UnsupportedImageFormat."""
        with pytest.raises(UnsupportedImageFormat) as exc_info:
            AssetFormatter().format(b'not an image', 'halfPage')

        assert exc_info.value.key == 'halfPage'

    def test_invalid_svg(self):
        """Test a broken SVG raises UnsupportedImageFormat."""
        with pytest.raises(UnsupportedImageFormat):
            AssetFormatter().format(b'<svg xmlns="http://www.w3.org/2000/svg"><path', 'halfPage')

    def test_unknown_key(self, make_image_bytes):
        """Test unknown size keys are rejected."""
        with pytest.raises(UnknownSizeKey):
            AssetFormatter().format(make_image_bytes(), 'skyscraper')


class TestIsSvg:
    """Tests for SVG sniffing."""

    def test_svg_root(self):
        assert is_svg(b'  <svg xmlns="http://www.w3.org/2000/svg"></svg>')

    def test_xml_declaration(self):
        assert is_svg(b'<?xml version="1.0"?>\n<svg></svg>')

    def test_png(self, make_image_bytes):
        assert not is_svg(make_image_bytes())

    def test_other_xml(self):
        assert not is_svg(b'<?xml version="1.0"?><html></html>')

    def test_leading_comment(self):
        assert is_svg(b'<!-- exported -->\n<svg xmlns="http://www.w3.org/2000/svg"></svg>')

    def test_doctype(self):
        assert is_svg(
            b'<!DOCTYPE svg PUBLIC "-//W3C//DTD SVG 1.1//EN" '
            b'"http://www.w3.org/Graphics/SVG/1.1/DTD/svg11.dtd">\n<svg></svg>'
        )
