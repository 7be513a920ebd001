"""Tests for AssetFetcher."""

from unittest.mock import MagicMock

import pytest

from bannerset.asset_fetcher import AssetFetcher, sibling_key
from bannerset.errors import AssetNotFound, UnknownSizeKey
from bannerset.size_catalog import SizeKey


class TestAssetFetcher:
    """Tests for AssetFetcher."""

    def test_sibling_key(self):
        """Test sibling keys join prefix and size with a dash."""
        assert sibling_key('uploads/abc', SizeKey.LEADERBOARD) == 'uploads/abc-leaderboard'
        assert sibling_key('abc', 'halfPage') == 'abc-halfPage'

    def test_sibling_key_unknown_size(self):
        """Test sibling keys require a canonical size."""
        with pytest.raises(UnknownSizeKey):
            sibling_key('abc', 'tower')

    def test_fetch(self, logger):
        """Test fetching reads the sibling object."""
        store = MagicMock()
        store.download_object.return_value = b'image data'
        fetcher = AssetFetcher(store, logger)

        result = fetcher.fetch('banners', 'abc', 'wideSkyscraper')

        assert result == b'image data'
        store.download_object.assert_called_once_with('banners', 'abc-wideSkyscraper')

    def test_fetch_missing(self, memory_store, logger):
        """Test a missing sibling surfaces as AssetNotFound."""
        fetcher = AssetFetcher(memory_store, logger)

        with pytest.raises(AssetNotFound) as exc_info:
            fetcher.fetch('banners', 'abc', 'halfBanner')

        assert exc_info.value.container == 'banners'
        assert exc_info.value.key == 'abc-halfBanner'

    def test_fetch_does_not_retry(self, logger):
        """Test a failure is raised after a single attempt."""
        store = MagicMock()
        store.download_object.side_effect = AssetNotFound('banners', 'abc-halfPage')
        fetcher = AssetFetcher(store, logger)

        with pytest.raises(AssetNotFound):
            fetcher.fetch('banners', 'abc', 'halfPage')

        assert store.download_object.call_count == 1
