"""
Pytest fixtures for bannerset tests.
"""

import io

import pytest
from PIL import Image

from bannerset.errors import AssetNotFound


class MemoryStore:
    """In-memory object store with the S3Client/LocalClient interface."""

    def __init__(self):
        self.objects = {}
        self.downloads = []
        self.uploads = []
        self.deletes = []

    def put(self, container, key, data, content_type='image/png', metadata=None):
        self.objects[(container, key)] = (data, content_type, dict(metadata or {}))

    def object_exists(self, container, key):
        return (container, key) in self.objects

    def get_object_metadata(self, container, key):
        if (container, key) not in self.objects:
            return None
        data, content_type, metadata = self.objects[(container, key)]
        return {'size': len(data), 'content_type': content_type, 'metadata': dict(metadata)}

    def download_object(self, container, key):
        self.downloads.append((container, key))
        if (container, key) not in self.objects:
            raise AssetNotFound(container, key)
        return self.objects[(container, key)][0]

    def upload_object(self, container, key, data, content_type='application/octet-stream', metadata=None):
        self.uploads.append((container, key))
        self.put(container, key, data, content_type, metadata)

    def delete_object(self, container, key):
        self.deletes.append((container, key))
        self.objects.pop((container, key), None)


def _image_bytes(size=(100, 100), color=(255, 0, 0), fmt='PNG', mode='RGB'):
    img = Image.new(mode, size, color=color)
    buffer = io.BytesIO()
    img.save(buffer, format=fmt)
    return buffer.getvalue()


@pytest.fixture
def make_image_bytes():
    """Fixture providing a factory for solid-colour image bytes."""
    return _image_bytes


@pytest.fixture
def sample_image_bytes():
    """Fixture providing sample JPEG image bytes."""
    return _image_bytes(color='red', fmt='JPEG')


@pytest.fixture
def sample_png_bytes():
    """Fixture providing sample PNG image bytes with transparency."""
    return _image_bytes(color=(255, 0, 0, 128), mode='RGBA')


@pytest.fixture
def s3_config():
    """Fixture providing S3 configuration."""
    from bannerset.s3_config import S3Config

    return S3Config(
        endpoint='https://test-endpoint.example.com:9000',
        access_key='test-access-key',
        secret_key='test-secret-key',
        region='us-east-1',
    )


@pytest.fixture
def memory_store():
    """Fixture providing an empty in-memory object store."""
    return MemoryStore()


@pytest.fixture
def banner_store(memory_store):
    """
    Store holding a two-size banner set under banners/abc.

    halfPage is red, wideSkyscraper is blue.
    """
    memory_store.put('banners', 'abc-halfPage', _image_bytes((300, 600), (255, 0, 0)))
    memory_store.put('banners', 'abc-wideSkyscraper', _image_bytes((160, 600), (0, 0, 255)))
    return memory_store


@pytest.fixture
def set_metadata():
    """Fixture providing metadata for the halfPage + wideSkyscraper set."""
    from bannerset.metadata import BannerSetMetadata

    return BannerSetMetadata.from_mapping({
        'sizes': 'halfPage,wideSkyscraper',
        'validsize': 'halfPage',
        'campaign': 'spring',
    })


@pytest.fixture
def composer_factory(banner_store, logger):
    """Fixture providing a factory for composers over the banner store."""
    from bannerset.asset_fetcher import AssetFetcher
    from bannerset.mosaic_composer import MosaicComposer

    def _make(store=None, **kwargs):
        fetcher = AssetFetcher(store or banner_store, logger)
        return MosaicComposer(fetcher, logger=logger, **kwargs)

    return _make


@pytest.fixture
def logger():
    """Fixture providing a logger."""
    import logging
    return logging.getLogger('test')
