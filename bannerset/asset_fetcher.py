"""
AssetFetcher - Retrieves sibling banner images from the object store.
"""

import logging
from typing import Optional, Union

from .errors import AssetNotFound
from .size_catalog import SizeKey, parse_key


def sibling_key(object_key_prefix: str, key: Union[str, SizeKey]) -> str:
    """Object key of the banner for `key` within a set, e.g. 'abc-halfPage'."""
    return f"{object_key_prefix}-{parse_key(key)}"


class AssetFetcher:
    """
    Fetches the sibling image of a banner set for a given size key.

    Works with any storage client exposing `download_object(container, key)`
    (S3Client or LocalClient). Misses surface as AssetNotFound; there are no
    retries here.
    """

    def __init__(self, storage_client, logger: Optional[logging.Logger] = None):
        """
        Initialize asset fetcher.

        Args:
            storage_client: Storage client instance (S3Client or LocalClient)
            logger: Optional logger instance
        """
        self.store = storage_client
        self.logger = logger or logging.getLogger(__name__)

    def fetch(
        self,
        container_id: str,
        object_key_prefix: str,
        key: Union[str, SizeKey]
    ) -> bytes:
        object_key = sibling_key(object_key_prefix, key)
        self.logger.debug(f"Fetching sibling: {container_id}/{object_key}")
        try:
            return self.store.download_object(container_id, object_key)
        except AssetNotFound:
            self.logger.error(f"Sibling asset missing: {container_id}/{object_key}")
            raise
