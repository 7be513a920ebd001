"""
LocalClient - Filesystem object store with the same interface as S3Client.

Layout: <root_path>/<container>/<key>. User metadata and content type live in
a '<key>.meta.json' sidecar next to the object.
"""

import json
import logging
import os
from dataclasses import dataclass
from typing import Dict, List, Optional

from .errors import AssetNotFound

META_SUFFIX = '.meta.json'


@dataclass
class LocalConfig:
    """
    Local storage configuration.

    Attributes:
        root_path: Directory holding one subdirectory per container
    """
    root_path: str

    def validate(self) -> List[str]:
        """Return a list of configuration errors (empty if valid)."""
        errors = []
        if not self.root_path:
            errors.append("Local root path is required")
        elif not os.path.isdir(self.root_path):
            errors.append(f"Local root does not exist: {self.root_path}")
        return errors


class LocalClient:
    """
    Object store backed by the local filesystem.
    """

    def __init__(self, config: LocalConfig, logger: Optional[logging.Logger] = None):
        self.config = config
        self.logger = logger or logging.getLogger(__name__)

    def _path(self, container: str, key: str) -> str:
        root = os.path.realpath(self.config.root_path)
        path = os.path.realpath(os.path.join(root, container, key))
        if not path.startswith(root + os.sep):
            raise ValueError(f"Key escapes storage root: {container}/{key}")
        return path

    def object_exists(self, container: str, key: str) -> bool:
        return os.path.isfile(self._path(container, key))

    def get_object_metadata(self, container: str, key: str) -> Optional[dict]:
        path = self._path(container, key)
        if not os.path.isfile(path):
            return None
        sidecar = {}
        if os.path.isfile(path + META_SUFFIX):
            with open(path + META_SUFFIX, 'r', encoding='utf-8') as f:
                sidecar = json.load(f)
        return {
            'size': os.path.getsize(path),
            'content_type': sidecar.get('content_type', 'application/octet-stream'),
            'metadata': dict(sidecar.get('metadata', {})),
        }

    def download_object(self, container: str, key: str) -> bytes:
        """
        Read an object's bytes.

        Raises:
            AssetNotFound: If the object does not exist
        """
        try:
            with open(self._path(container, key), 'rb') as f:
                return f.read()
        except FileNotFoundError as e:
            raise AssetNotFound(container, key) from e

    def upload_object(
        self,
        container: str,
        key: str,
        data: bytes,
        content_type: str = 'application/octet-stream',
        metadata: Optional[Dict[str, str]] = None
    ) -> None:
        path = self._path(container, key)
        os.makedirs(os.path.dirname(path), exist_ok=True)
        # Readers never see a partial object.
        tmp_path = f"{path}.{os.getpid()}.tmp"
        with open(tmp_path, 'wb') as f:
            f.write(data)
        os.replace(tmp_path, path)
        with open(path + META_SUFFIX, 'w', encoding='utf-8') as f:
            json.dump({'content_type': content_type, 'metadata': metadata or {}}, f)

    def delete_object(self, container: str, key: str) -> None:
        """Delete an object and its metadata sidecar, if present."""
        path = self._path(container, key)
        for target in (path, path + META_SUFFIX):
            try:
                os.remove(target)
            except FileNotFoundError:
                pass
