"""
ScratchArena - Invocation-private spool directory for intermediate layers.

Every arena gets a unique directory under the scratch root, so concurrent
invocations sharing a host never touch the same files. The directory is
removed when the arena closes, whatever the exit path. Arenas orphaned by a
killed process are reclaimed by `ScratchArena.sweep`.
"""

import logging
import os
import shutil
import tempfile
import time
import uuid
from typing import List, Optional

ARENA_PREFIX = 'bannerset-'


class ScratchArena:
    """
    Context manager owning one invocation's scratch directory.

    Usage:
        with ScratchArena('/tmp/bannerset') as arena:
            path = arena.write('halfPage.png', data)
    """

    def __init__(
        self,
        root: Optional[str] = None,
        invocation_id: Optional[str] = None,
        logger: Optional[logging.Logger] = None
    ):
        self.root = root or tempfile.gettempdir()
        self.invocation_id = invocation_id or uuid.uuid4().hex
        self.logger = logger or logging.getLogger(__name__)
        self.path: Optional[str] = None

    def __enter__(self) -> 'ScratchArena':
        os.makedirs(self.root, exist_ok=True)
        self.path = tempfile.mkdtemp(
            prefix=f"{ARENA_PREFIX}{self.invocation_id}-", dir=self.root
        )
        self.logger.debug(f"Opened scratch arena: {self.path}")
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def close(self) -> None:
        """Remove the arena directory and everything in it."""
        if self.path is None:
            return
        path, self.path = self.path, None
        try:
            shutil.rmtree(path)
            self.logger.debug(f"Removed scratch arena: {path}")
        except FileNotFoundError:
            pass
        except OSError as e:
            self.logger.warning(f"Could not delete {path}: {e}")

    def _resolve(self, name: str) -> str:
        if self.path is None:
            raise RuntimeError("Scratch arena is not open")
        if os.path.basename(name) != name or name in ('', '.', '..'):
            raise ValueError(f"Invalid scratch file name: {name!r}")
        return os.path.join(self.path, name)

    def write(self, name: str, data: bytes) -> str:
        """Write bytes into the arena and return the file path."""
        path = self._resolve(name)
        with open(path, 'wb') as f:
            f.write(data)
        return path

    def read(self, name: str) -> bytes:
        with open(self._resolve(name), 'rb') as f:
            return f.read()

    def list(self) -> List[str]:
        if self.path is None:
            return []
        return sorted(os.listdir(self.path))

    @staticmethod
    def sweep(
        root: str,
        max_age_seconds: float = 3600,
        logger: Optional[logging.Logger] = None
    ) -> int:
        """
        Delete arenas under `root` older than `max_age_seconds`.

        Returns:
            Number of arenas removed
        """
        logger = logger or logging.getLogger(__name__)
        if not os.path.isdir(root):
            return 0

        cutoff = time.time() - max_age_seconds
        removed = 0
        for name in os.listdir(root):
            if not name.startswith(ARENA_PREFIX):
                continue
            path = os.path.join(root, name)
            try:
                if not os.path.isdir(path) or os.path.getmtime(path) > cutoff:
                    continue
                shutil.rmtree(path)
                removed += 1
            except OSError as e:
                logger.warning(f"Could not delete stale arena {path}: {e}")
        if removed:
            logger.info(f"Swept {removed} stale scratch arena(s) from {root}")
        return removed
