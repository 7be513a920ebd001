"""
MosaicConfig - Runtime settings for composing and downscaling.
"""

import os
from dataclasses import dataclass
from typing import List, Optional


@dataclass
class MosaicConfig:
    """
    Composer and thumbnail settings.

    Attributes:
        max_workers: Threads used to fetch and format layers (1 = sequential)
        scratch_dir: Spool layers under this directory (None = in memory)
        scratch_max_age: Seconds before an orphaned scratch arena is swept
        thumbnail_width: Width of the emitted thumbnail
    """
    max_workers: int = 4
    scratch_dir: Optional[str] = None
    scratch_max_age: float = 3600.0
    thumbnail_width: int = 640

    @classmethod
    def from_env(cls) -> 'MosaicConfig':
        """Load configuration from BANNERSET_* environment variables."""
        defaults = cls()
        return cls(
            max_workers=int(os.getenv('BANNERSET_MAX_WORKERS', defaults.max_workers)),
            scratch_dir=os.getenv('BANNERSET_SCRATCH_DIR') or None,
            scratch_max_age=float(os.getenv('BANNERSET_SCRATCH_MAX_AGE', defaults.scratch_max_age)),
            thumbnail_width=int(os.getenv('BANNERSET_THUMBNAIL_WIDTH', defaults.thumbnail_width)),
        )

    def validate(self) -> List[str]:
        """Return a list of configuration errors (empty if valid)."""
        errors = []
        if self.max_workers < 1:
            errors.append(f"max_workers must be >= 1 (got {self.max_workers})")
        if self.thumbnail_width < 1:
            errors.append(f"thumbnail_width must be >= 1 (got {self.thumbnail_width})")
        if self.scratch_max_age < 0:
            errors.append(f"scratch_max_age must be >= 0 (got {self.scratch_max_age})")
        return errors
