"""
BannerSetMetadata - Typed view of the object metadata that describes a banner set.
"""

from dataclasses import dataclass, field
from typing import Dict, FrozenSet, Mapping, Optional

from .errors import InvalidMetadata, UnknownSizeKey
from .size_catalog import SizeKey, parse_key

SIZES_FIELD = 'sizes'
VALID_SIZE_FIELD = 'validsize'
MEMBERSHIP_FIELDS = (SIZES_FIELD, VALID_SIZE_FIELD)


def _parse_size(name: str, field_name: str) -> SizeKey:
    try:
        return parse_key(name)
    except UnknownSizeKey:
        raise InvalidMetadata(f"{field_name} contains unknown size {name!r}") from None


@dataclass(frozen=True)
class BannerSetMetadata:
    """
    Banner set membership plus pass-through metadata.

    Attributes:
        sizes: Size keys present in the set (empty = standalone image)
        valid_size: Size key of the asset being processed
        extra: All other metadata fields, passed through to the thumbnail
    """
    sizes: FrozenSet[SizeKey] = frozenset()
    valid_size: Optional[SizeKey] = None
    extra: Dict[str, str] = field(default_factory=dict)

    @property
    def is_set(self) -> bool:
        return bool(self.sizes)

    @classmethod
    def from_mapping(cls, metadata: Optional[Mapping[str, str]]) -> 'BannerSetMetadata':
        """
        Parse raw object metadata.

        `sizes` is a comma-joined list of size names and `validsize` a single
        name. Field names are matched case-insensitively since S3 lower-cases
        user metadata keys.

        Raises:
            InvalidMetadata: On unknown size names, or a validsize outside sizes
        """
        sizes_raw = None
        valid_raw = None
        extra = {}
        for name, value in (metadata or {}).items():
            lowered = name.lower()
            if lowered == SIZES_FIELD:
                sizes_raw = value
            elif lowered == VALID_SIZE_FIELD:
                valid_raw = value
            else:
                extra[name] = value

        sizes = frozenset(
            _parse_size(part.strip(), SIZES_FIELD)
            for part in (sizes_raw or '').split(',')
            if part.strip()
        )
        valid_size = None
        if valid_raw and valid_raw.strip():
            valid_size = _parse_size(valid_raw.strip(), VALID_SIZE_FIELD)

        result = cls(sizes=sizes, valid_size=valid_size, extra=extra)
        if result.is_set:
            result.validate()
        return result

    def validate(self) -> None:
        """Check set consistency; no-op for standalone images."""
        if not self.is_set:
            return
        if self.valid_size is None:
            raise InvalidMetadata("validsize is required when sizes is present")
        if self.valid_size not in self.sizes:
            raise InvalidMetadata(
                f"validsize {self.valid_size} is not one of sizes "
                f"({', '.join(sorted(str(s) for s in self.sizes))})"
            )

    def to_mapping(self) -> Dict[str, str]:
        """Serialize back to raw object metadata (canonical size order)."""
        data = dict(self.extra)
        if self.is_set:
            data[SIZES_FIELD] = ','.join(str(k) for k in SizeKey if k in self.sizes)
        if self.valid_size is not None:
            data[VALID_SIZE_FIELD] = str(self.valid_size)
        return data
