"""
Errors raised by the banner set pipeline.

All of them are fatal to a single invocation; callers decide whether to retry.
"""

from typing import Optional


class BannerSetError(Exception):
    """Base class for banner set processing errors."""


class UnknownSizeKey(BannerSetError, KeyError):
    """Raised when a size key is not one of the canonical six."""

    def __init__(self, key):
        self.key = key
        super().__init__(key)

    def __str__(self) -> str:
        return f"Unknown size key: {self.key!r}"


class UnsupportedImageFormat(BannerSetError):
    """Raised when image bytes cannot be decoded."""

    def __init__(self, key: Optional[str] = None, reason: Optional[str] = None):
        self.key = key
        self.reason = reason
        target = f" for {key}" if key else ""
        detail = f": {reason}" if reason else ""
        super().__init__(f"Cannot decode image{target}{detail}")


class AssetNotFound(BannerSetError):
    """Raised when a sibling asset is missing from the object store."""

    def __init__(self, container: str, key: str):
        self.container = container
        self.key = key
        super().__init__(f"Asset not found: {container}/{key}")


class InvalidMetadata(BannerSetError, ValueError):
    """Raised when `sizes`/`validsize` metadata is malformed or inconsistent."""

    def __init__(self, reason: str):
        self.reason = reason
        super().__init__(f"Invalid banner set metadata: {reason}")
