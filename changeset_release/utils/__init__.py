"""Utility modules for shared functionality."""

from .constants import (
    MAJOR_CHANGES_MARKER,
    NEW_TAG_PATTERN,
    PATCH_CHANGES_MARKER,
    ROOT_NEW_TAG_PATTERN,
)
from .retry import retry_on_rate_limit

__all__ = [
    "MAJOR_CHANGES_MARKER",
    "PATCH_CHANGES_MARKER",
    "NEW_TAG_PATTERN",
    "ROOT_NEW_TAG_PATTERN",
    "retry_on_rate_limit",
]
