"""Library root discovery and video file enumeration."""

from mediashrink.scanner.discovery import (
    VIDEO_EXTENSIONS,
    RootNotFoundError,
    discover_candidates,
    discover_root,
    is_conversion_output,
)

__all__ = [
    "VIDEO_EXTENSIONS",
    "RootNotFoundError",
    "discover_candidates",
    "discover_root",
    "is_conversion_output",
]
