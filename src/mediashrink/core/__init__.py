"""Shared helpers with no dependencies on the rest of the package."""

from mediashrink.core.formatting import (
    format_file_size,
    format_percent,
    savings_percent,
)
from mediashrink.core.subprocess_utils import run_command, spawn_detached

__all__ = [
    "format_file_size",
    "format_percent",
    "run_command",
    "savings_percent",
    "spawn_detached",
]
