"""Structured logging module for mediashrink.

Provides configurable logging with JSON format support, file rotation and
per-file context tagging.
"""

from mediashrink.logging.config import configure_logging
from mediashrink.logging.context import (
    FileContextFilter,
    file_context,
    get_file_context,
)
from mediashrink.logging.formatters import JSONFormatter, text_formatter

__all__ = [
    "FileContextFilter",
    "JSONFormatter",
    "configure_logging",
    "file_context",
    "get_file_context",
    "text_formatter",
]
