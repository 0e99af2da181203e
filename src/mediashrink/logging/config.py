"""Run log setup.

The run log goes to a size-rotated file under the data directory when
one is configured, and to stderr otherwise (or additionally, with
include_stderr). Every handler carries the file-context filter so lines
emitted while a file is in the pipeline are tagged with it.
"""

from __future__ import annotations

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import TYPE_CHECKING

from mediashrink.logging.context import FileContextFilter
from mediashrink.logging.formatters import JSONFormatter, text_formatter

if TYPE_CHECKING:
    from mediashrink.config.models import LoggingConfig


def _formatter(config: LoggingConfig) -> logging.Formatter:
    if config.format.casefold() == "json":
        return JSONFormatter()
    return text_formatter()


def _open_run_log(config: LoggingConfig) -> RotatingFileHandler | None:
    """Open the rotating run log, or None if it cannot be created."""
    if config.file is None:
        return None
    path = Path(config.file).expanduser()
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        return RotatingFileHandler(
            path,
            maxBytes=config.max_bytes,
            backupCount=config.backup_count,
            encoding="utf-8",
        )
    except OSError as e:
        sys.stderr.write(f"Warning: Could not open log file {path}: {e}\n")
        return None


def configure_logging(config: LoggingConfig) -> Path | None:
    """Replace the root logger's handlers according to config.

    Returns:
        Path of the run log file in use, or None when logging only to
        stderr (including when the configured file could not be opened).
    """
    level = logging.getLevelName(config.level.upper())
    formatter = _formatter(config)
    context_filter = FileContextFilter()

    handlers: list[logging.Handler] = []
    run_log = _open_run_log(config)
    if run_log is not None:
        handlers.append(run_log)
    if config.include_stderr or run_log is None:
        handlers.append(logging.StreamHandler(sys.stderr))

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.handlers.clear()
    for handler in handlers:
        handler.setLevel(level)
        handler.setFormatter(formatter)
        handler.addFilter(context_filter)
        root_logger.addHandler(handler)

    return Path(run_log.baseFilename) if run_log is not None else None
