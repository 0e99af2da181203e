"""Per-file context for the run log.

The pipeline handles one file at a time; wrapping that work in
file_context() tags every log line emitted meanwhile with the file's
sequence number and path.
"""

from __future__ import annotations

import contextvars
import logging
from contextlib import contextmanager
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Generator

_file_id: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "file_id", default=None
)
_file_path: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "file_path", default=None
)


@contextmanager
def file_context(
    file_id: str, file_path: Path | str | None = None
) -> Generator[None, None, None]:
    """Tag log records with the file being processed.

    Example:
        with file_context("F007", "/library/movie.mkv"):
            logger.info("Probing")  # -> "[F007] ... Probing"
    """
    id_token = _file_id.set(file_id)
    path_token = _file_path.set(str(file_path) if file_path is not None else None)
    try:
        yield
    finally:
        _file_id.reset(id_token)
        _file_path.reset(path_token)


def get_file_context() -> tuple[str | None, str | None]:
    """Return (file_id, file_path) for the current context."""
    return _file_id.get(), _file_path.get()


class FileContextFilter(logging.Filter):
    """Logging filter that injects file context into log records.

    Adds file_id and file_path for JSON output and a compact file_tag
    ("[F007] " or "") for the text format.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        file_id, file_path = get_file_context()
        record.file_id = file_id
        record.file_path = file_path
        record.file_tag = f"[{file_id}] " if file_id else ""
        return True
