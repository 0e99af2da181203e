"""Formatters for the run log.

The text form is one line per event, tagged with the file being worked
on. The JSON form is one object per line carrying the numeric figures
(sizes, savings, timings) that the text form only shows pre-formatted.
"""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from typing import Any

TEXT_FORMAT = "%(asctime)s %(levelname)-7s %(file_tag)s%(name)s: %(message)s"
TEXT_DATE_FORMAT = "%Y-%m-%dT%H:%M:%S%z"

# extra= keys passed by the pipeline and the subprocess runner
RUN_FIELDS: tuple[str, ...] = (
    "input_path",
    "encoder",
    "codec",
    "skip_reason",
    "predicted_percent",
    "original_size",
    "new_size",
    "bytes_saved",
    "elapsed_seconds",
    "command",
    "arg_count",
    "returncode",
    "timeout_seconds",
)


def text_formatter() -> logging.Formatter:
    return logging.Formatter(TEXT_FORMAT, datefmt=TEXT_DATE_FORMAT)


class JSONFormatter(logging.Formatter):
    """One JSON object per record.

    Always present: time (UTC ISO-8601), level, logger, message. A
    "file" object appears while a file is being processed, and any of
    RUN_FIELDS the call site supplied are copied through as top-level
    keys. Other extras are not emitted.
    """

    def format(self, record: logging.LogRecord) -> str:
        created = datetime.fromtimestamp(record.created, tz=timezone.utc)
        entry: dict[str, Any] = {
            "time": created.isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        file_id = getattr(record, "file_id", None)
        if file_id:
            entry["file"] = {"id": file_id, "path": getattr(record, "file_path", None)}

        for name in RUN_FIELDS:
            value = getattr(record, name, None)
            if value is not None:
                entry[name] = value

        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)

        return json.dumps(entry, default=str)
