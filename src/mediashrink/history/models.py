"""Pydantic schema of the persisted history file.

Current layout (schema_version 2)::

    {
      "schema_version": 2,
      "total_saved_bytes": 623902720,
      "files": {
        "Movies/film.mp4": {
          "status": "converted",
          "timestamp": "2026-10-01T21:14:03+00:00",
          "bytes_saved": 623902720
        }
      }
    }

Legacy files written before versioning carry no schema_version and use
"total_saved" plus per-file "time"/"saved" keys; migrate_document()
rewrites them into the current layout.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, model_validator

from mediashrink.domain.models import OutcomeStatus

SCHEMA_VERSION = 2


class HistoryRecord(BaseModel):
    """Outcome of one previously evaluated file."""

    model_config = ConfigDict(frozen=True)

    status: OutcomeStatus
    timestamp: datetime
    bytes_saved: int = Field(default=0, ge=0)

    @model_validator(mode="after")
    def savings_only_for_conversions(self) -> HistoryRecord:
        """Only converted records may carry a savings figure."""
        if self.status is not OutcomeStatus.CONVERTED and self.bytes_saved:
            raise ValueError(
                f"bytes_saved must be 0 for status {self.status.value}, "
                f"got {self.bytes_saved}"
            )
        return self


class HistoryDocument(BaseModel):
    """Whole history file."""

    schema_version: Literal[2] = SCHEMA_VERSION
    total_saved_bytes: int = Field(default=0, ge=0)
    files: dict[str, HistoryRecord] = Field(default_factory=dict)

    def converted_total(self) -> int:
        """Sum of bytes_saved over converted records."""
        return sum(
            record.bytes_saved
            for record in self.files.values()
            if record.status is OutcomeStatus.CONVERTED
        )


# Legacy status spellings seen in unversioned files
_LEGACY_STATUS = {
    "converted": "converted",
    "kept_original": "kept-original",
    "kept": "kept-original",
    "skipped_low_bitrate": "skipped-low-bitrate",
    "low_bitrate": "skipped-low-bitrate",
    "skipped_low_savings": "skipped-low-savings",
    "low_savings": "skipped-low-savings",
    "skipped_test_low_savings": "skipped-test-low-savings",
    "test_low_savings": "skipped-test-low-savings",
}


def migrate_document(raw: dict[str, Any]) -> dict[str, Any]:
    """Bring a raw history dict up to the current schema.

    Documents that already declare the current version are returned
    unchanged. Unknown future versions raise ValueError.
    """
    version = raw.get("schema_version")
    if version == SCHEMA_VERSION:
        return raw
    if version is not None:
        raise ValueError(f"Unsupported history schema_version: {version!r}")

    files: dict[str, Any] = {}
    for key, entry in (raw.get("files") or {}).items():
        if not isinstance(entry, dict):
            files[key] = entry
            continue
        status = str(entry.get("status", ""))
        files[key] = {
            "status": _LEGACY_STATUS.get(status, status),
            "timestamp": entry.get("timestamp", entry.get("time")),
            "bytes_saved": entry.get("bytes_saved", entry.get("saved", 0)) or 0,
        }

    return {
        "schema_version": SCHEMA_VERSION,
        "total_saved_bytes": raw.get("total_saved_bytes", raw.get("total_saved", 0)),
        "files": files,
    }
