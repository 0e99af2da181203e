"""End-of-run summary."""

from __future__ import annotations

import logging
from collections import Counter
from dataclasses import dataclass, field
from typing import Any

from mediashrink.core.formatting import format_file_size
from mediashrink.domain.models import OutcomeStatus, SkipReason
from mediashrink.workflow.admission import FileResult

logger = logging.getLogger(__name__)


@dataclass
class RunSummary:
    """Counts and savings for one run."""

    encoder: str | None = None
    files_scanned: int = 0
    converted: int = 0
    kept_original: int = 0
    failed: int = 0
    skipped: Counter[SkipReason] = field(default_factory=Counter)
    bytes_saved: int = 0
    total_saved_bytes: int = 0
    interrupted: bool = False

    def add(self, result: FileResult) -> None:
        if result.failed:
            self.failed += 1
        elif result.skip_reason is not None:
            self.skipped[result.skip_reason] += 1
        elif result.status is OutcomeStatus.CONVERTED:
            self.converted += 1
            self.bytes_saved += result.bytes_saved
        elif result.status is OutcomeStatus.KEPT_ORIGINAL:
            self.kept_original += 1

    @property
    def files_processed(self) -> int:
        return (
            self.converted
            + self.kept_original
            + self.failed
            + sum(self.skipped.values())
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "encoder": self.encoder,
            "files_scanned": self.files_scanned,
            "files_processed": self.files_processed,
            "converted": self.converted,
            "kept_original": self.kept_original,
            "failed": self.failed,
            "skipped": {
                reason.value: count for reason, count in sorted(self.skipped.items())
            },
            "bytes_saved": self.bytes_saved,
            "total_saved_bytes": self.total_saved_bytes,
            "interrupted": self.interrupted,
        }

    def log(self) -> None:
        logger.info(
            "Run %s: %d scanned, %d converted, %d kept original, "
            "%d skipped, %d failed",
            "interrupted" if self.interrupted else "complete",
            self.files_scanned,
            self.converted,
            self.kept_original,
            sum(self.skipped.values()),
            self.failed,
        )
        for reason, count in sorted(self.skipped.items()):
            logger.info("  skipped (%s): %d", reason.value, count)
        logger.info(
            "Saved %s this run, %s in total",
            format_file_size(self.bytes_saved),
            format_file_size(self.total_saved_bytes),
        )
