"""Domain models for mediashrink.

Core types shared by the scanner, the admission gates, the executor and
the history store.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from pathlib import Path

# Files written next to their output while an encode is running
TEMP_PREFIX = ".mediashrink_tmp_"

# Container used for every conversion output
OUTPUT_CONTAINER = ".mkv"


class OutcomeStatus(str, Enum):
    """Persisted outcome of evaluating a file."""

    CONVERTED = "converted"
    KEPT_ORIGINAL = "kept-original"
    SKIPPED_LOW_BITRATE = "skipped-low-bitrate"
    SKIPPED_LOW_SAVINGS = "skipped-low-savings"
    SKIPPED_TEST_LOW_SAVINGS = "skipped-test-low-savings"


class SkipReason(str, Enum):
    """Why a file left the pipeline without a full transcode.

    Only some reasons are persisted; see RECORDED_SKIPS.
    """

    OUTPUT_EXISTS = "output-exists"
    IN_HISTORY = "in-history"
    PROBE_FAILED = "probe-failed"
    LOW_BITRATE = "low-bitrate"
    LOW_STATIC_SAVINGS = "low-static-savings"
    DOWNLOAD_TIMEOUT = "download-timeout"
    LOW_TRIAL_SAVINGS = "low-trial-savings"
    INSUFFICIENT_DISK_SPACE = "insufficient-disk-space"


# Skips that become permanent history records
RECORDED_SKIPS: dict[SkipReason, OutcomeStatus] = {
    SkipReason.LOW_BITRATE: OutcomeStatus.SKIPPED_LOW_BITRATE,
    SkipReason.LOW_STATIC_SAVINGS: OutcomeStatus.SKIPPED_LOW_SAVINGS,
    SkipReason.LOW_TRIAL_SAVINGS: OutcomeStatus.SKIPPED_TEST_LOW_SAVINGS,
}


def output_path_for(source: Path, codec_family: str) -> Path:
    """Canonical conversion output for a source file.

    movie.mp4 -> movie.av1.mkv, in the same directory.
    """
    return source.with_name(f"{source.stem}.{codec_family}{OUTPUT_CONTAINER}")


def temp_path_for(output: Path) -> Path:
    """Sibling temp artifact an encode writes to before promotion."""
    return output.with_name(f"{TEMP_PREFIX}{output.name}")


@dataclass
class CandidateFile:
    """One on-disk media file eligible for processing.

    Probe fields are filled in lazily, at most once per run.
    """

    path: Path
    size_bytes: int
    codec: str | None = None
    bitrate_kbps: int | None = None
    duration_seconds: float | None = None
    probed: bool = False

    @property
    def name(self) -> str:
        return self.path.name

    def output_path(self, codec_family: str) -> Path:
        return output_path_for(self.path, codec_family)


@dataclass
class TranscodeAttempt:
    """A single full conversion, owned by the executor while it runs."""

    input_path: Path
    output_path: Path
    temp_path: Path
    original_size: int
    started_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    finished_at: datetime | None = None
    returncode: int | None = None
    new_size: int | None = None

    @property
    def success(self) -> bool:
        """Encoder exited cleanly and left a non-empty artifact."""
        return self.returncode == 0 and bool(self.new_size)

    @property
    def elapsed_seconds(self) -> float | None:
        if self.finished_at is None:
            return None
        return (self.finished_at - self.started_at).total_seconds()
