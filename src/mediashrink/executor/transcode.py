"""Transcode executor: full conversion with safe promotion.

The encoder writes to a hidden sibling temp file. Only after the temp file
has been renamed over the canonical output path is the original deleted;
a failed encode or an output that is not smaller never touches the
original.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import TYPE_CHECKING

from mediashrink.core.formatting import (
    format_file_size,
    format_percent,
    savings_percent,
)
from mediashrink.domain.models import (
    CandidateFile,
    OutcomeStatus,
    TranscodeAttempt,
    temp_path_for,
)

if TYPE_CHECKING:
    from mediashrink.cloud.interface import CloudSync
    from mediashrink.executor.interface import Encoder
    from mediashrink.history.store import HistoryStore
    from mediashrink.tools.encoders import EncoderProfile
    from mediashrink.workflow.context import RunContext

logger = logging.getLogger(__name__)


@dataclass
class TranscodeResult:
    """Outcome of a full conversion.

    status is None when the encode failed; nothing is recorded then and
    the file is retried on the next run.
    """

    attempt: TranscodeAttempt
    status: OutcomeStatus | None
    bytes_saved: int = 0
    error_message: str | None = None

    @property
    def success(self) -> bool:
        return self.status is not None


def _cleanup_partial(path: Path) -> None:
    """Remove a partial artifact, logging rather than raising."""
    try:
        path.unlink(missing_ok=True)
    except OSError as e:
        logger.warning("Could not remove temp file %s: %s", path, e)


class TranscodeExecutor:
    """Runs full conversions and settles their outcome."""

    def __init__(
        self,
        encoder: Encoder,
        history: HistoryStore,
        cloud: CloudSync,
        context: RunContext | None = None,
    ) -> None:
        self.encoder = encoder
        self.history = history
        self.cloud = cloud
        self.context = context

    def transcode(
        self, candidate: CandidateFile, profile: EncoderProfile
    ) -> TranscodeAttempt:
        """Encode the whole file into its temp artifact.

        The temp path is registered with the run context for the duration
        of the encode so an interrupt can remove it. A failed attempt
        leaves no temp file behind.
        """
        output = candidate.output_path(profile.codec_family)
        temp = temp_path_for(output)
        attempt = TranscodeAttempt(
            input_path=candidate.path,
            output_path=output,
            temp_path=temp,
            original_size=candidate.path.stat().st_size,
        )

        if temp.exists():
            logger.info("Removing stale temp file from an earlier run: %s", temp)
            _cleanup_partial(temp)

        if self.context is not None:
            self.context.track_temp(temp)
        try:
            attempt.returncode = self.encoder.encode(candidate.path, temp, profile)
        except BaseException:
            _cleanup_partial(temp)
            if self.context is not None:
                self.context.clear_temp()
            raise
        attempt.finished_at = datetime.now(timezone.utc)

        if temp.exists():
            attempt.new_size = temp.stat().st_size

        if not attempt.success:
            _cleanup_partial(temp)
            if self.context is not None:
                self.context.clear_temp()

        return attempt

    def execute(
        self, candidate: CandidateFile, profile: EncoderProfile
    ) -> TranscodeResult:
        """Convert a file and record the result.

        Returns:
            TranscodeResult with status converted, kept-original, or None
            for a failed encode.
        """
        logger.info(
            "Starting transcode: %s (%s) with %s",
            candidate.name,
            format_file_size(candidate.size_bytes),
            profile.id,
            extra={"input_path": str(candidate.path), "encoder": profile.id},
        )
        attempt = self.transcode(candidate, profile)

        new_size = attempt.new_size
        if not attempt.success or new_size is None:
            message = (
                f"encoder exited with {attempt.returncode}"
                if attempt.returncode != 0
                else "encoder produced no output"
            )
            logger.error("Transcode failed for %s: %s", candidate.name, message)
            return TranscodeResult(attempt, None, error_message=message)

        if new_size < attempt.original_size:
            return self._promote(candidate, attempt, new_size)
        return self._discard(candidate, attempt, new_size)

    def _promote(
        self, candidate: CandidateFile, attempt: TranscodeAttempt, new_size: int
    ) -> TranscodeResult:
        try:
            os.replace(attempt.temp_path, attempt.output_path)
        except OSError as e:
            logger.error(
                "Could not move %s into place: %s", attempt.output_path.name, e
            )
            _cleanup_partial(attempt.temp_path)
            return TranscodeResult(attempt, None, error_message=str(e))
        finally:
            if self.context is not None:
                self.context.clear_temp()

        try:
            attempt.input_path.unlink()
        except OSError as e:
            logger.error(
                "Converted %s but could not delete the original: %s",
                candidate.name,
                e,
            )

        bytes_saved = attempt.original_size - new_size
        self.history.record_outcome(
            candidate.path, OutcomeStatus.CONVERTED, bytes_saved
        )
        logger.info(
            "Converted %s: %s -> %s, saved %s (%s)",
            candidate.name,
            format_file_size(attempt.original_size),
            format_file_size(new_size),
            format_file_size(bytes_saved),
            format_percent(savings_percent(attempt.original_size, new_size)),
            extra={
                "original_size": attempt.original_size,
                "new_size": new_size,
                "bytes_saved": bytes_saved,
                "elapsed_seconds": attempt.elapsed_seconds,
            },
        )
        self.cloud.release_to_cloud_only(attempt.output_path)
        return TranscodeResult(attempt, OutcomeStatus.CONVERTED, bytes_saved)

    def _discard(
        self, candidate: CandidateFile, attempt: TranscodeAttempt, new_size: int
    ) -> TranscodeResult:
        _cleanup_partial(attempt.temp_path)
        if self.context is not None:
            self.context.clear_temp()
        logger.info(
            "Output not smaller (%s >= %s), keeping original %s",
            format_file_size(new_size),
            format_file_size(attempt.original_size),
            candidate.name,
        )
        self.history.record_outcome(candidate.path, OutcomeStatus.KEPT_ORIGINAL, 0)
        self.cloud.release_to_cloud_only(candidate.path)
        return TranscodeResult(attempt, OutcomeStatus.KEPT_ORIGINAL, 0)
