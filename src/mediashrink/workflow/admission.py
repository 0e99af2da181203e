"""Admission pipeline: gates, skip bookkeeping and the full transcode."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass

from mediashrink.domain.models import (
    RECORDED_SKIPS,
    CandidateFile,
    OutcomeStatus,
    SkipReason,
)
from mediashrink.executor.transcode import TranscodeExecutor
from mediashrink.workflow.gates import (
    ADMISSION_GATES,
    PRE_DOWNLOAD_GATES,
    AdmissionContext,
    Fatal,
    Gate,
    Proceed,
    Skip,
    run_gates,
)

logger = logging.getLogger(__name__)

# How far past the current file to look for prefetch candidates, as a
# multiple of prefetch_count. Most of a library is skipped by the cheap
# gates, so a window of exactly prefetch_count would rarely fill.
PREFETCH_LOOKAHEAD_FACTOR = 5


class FatalRunError(Exception):
    """Raised when the run cannot continue at all."""

    pass


@dataclass
class FileResult:
    """What happened to one candidate."""

    candidate: CandidateFile
    status: OutcomeStatus | None = None
    skip_reason: SkipReason | None = None
    bytes_saved: int = 0
    failed: bool = False
    detail: str = ""


class AdmissionPipeline:
    """Runs each candidate through the gates and, if admitted, converts it."""

    def __init__(
        self,
        ctx: AdmissionContext,
        executor: TranscodeExecutor,
        gates: Sequence[Gate] = ADMISSION_GATES,
        pre_download_gates: Sequence[Gate] = PRE_DOWNLOAD_GATES,
    ) -> None:
        self.ctx = ctx
        self.executor = executor
        self.gates = tuple(gates)
        self.pre_download_gates = tuple(pre_download_gates)

    @property
    def prefetch_window(self) -> int:
        return self.ctx.downloads.prefetch_count * PREFETCH_LOOKAHEAD_FACTOR

    def admits_for_prefetch(self, candidate: CandidateFile) -> bool:
        """Whether a candidate would get past the header-only gates.

        Used to decide what is worth downloading ahead of time. Probing a
        cloud-only file reads only its header.
        """
        return isinstance(
            run_gates(candidate, self.ctx, self.pre_download_gates), Proceed
        )

    def process(
        self,
        candidate: CandidateFile,
        upcoming: Sequence[CandidateFile] = (),
    ) -> FileResult:
        """Evaluate one candidate and settle the outcome.

        Args:
            candidate: File to process.
            upcoming: Candidates that follow it, in order; the first few
                admissible ones are prefetched before the transcode starts.

        Raises:
            FatalRunError: If a gate reports a condition that ends the run.
        """
        outcome = run_gates(candidate, self.ctx, self.gates)

        if isinstance(outcome, Fatal):
            raise FatalRunError(outcome.message)
        if isinstance(outcome, Skip):
            return self._settle_skip(candidate, outcome)

        if upcoming:
            self.ctx.downloads.prefetch(
                upcoming[: self.prefetch_window], self.admits_for_prefetch
            )

        result = self.executor.execute(candidate, self.ctx.profile)
        return FileResult(
            candidate=candidate,
            status=result.status,
            bytes_saved=result.bytes_saved,
            failed=not result.success,
            detail=result.error_message or "",
        )

    def _settle_skip(self, candidate: CandidateFile, skip: Skip) -> FileResult:
        status = RECORDED_SKIPS.get(skip.reason)
        if status is not None:
            self.ctx.history.record_outcome(candidate.path, status, 0)

        log = logger.info if skip.reason is not SkipReason.IN_HISTORY else logger.debug
        log(
            "Skipping %s: %s%s",
            candidate.name,
            skip.reason.value,
            f" ({skip.detail})" if skip.detail else "",
            extra={
                "input_path": str(candidate.path),
                "skip_reason": skip.reason.value,
            },
        )

        if skip.release and self.ctx.downloads.is_local(candidate.path):
            self.ctx.downloads.cloud.release_to_cloud_only(candidate.path)

        return FileResult(
            candidate=candidate,
            status=status,
            skip_reason=skip.reason,
            detail=skip.detail,
        )
