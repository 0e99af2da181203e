"""Admission gates.

Each gate takes a candidate and the shared AdmissionContext and returns a
GateOutcome: Proceed, Skip or Fatal. Gates never write history or release
files themselves; the pipeline settles a Skip according to its reason.
That keeps the pre-download gates safe to evaluate speculatively for
prefetch.

Order matters and is expressed as data (PRE_DOWNLOAD_GATES,
ADMISSION_GATES): cheap header-only checks run before anything that
costs bandwidth, CPU or disk.
"""

from __future__ import annotations

import logging
import shutil
from collections.abc import Callable
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING, NamedTuple, Union

from mediashrink.core.formatting import format_file_size, format_percent
from mediashrink.domain.models import CandidateFile, SkipReason
from mediashrink.estimator.static import estimate
from mediashrink.estimator.trial import TrialResult, trial_encode
from mediashrink.introspector.interface import MediaProbeError

if TYPE_CHECKING:
    from mediashrink.cloud.downloads import DownloadCoordinator
    from mediashrink.config.models import ConversionConfig
    from mediashrink.executor.interface import Encoder
    from mediashrink.history.store import HistoryStore
    from mediashrink.introspector.interface import MediaProber
    from mediashrink.tools.encoders import EncoderProfile

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Proceed:
    """The gate passed."""


@dataclass(frozen=True)
class Skip:
    """Stop processing this file.

    Attributes:
        reason: Why; decides whether a history record is written.
        detail: Human-readable figures for the log.
        release: Whether a local copy should be handed back to the cloud.
    """

    reason: SkipReason
    detail: str = ""
    release: bool = False


@dataclass(frozen=True)
class Fatal:
    """Stop the whole run."""

    message: str


GateOutcome = Union[Proceed, Skip, Fatal]

PROCEED = Proceed()


class DiskUsage(NamedTuple):
    total: int
    used: int
    free: int


@dataclass
class AdmissionContext:
    """Collaborators and thresholds shared by all gates for one run."""

    config: ConversionConfig
    root: Path
    history: HistoryStore
    prober: MediaProber
    downloads: DownloadCoordinator
    encoder: Encoder
    profile: EncoderProfile
    disk_usage: Callable[[Path], DiskUsage] = shutil.disk_usage
    trials: dict[Path, TrialResult | None] = field(default_factory=dict)


Gate = Callable[[CandidateFile, AdmissionContext], GateOutcome]


def output_exists_gate(candidate: CandidateFile, ctx: AdmissionContext) -> GateOutcome:
    """Skip when the conversion output already sits next to the file."""
    output = candidate.output_path(ctx.profile.codec_family)
    if output.exists():
        return Skip(SkipReason.OUTPUT_EXISTS, f"{output.name} already exists")
    return PROCEED


def history_gate(candidate: CandidateFile, ctx: AdmissionContext) -> GateOutcome:
    """Skip files with any recorded outcome."""
    record = ctx.history.get(candidate.path)
    if record is not None:
        return Skip(SkipReason.IN_HISTORY, f"recorded as {record.status.value}")
    return PROCEED


def probe_gate(candidate: CandidateFile, ctx: AdmissionContext) -> GateOutcome:
    """Attach codec, bitrate and duration from the container header.

    A probe failure is a retryable skip, unless the root folder itself has
    gone away, which ends the run.
    """
    if candidate.probed:
        return PROCEED
    try:
        result = ctx.prober.probe(candidate.path)
    except MediaProbeError as e:
        if not ctx.root.is_dir():
            return Fatal(f"Library root is no longer reachable: {ctx.root}")
        return Skip(SkipReason.PROBE_FAILED, str(e))

    candidate.codec = result.codec
    candidate.bitrate_kbps = result.bitrate_kbps
    candidate.duration_seconds = result.duration_seconds
    candidate.probed = True
    return PROCEED


def bitrate_gate(candidate: CandidateFile, ctx: AdmissionContext) -> GateOutcome:
    """Skip files whose known bitrate is under the floor."""
    floor = ctx.config.min_bitrate_kbps
    if candidate.bitrate_kbps is not None and candidate.bitrate_kbps < floor:
        return Skip(
            SkipReason.LOW_BITRATE,
            f"{candidate.bitrate_kbps} kbps < {floor} kbps",
            release=True,
        )
    return PROCEED


def static_savings_gate(
    candidate: CandidateFile, ctx: AdmissionContext
) -> GateOutcome:
    """Skip files whose codec predicts too little savings."""
    predicted = estimate(candidate.codec, candidate.size_bytes)
    minimum = ctx.config.min_savings_percent
    if predicted.predicted_percent < minimum:
        return Skip(
            SkipReason.LOW_STATIC_SAVINGS,
            f"{candidate.codec or 'unknown codec'} predicts "
            f"{format_percent(predicted.predicted_percent)} < "
            f"{format_percent(minimum)}",
            release=True,
        )
    logger.info(
        "Static estimate for %s (%s): %s -> %s (%s)",
        candidate.name,
        candidate.codec or "unknown codec",
        format_file_size(candidate.size_bytes),
        format_file_size(predicted.predicted_new_size),
        format_percent(predicted.predicted_percent),
        extra={
            "codec": candidate.codec,
            "predicted_percent": predicted.predicted_percent,
        },
    )
    return PROCEED


def materialize_gate(candidate: CandidateFile, ctx: AdmissionContext) -> GateOutcome:
    """Download the full file if it is cloud-resident."""
    if ctx.downloads.ensure_local(candidate.path):
        return PROCEED
    return Skip(
        SkipReason.DOWNLOAD_TIMEOUT,
        f"not local after {ctx.downloads.timeout_seconds}s",
    )


def trial_gate(candidate: CandidateFile, ctx: AdmissionContext) -> GateOutcome:
    """Measure savings on a segment; a failed trial does not block."""
    result = trial_encode(
        ctx.encoder,
        candidate.path,
        ctx.profile,
        ctx.config.trial_seconds,
        candidate.duration_seconds,
    )
    ctx.trials[candidate.path] = result
    if result is None:
        logger.warning(
            "Trial encode failed for %s, attempting full conversion anyway",
            candidate.name,
        )
        return PROCEED
    minimum = ctx.config.min_savings_percent
    if result.percent < minimum:
        return Skip(
            SkipReason.LOW_TRIAL_SAVINGS,
            f"trial saved {format_percent(result.percent)} < "
            f"{format_percent(minimum)}",
            release=True,
        )
    return PROCEED


def disk_space_gate(candidate: CandidateFile, ctx: AdmissionContext) -> GateOutcome:
    """Require free space of disk_space_factor times the input size."""
    required = int(candidate.size_bytes * ctx.config.disk_space_factor)
    try:
        free = ctx.disk_usage(candidate.path.parent).free
    except OSError as e:
        logger.warning("Could not check disk space, proceeding: %s", e)
        return PROCEED
    if free < required:
        return Skip(
            SkipReason.INSUFFICIENT_DISK_SPACE,
            f"{format_file_size(free)} free, need {format_file_size(required)}",
        )
    return PROCEED


PRE_DOWNLOAD_GATES: tuple[Gate, ...] = (
    output_exists_gate,
    history_gate,
    probe_gate,
    bitrate_gate,
    static_savings_gate,
)

ADMISSION_GATES: tuple[Gate, ...] = (
    *PRE_DOWNLOAD_GATES,
    materialize_gate,
    trial_gate,
    disk_space_gate,
)


def run_gates(
    candidate: CandidateFile,
    ctx: AdmissionContext,
    gates: tuple[Gate, ...] = ADMISSION_GATES,
) -> GateOutcome:
    """Apply gates in order; return the first non-Proceed outcome."""
    for gate in gates:
        outcome = gate(candidate, ctx)
        if not isinstance(outcome, Proceed):
            logger.debug("%s stopped at %s", candidate.name, gate.__name__)
            return outcome
    return PROCEED
