"""Trial-segment savings measurement.

A fixed-length window is cut from the source by stream copy (to measure
the source's real bitrate there) and then encoded with the selected
profile. Both artifacts live in a temporary directory that is removed
whatever happens.
"""

from __future__ import annotations

import logging
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

from mediashrink.core.formatting import savings_percent
from mediashrink.executor.interface import Segment

if TYPE_CHECKING:
    from mediashrink.executor.interface import Encoder
    from mediashrink.tools.encoders import EncoderProfile

logger = logging.getLogger(__name__)

# Fraction of the duration at which the trial window starts; intros and
# title cards are not representative.
TRIAL_START_FRACTION = 1 / 3


@dataclass(frozen=True)
class TrialResult:
    orig_kbps: int
    new_kbps: int
    percent: float


def trial_segment(duration_seconds: float | None, trial_seconds: float) -> Segment:
    """Window to encode for a file of the given duration."""
    if not duration_seconds or duration_seconds <= trial_seconds:
        return Segment(start=0.0, duration=float(trial_seconds))
    start = duration_seconds * TRIAL_START_FRACTION
    start = min(start, duration_seconds - trial_seconds)
    return Segment(start=round(start, 3), duration=float(trial_seconds))


def _kbps(size_bytes: int, seconds: float) -> int:
    return int(round(size_bytes * 8 / seconds / 1000))


def trial_encode(
    encoder: Encoder,
    path: Path,
    profile: EncoderProfile,
    trial_seconds: float,
    duration_seconds: float | None = None,
) -> TrialResult | None:
    """Measure achievable savings on a representative segment.

    Returns:
        TrialResult, or None if either step failed. A failed trial says
        nothing about the full encode, so callers carry on without it.
    """
    segment = trial_segment(duration_seconds, trial_seconds)
    with tempfile.TemporaryDirectory(prefix="mediashrink_trial_") as tmp:
        source_cut = Path(tmp) / f"source{path.suffix or '.mkv'}"
        encoded = Path(tmp) / "encoded.mkv"

        if not encoder.copy_segment(path, source_cut, segment):
            logger.warning("Trial segment extraction failed for %s", path.name)
            return None
        returncode = encoder.encode(
            source_cut, encoded, profile, segment=Segment(0.0, segment.duration)
        )
        if returncode != 0 or not encoded.exists():
            logger.warning(
                "Trial encode failed for %s (exit %s)", path.name, returncode
            )
            return None

        orig_size = source_cut.stat().st_size
        new_size = encoded.stat().st_size
        if orig_size <= 0 or new_size <= 0:
            logger.warning("Trial for %s produced an empty artifact", path.name)
            return None

    result = TrialResult(
        orig_kbps=_kbps(orig_size, segment.duration),
        new_kbps=_kbps(new_size, segment.duration),
        percent=round(savings_percent(orig_size, new_size), 2),
    )
    logger.info(
        "Trial encode of %s: %d kbps -> %d kbps (%.1f%% smaller)",
        path.name,
        result.orig_kbps,
        result.new_kbps,
        result.percent,
    )
    return result
