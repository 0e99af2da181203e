"""Savings estimation: static codec table and trial-segment encode."""

from mediashrink.estimator.static import (
    CODEC_RATIOS,
    DEFAULT_RATIO,
    StaticEstimate,
    estimate,
    ratio_for,
)
from mediashrink.estimator.trial import TrialResult, trial_encode, trial_segment

__all__ = [
    "CODEC_RATIOS",
    "DEFAULT_RATIO",
    "StaticEstimate",
    "TrialResult",
    "estimate",
    "ratio_for",
    "trial_encode",
    "trial_segment",
]
