"""Domain models shared across mediashrink modules."""

from mediashrink.domain.models import (
    OUTPUT_CONTAINER,
    RECORDED_SKIPS,
    TEMP_PREFIX,
    CandidateFile,
    OutcomeStatus,
    SkipReason,
    TranscodeAttempt,
    output_path_for,
    temp_path_for,
)

__all__ = [
    "OUTPUT_CONTAINER",
    "RECORDED_SKIPS",
    "TEMP_PREFIX",
    "CandidateFile",
    "OutcomeStatus",
    "SkipReason",
    "TranscodeAttempt",
    "output_path_for",
    "temp_path_for",
]
