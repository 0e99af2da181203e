"""Conversion workflow: admission gates, run context and the run loop."""

from mediashrink.workflow.admission import (
    AdmissionPipeline,
    FatalRunError,
    FileResult,
)
from mediashrink.workflow.context import (
    RunContext,
    RunInterrupted,
    interruption_handler,
)
from mediashrink.workflow.gates import (
    ADMISSION_GATES,
    PRE_DOWNLOAD_GATES,
    AdmissionContext,
    Fatal,
    Proceed,
    Skip,
    run_gates,
)
from mediashrink.workflow.runner import run_conversion
from mediashrink.workflow.summary import RunSummary

__all__ = [
    "ADMISSION_GATES",
    "PRE_DOWNLOAD_GATES",
    "AdmissionContext",
    "AdmissionPipeline",
    "Fatal",
    "FatalRunError",
    "FileResult",
    "Proceed",
    "RunContext",
    "RunInterrupted",
    "RunSummary",
    "Skip",
    "interruption_handler",
    "run_conversion",
    "run_gates",
]
