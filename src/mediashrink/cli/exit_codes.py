"""Process exit codes for mediashrink commands.

Scheduled runs (Task Scheduler, cron) only see the exit status, so each
way a run can end early has its own code:

    0   the run finished, whatever each file's outcome
    1   unexpected failure (a Fatal gate, an I/O error outside one file)
    2   interrupted; partial output was removed and history saved
    11  invalid configuration file, environment or option
    20  the library root or a named file does not exist
    30  ffmpeg/ffprobe missing, or no encoder passed its smoke test
"""

from enum import IntEnum

from mediashrink.scanner.discovery import RootNotFoundError
from mediashrink.tools.encoders import NoUsableEncoderError
from mediashrink.tools.paths import ToolNotFoundError
from mediashrink.workflow.context import RunInterrupted


class ExitCode(IntEnum):
    SUCCESS = 0
    GENERAL_ERROR = 1
    INTERRUPTED = 2
    CONFIG_ERROR = 11
    TARGET_NOT_FOUND = 20
    TOOL_NOT_AVAILABLE = 30


_CODES_BY_ERROR: tuple[tuple[type[BaseException], ExitCode], ...] = (
    (RunInterrupted, ExitCode.INTERRUPTED),
    (RootNotFoundError, ExitCode.TARGET_NOT_FOUND),
    (NoUsableEncoderError, ExitCode.TOOL_NOT_AVAILABLE),
    (ToolNotFoundError, ExitCode.TOOL_NOT_AVAILABLE),
)


def exit_code_for(error: BaseException) -> ExitCode:
    """Exit code for an error that ended a run."""
    for error_type, code in _CODES_BY_ERROR:
        if isinstance(error, error_type):
            return code
    return ExitCode.GENERAL_ERROR
