"""Per-run state needed to stop cleanly on an interrupt.

The signal handler has to find the in-flight temp artifact and the
history store without reaching into module globals, so both hang off a
RunContext owned by the runner.
"""

from __future__ import annotations

import logging
import signal
from collections.abc import Generator
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from mediashrink.history.store import HistoryStore

logger = logging.getLogger(__name__)


def _default_signals() -> tuple[signal.Signals, ...]:
    signals = [signal.SIGINT, signal.SIGTERM]
    # Ctrl+Break on Windows consoles
    if hasattr(signal, "SIGBREAK"):
        signals.append(signal.SIGBREAK)
    return tuple(signals)


class RunInterrupted(KeyboardInterrupt):
    """Raised from the signal handler once cleanup has been done."""

    def __init__(self, signum: int) -> None:
        self.signum = signum
        super().__init__(f"Interrupted by {signal.Signals(signum).name}")


@dataclass
class RunContext:
    """Mutable state shared between the pipeline and the signal handler."""

    history: HistoryStore | None = None
    temp_path: Path | None = None
    interrupted_by: int | None = None

    def track_temp(self, path: Path) -> None:
        self.temp_path = path

    def clear_temp(self) -> None:
        self.temp_path = None

    def abort(self, signum: int) -> None:
        """Delete the in-flight temp artifact and flush history.

        Neither step raises; the interrupt must still propagate.
        """
        self.interrupted_by = signum
        temp = self.temp_path
        if temp is not None:
            try:
                temp.unlink(missing_ok=True)
                logger.info("Removed partial output %s", temp.name)
            except OSError as e:
                logger.error("Could not remove partial output %s: %s", temp, e)
            self.temp_path = None

        if self.history is not None:
            try:
                self.history.flush()
            except OSError as e:
                logger.error("Could not flush history on interrupt: %s", e)


@contextmanager
def interruption_handler(
    context: RunContext,
    signals: tuple[signal.Signals, ...] | None = None,
) -> Generator[RunContext, None, None]:
    """Install handlers that clean up and raise RunInterrupted.

    Previous handlers are restored on exit. Must be entered from the main
    thread.
    """

    def handler(signum: int, frame: object) -> None:
        logger.warning(
            "Received %s, cleaning up and stopping...", signal.Signals(signum).name
        )
        context.abort(signum)
        raise RunInterrupted(signum)

    installed = signals if signals is not None else _default_signals()
    previous = {sig: signal.signal(sig, handler) for sig in installed}
    try:
        yield context
    finally:
        for sig, old in previous.items():
            signal.signal(sig, old)
