"""Subprocess utilities for external tool invocation.

Every ffmpeg/ffprobe/attrib call goes through run_command() so timeouts,
decoding and debug logging are handled the same way.
"""

from __future__ import annotations

import logging
import subprocess  # nosec B404 - subprocess is required for ffmpeg invocation
import time
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)


def run_command(
    args: list[str | Path],
    timeout: float | None = 120,
    capture_output: bool = True,
    text: bool = True,
    errors: str = "replace",
    **kwargs: Any,
) -> tuple[str, str, int]:
    """Run external command with standard error handling.

    Args:
        args: Command and arguments. Path objects are converted to strings.
        timeout: Timeout in seconds (default 120, None for no limit).
        capture_output: Capture stdout/stderr (default True).
        text: Return text instead of bytes (default True).
        errors: Error handling mode for text decoding (default "replace").
        **kwargs: Additional subprocess.run arguments.

    Returns:
        Tuple of (stdout, stderr, returncode).

    Raises:
        subprocess.TimeoutExpired: If command times out. subprocess.run()
            kills the child before raising.
        FileNotFoundError: If the executable does not exist.
    """
    str_args = [str(arg) for arg in args]
    command_name = Path(str_args[0]).name if str_args else "unknown"

    logger.debug(
        "Executing command: %s",
        " ".join(str_args),
        extra={"command": command_name, "arg_count": len(str_args)},
    )

    start_time = time.monotonic()

    try:
        result = subprocess.run(  # nosec B603 - caller validates args
            str_args,
            capture_output=capture_output,
            text=text,
            errors=errors if text else None,
            timeout=timeout,
            **kwargs,
        )
    except subprocess.TimeoutExpired:
        elapsed = time.monotonic() - start_time
        logger.warning(
            "Command timed out after %ss: %s",
            timeout,
            " ".join(str_args[:3]) + ("..." if len(str_args) > 3 else ""),
            extra={
                "command": command_name,
                "timeout_seconds": timeout,
                "elapsed_seconds": round(elapsed, 3),
            },
        )
        raise

    elapsed = time.monotonic() - start_time
    logger.debug(
        "Command completed",
        extra={
            "command": command_name,
            "elapsed_seconds": round(elapsed, 3),
            "returncode": result.returncode,
        },
    )

    return result.stdout or "", result.stderr or "", result.returncode


def spawn_detached(args: list[str | Path]) -> bool:
    """Start a command without waiting for it.

    Used for fire-and-forget triggers; the child is never joined.

    Returns:
        True if the process was started.
    """
    str_args = [str(arg) for arg in args]
    logger.debug("Spawning command: %s", " ".join(str_args))
    try:
        subprocess.Popen(  # nosec B603 - caller validates args
            str_args,
            stdin=subprocess.DEVNULL,
            stdout=subprocess.DEVNULL,
            stderr=subprocess.DEVNULL,
        )
    except OSError as e:
        logger.warning("Could not start %s: %s", str_args[0], e)
        return False
    return True
