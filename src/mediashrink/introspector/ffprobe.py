"""FFprobe-based implementation of the MediaProber protocol."""

import json
import logging
import subprocess  # nosec B404 - subprocess is required for ffprobe invocation
from pathlib import Path

from mediashrink.core.subprocess_utils import run_command
from mediashrink.introspector.interface import MediaProbeError, ProbeResult
from mediashrink.introspector.parsers import parse_probe_output
from mediashrink.tools.paths import require_tool

logger = logging.getLogger(__name__)

# Header fetches on cloud placeholders can be slow
PROBE_TIMEOUT = 120


class FFprobeProber:
    """ffprobe-based prober.

    Results are cached per path for the lifetime of the instance, so the
    prefetch look-ahead and the file's own turn share one ffprobe call.
    """

    def __init__(self, ffprobe_path: Path | None = None) -> None:
        """Initialize the prober.

        Raises:
            ToolNotFoundError: If ffprobe is not available.
        """
        self._ffprobe_path = require_tool("ffprobe", ffprobe_path)
        self._cache: dict[Path, ProbeResult] = {}

    def probe(self, path: Path) -> ProbeResult:
        if path in self._cache:
            return self._cache[path]

        try:
            size_bytes = path.stat().st_size
        except OSError as e:
            raise MediaProbeError(f"Cannot stat {path}: {e}") from e

        try:
            stdout, stderr, returncode = run_command(
                [
                    self._ffprobe_path,
                    "-v",
                    "error",
                    "-print_format",
                    "json",
                    "-select_streams",
                    "v:0",
                    "-show_streams",
                    "-show_format",
                    path,
                ],
                timeout=PROBE_TIMEOUT,
            )
        except subprocess.TimeoutExpired as e:
            raise MediaProbeError(
                f"ffprobe timed out for {path} after {e.timeout}s"
            ) from e
        except OSError as e:
            raise MediaProbeError(f"Could not run ffprobe: {e}") from e

        if returncode != 0:
            raise MediaProbeError(
                f"ffprobe failed for {path}: {stderr.strip() or returncode}"
            )

        try:
            data = json.loads(stdout)
        except json.JSONDecodeError as e:
            raise MediaProbeError(f"Invalid ffprobe output for {path}: {e}") from e

        result = parse_probe_output(path, data, size_bytes)
        self._cache[path] = result
        return result

    def probe_codec(self, path: Path) -> str | None:
        try:
            return self.probe(path).codec
        except MediaProbeError as e:
            logger.debug("Codec probe failed: %s", e)
            return None

    def probe_bitrate(self, path: Path) -> int | None:
        try:
            return self.probe(path).bitrate_kbps
        except MediaProbeError as e:
            logger.debug("Bitrate probe failed: %s", e)
            return None
