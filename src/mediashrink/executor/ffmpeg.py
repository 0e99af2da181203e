"""ffmpeg implementation of the Encoder protocol."""

from __future__ import annotations

import logging
import subprocess  # nosec B404 - subprocess is required for ffmpeg invocation
import tempfile
from pathlib import Path
from typing import TYPE_CHECKING

from mediashrink.core.subprocess_utils import run_command
from mediashrink.executor.command import (
    build_encode_command,
    build_segment_copy_command,
    build_smoke_test_command,
)
from mediashrink.tools.paths import require_tool

if TYPE_CHECKING:
    from mediashrink.executor.interface import Segment
    from mediashrink.tools.encoders import EncoderProfile

logger = logging.getLogger(__name__)

SMOKE_TEST_TIMEOUT = 30
SEGMENT_COPY_TIMEOUT = 600


class FFmpegEncoder:
    """Runs ffmpeg for smoke tests, trial segments and full conversions."""

    def __init__(
        self,
        ffmpeg_path: Path | None = None,
        transcode_timeout: float | None = None,
    ) -> None:
        """Initialize the encoder.

        Args:
            ffmpeg_path: Explicit ffmpeg location (None = search PATH).
            transcode_timeout: Ceiling for a full conversion (None = no limit).

        Raises:
            ToolNotFoundError: If ffmpeg is not available.
        """
        self.ffmpeg_path = require_tool("ffmpeg", ffmpeg_path)
        self.transcode_timeout = transcode_timeout

    def smoke_test(self, profile: EncoderProfile) -> bool:
        with tempfile.TemporaryDirectory(prefix="mediashrink_probe_") as tmp:
            dest = Path(tmp) / f"probe_{profile.id}.mkv"
            cmd = build_smoke_test_command(self.ffmpeg_path, profile, dest)
            try:
                _, stderr, returncode = run_command(cmd, timeout=SMOKE_TEST_TIMEOUT)
            except subprocess.TimeoutExpired:
                return False
            except OSError as e:
                logger.warning("Could not run ffmpeg: %s", e)
                return False
            if returncode != 0:
                logger.debug(
                    "Smoke test for %s failed: %s", profile.id, stderr.strip()[-300:]
                )
                return False
            return dest.exists() and dest.stat().st_size > 0

    def copy_segment(self, source: Path, dest: Path, segment: Segment) -> bool:
        cmd = build_segment_copy_command(self.ffmpeg_path, source, dest, segment)
        try:
            _, stderr, returncode = run_command(cmd, timeout=SEGMENT_COPY_TIMEOUT)
        except subprocess.TimeoutExpired:
            return False
        except OSError as e:
            logger.warning("Could not run ffmpeg: %s", e)
            return False
        if returncode != 0:
            logger.warning("Segment extraction failed: %s", stderr.strip()[-300:])
            return False
        return dest.exists() and dest.stat().st_size > 0

    def encode(
        self,
        source: Path,
        dest: Path,
        profile: EncoderProfile,
        segment: Segment | None = None,
    ) -> int:
        cmd = build_encode_command(self.ffmpeg_path, source, dest, profile, segment)
        timeout = self.transcode_timeout
        if segment is not None:
            # Generous: software AV1 can run well below realtime
            timeout = segment.duration * 30 + 120
        try:
            _, stderr, returncode = run_command(cmd, timeout=timeout)
        except subprocess.TimeoutExpired:
            return -1
        except OSError as e:
            logger.error("Could not run ffmpeg: %s", e)
            return -1
        if returncode != 0:
            logger.error(
                "ffmpeg exited with %d: %s", returncode, stderr.strip()[-500:]
            )
        return returncode
