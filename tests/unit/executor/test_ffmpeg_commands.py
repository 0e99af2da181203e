"""Tests for ffmpeg command construction and FFmpegEncoder."""

import subprocess
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

from mediashrink.executor.command import (
    build_encode_command,
    build_segment_copy_command,
    build_smoke_test_command,
)
from mediashrink.executor.ffmpeg import FFmpegEncoder
from mediashrink.executor.interface import Segment
from mediashrink.tools.encoders import ENCODER_PROFILES

SVT = ENCODER_PROFILES[-1]
FFMPEG = Path("/usr/bin/ffmpeg")


class TestCommands:
    """Tests for the command builders."""

    def test_smoke_test_uses_lavfi_clip(self) -> None:
        cmd = build_smoke_test_command(FFMPEG, SVT, Path("/tmp/probe.mkv"))
        assert cmd[cmd.index("-f") + 1] == "lavfi"
        assert "color=" in cmd[cmd.index("-i") + 1]
        assert "libsvtav1" in cmd
        assert cmd[-1] == str(Path("/tmp/probe.mkv"))

    def test_segment_copy(self) -> None:
        cmd = build_segment_copy_command(
            FFMPEG, Path("in.mp4"), Path("cut.mp4"), Segment(1200.0, 30.0)
        )
        assert cmd[cmd.index("-ss") + 1] == "1200.000"
        assert cmd[cmd.index("-t") + 1] == "30.000"
        assert cmd[cmd.index("-c") + 1] == "copy"
        # Seek before the input for a fast keyframe seek
        assert cmd.index("-ss") < cmd.index("-i")

    def test_full_encode_copies_audio(self) -> None:
        cmd = build_encode_command(FFMPEG, Path("in.mp4"), Path("out.mkv"), SVT)
        assert cmd[cmd.index("-hwaccel") + 1] == "auto"
        assert cmd[cmd.index("-threads") + 1] == "0"
        assert cmd[cmd.index("-c:a") + 1] == "copy"
        assert "0:a?" in cmd
        assert "-ss" not in cmd
        assert cmd[-1] == "out.mkv"

    @pytest.mark.parametrize("name", ["in.mp4", "in.M4V", "in.mov"])
    def test_mov_text_subtitles_become_srt(self, name: str) -> None:
        cmd = build_encode_command(FFMPEG, Path(name), Path("out.mkv"), SVT)
        assert "0:s?" in cmd
        assert cmd[cmd.index("-c:s") + 1] == "srt"

    @pytest.mark.parametrize("name", ["in.mkv", "in.avi", "in.ts"])
    def test_other_subtitles_copied(self, name: str) -> None:
        cmd = build_encode_command(FFMPEG, Path(name), Path("out.mkv"), SVT)
        assert cmd[cmd.index("-c:s") + 1] == "copy"

    def test_segment_encode_is_video_only(self) -> None:
        cmd = build_encode_command(
            FFMPEG, Path("in.mp4"), Path("out.mkv"), SVT, Segment(0.0, 30.0)
        )
        assert "-c:a" not in cmd
        assert "0:a?" not in cmd
        assert cmd[cmd.index("-t") + 1] == "30.000"


@pytest.fixture
def encoder(tmp_path: Path) -> FFmpegEncoder:
    ffmpeg = tmp_path / "ffmpeg"
    ffmpeg.touch()
    return FFmpegEncoder(ffmpeg)


class TestFFmpegEncoder:
    """Tests for FFmpegEncoder with run_command mocked."""

    @patch("mediashrink.executor.ffmpeg.run_command")
    def test_smoke_test_success(self, mock_run: MagicMock, encoder) -> None:
        def fake_run(cmd, timeout):
            Path(cmd[-1]).write_bytes(b"\0" * 10)
            return "", "", 0

        mock_run.side_effect = fake_run
        assert encoder.smoke_test(SVT) is True

    @patch("mediashrink.executor.ffmpeg.run_command")
    def test_smoke_test_empty_output(self, mock_run: MagicMock, encoder) -> None:
        mock_run.return_value = ("", "", 0)
        assert encoder.smoke_test(SVT) is False

    @patch("mediashrink.executor.ffmpeg.run_command")
    def test_smoke_test_failure(self, mock_run: MagicMock, encoder) -> None:
        mock_run.return_value = ("", "Unknown encoder 'av1_nvenc'", 1)
        assert encoder.smoke_test(ENCODER_PROFILES[0]) is False

    @patch("mediashrink.executor.ffmpeg.run_command")
    def test_encode_returns_exit_code(self, mock_run: MagicMock, encoder) -> None:
        mock_run.return_value = ("", "boom", 187)
        assert encoder.encode(Path("in.mp4"), Path("out.mkv"), SVT) == 187

    @patch("mediashrink.executor.ffmpeg.run_command")
    def test_encode_timeout(self, mock_run: MagicMock, encoder) -> None:
        mock_run.side_effect = subprocess.TimeoutExpired(cmd="ffmpeg", timeout=1)
        assert encoder.encode(Path("in.mp4"), Path("out.mkv"), SVT) == -1

    @patch("mediashrink.executor.ffmpeg.run_command")
    def test_copy_segment_launch_failure(self, mock_run: MagicMock, encoder) -> None:
        mock_run.side_effect = FileNotFoundError("ffmpeg")
        assert (
            encoder.copy_segment(Path("a.mp4"), Path("b.mp4"), Segment(0, 5)) is False
        )
