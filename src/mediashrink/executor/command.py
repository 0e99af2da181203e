"""ffmpeg command construction."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from mediashrink.executor.interface import Segment
    from mediashrink.tools.encoders import EncoderProfile

SMOKE_TEST_SOURCE = "color=c=black:s=256x256:r=25:d=1"

_BASE_ARGS = ("-hide_banner", "-nostdin", "-loglevel", "error", "-y")

# MP4-family subtitles are mov_text, which Matroska cannot hold
_MOV_TEXT_CONTAINERS = frozenset({".mp4", ".m4v", ".mov"})


def _fmt_seconds(value: float) -> str:
    return f"{value:.3f}"


def build_smoke_test_command(
    ffmpeg: Path, profile: EncoderProfile, dest: Path
) -> list[str]:
    """One-second synthetic clip encoded with the profile."""
    return [
        str(ffmpeg),
        *_BASE_ARGS,
        "-f",
        "lavfi",
        "-i",
        SMOKE_TEST_SOURCE,
        *profile.params,
        "-pix_fmt",
        "yuv420p",
        str(dest),
    ]


def build_segment_copy_command(
    ffmpeg: Path, source: Path, dest: Path, segment: Segment
) -> list[str]:
    """Stream copy of the primary video stream within a window."""
    return [
        str(ffmpeg),
        *_BASE_ARGS,
        "-ss",
        _fmt_seconds(segment.start),
        "-i",
        str(source),
        "-t",
        _fmt_seconds(segment.duration),
        "-map",
        "0:v:0",
        "-c",
        "copy",
        str(dest),
    ]


def _subtitle_codec(source: Path) -> str:
    if source.suffix.lower() in _MOV_TEXT_CONTAINERS:
        return "srt"
    return "copy"


def build_encode_command(
    ffmpeg: Path,
    source: Path,
    dest: Path,
    profile: EncoderProfile,
    segment: Segment | None = None,
) -> list[str]:
    """Encode command for a trial segment or a full conversion.

    Decoding uses hardware acceleration when available and encoding uses
    every available thread. A full conversion copies audio untouched.
    Subtitles are copied too, except mov_text tracks from MP4-family
    sources, which are converted to SRT.
    """
    cmd = [str(ffmpeg), *_BASE_ARGS, "-hwaccel", "auto"]
    if segment is not None:
        cmd += ["-ss", _fmt_seconds(segment.start)]
    cmd += ["-i", str(source)]
    if segment is not None:
        cmd += ["-t", _fmt_seconds(segment.duration), "-map", "0:v:0"]
    else:
        cmd += ["-map", "0:v:0", "-map", "0:a?", "-map", "0:s?"]
    cmd += list(profile.params)
    if segment is None:
        cmd += ["-c:a", "copy", "-c:s", _subtitle_codec(source)]
    cmd += ["-threads", "0", str(dest)]
    return cmd
