"""Parsing of ffprobe JSON output into a ProbeResult."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

from mediashrink.introspector.interface import MediaProbeError, ProbeResult

logger = logging.getLogger(__name__)


def _to_float(value: Any) -> float | None:
    if value in (None, "", "N/A"):
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def _bps_to_kbps(bps: float) -> int:
    return int(round(bps / 1000.0))


def parse_probe_output(
    path: Path, data: dict[str, Any], size_bytes: int | None = None
) -> ProbeResult:
    """Extract codec, bitrate and duration from ffprobe output.

    Bitrate precedence: the video stream's bit_rate, then the container's
    bit_rate, then size * 8 / duration.

    Args:
        path: File the output belongs to (for messages).
        data: Parsed JSON from ``ffprobe -show_streams -show_format``.
        size_bytes: File size used for the estimate when the container
            does not report one.

    Raises:
        MediaProbeError: If the output has no video stream.
    """
    streams = data.get("streams") or []
    video = next(
        (s for s in streams if s.get("codec_type", "video") == "video"), None
    )
    if video is None:
        raise MediaProbeError(f"No video stream found in {path}")

    fmt = data.get("format") or {}
    codec = video.get("codec_name")
    codec = codec.casefold() if isinstance(codec, str) and codec else None

    duration = _to_float(fmt.get("duration")) or _to_float(video.get("duration"))

    bitrate_kbps: int | None = None
    estimated = False
    stream_bps = _to_float(video.get("bit_rate"))
    format_bps = _to_float(fmt.get("bit_rate"))
    if stream_bps:
        bitrate_kbps = _bps_to_kbps(stream_bps)
    elif format_bps:
        bitrate_kbps = _bps_to_kbps(format_bps)
    else:
        size = _to_float(fmt.get("size")) or size_bytes
        if size and duration:
            bitrate_kbps = _bps_to_kbps(size * 8 / duration)
            estimated = True
            logger.debug(
                "Estimated bitrate for %s from size and duration: %d kbps",
                path.name,
                bitrate_kbps,
            )

    return ProbeResult(
        codec=codec,
        bitrate_kbps=bitrate_kbps,
        duration_seconds=duration,
        bitrate_estimated=estimated,
    )
