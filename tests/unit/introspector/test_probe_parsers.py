"""Tests for ffprobe output parsing."""

from pathlib import Path

import pytest

from mediashrink.introspector.interface import MediaProbeError
from mediashrink.introspector.parsers import parse_probe_output

PATH = Path("/lib/movie.mp4")


def _output(stream: dict | None = None, fmt: dict | None = None) -> dict:
    data: dict = {"streams": [], "format": fmt or {}}
    if stream is not None:
        data["streams"].append({"codec_type": "video", **stream})
    return data


class TestParseProbeOutput:
    """Tests for parse_probe_output()."""

    def test_stream_bitrate_preferred(self) -> None:
        result = parse_probe_output(
            PATH,
            _output(
                {"codec_name": "H264", "bit_rate": "8000000"},
                {"bit_rate": "9500000", "duration": "5400.5"},
            ),
        )
        assert result.codec == "h264"
        assert result.bitrate_kbps == 8000
        assert result.duration_seconds == 5400.5
        assert result.bitrate_estimated is False

    def test_format_bitrate_fallback(self) -> None:
        result = parse_probe_output(
            PATH,
            _output({"codec_name": "hevc", "bit_rate": "N/A"}, {"bit_rate": "1200000"}),
        )
        assert result.bitrate_kbps == 1200

    def test_estimate_from_size_and_duration(self) -> None:
        result = parse_probe_output(
            PATH,
            _output({"codec_name": "mpeg4"}, {"duration": "100"}),
            size_bytes=100_000_000,
        )
        # 100 MB over 100 s = 8 Mbit/s
        assert result.bitrate_kbps == 8000
        assert result.bitrate_estimated is True

    def test_format_size_used_for_estimate(self) -> None:
        result = parse_probe_output(
            PATH,
            _output({"codec_name": "vp9"}, {"duration": "10", "size": "2500000"}),
        )
        assert result.bitrate_kbps == 2000

    def test_unknown_bitrate(self) -> None:
        result = parse_probe_output(PATH, _output({"codec_name": "av1"}))
        assert result.bitrate_kbps is None
        assert result.duration_seconds is None

    def test_missing_codec_name(self) -> None:
        result = parse_probe_output(PATH, _output({"bit_rate": "3000000"}))
        assert result.codec is None

    def test_no_video_stream(self) -> None:
        data = {"streams": [{"codec_type": "audio", "codec_name": "aac"}]}
        with pytest.raises(MediaProbeError, match="No video stream"):
            parse_probe_output(PATH, data)
