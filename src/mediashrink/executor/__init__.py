"""Encoder adapters and the full-transcode executor."""

from mediashrink.executor.ffmpeg import FFmpegEncoder
from mediashrink.executor.interface import Encoder, Segment
from mediashrink.executor.transcode import TranscodeExecutor, TranscodeResult

__all__ = [
    "Encoder",
    "FFmpegEncoder",
    "Segment",
    "TranscodeExecutor",
    "TranscodeResult",
]
