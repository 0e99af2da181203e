"""Media probing: codec and bitrate from container headers.

- MediaProber: Protocol defining the probe interface
- FFprobeProber: Production implementation using ffprobe
- StubProber: Scripted implementation for tests
- MediaProbeError: Exception for probe failures
"""

from mediashrink.introspector.ffprobe import FFprobeProber
from mediashrink.introspector.interface import (
    MediaProbeError,
    MediaProber,
    ProbeResult,
)
from mediashrink.introspector.parsers import parse_probe_output
from mediashrink.introspector.stub import StubProber

__all__ = [
    "FFprobeProber",
    "MediaProbeError",
    "MediaProber",
    "ProbeResult",
    "StubProber",
    "parse_probe_output",
]
