"""MediaProber interface for header-only media metadata."""

from dataclasses import dataclass
from pathlib import Path
from typing import Protocol


class MediaProbeError(Exception):
    """Raised when a file's container header cannot be read or parsed."""

    pass


@dataclass(frozen=True)
class ProbeResult:
    """Scalar metadata of a file's primary video stream."""

    codec: str | None
    bitrate_kbps: int | None
    duration_seconds: float | None = None
    bitrate_estimated: bool = False


class MediaProber(Protocol):
    """Protocol for media probe implementations.

    Implementations must only read container/stream metadata so probing a
    cloud-resident file fetches its header, never its whole payload.
    """

    def probe(self, path: Path) -> ProbeResult:
        """Probe codec, bitrate and duration of a file.

        Raises:
            MediaProbeError: If the header cannot be read.
        """
        ...

    def probe_codec(self, path: Path) -> str | None:
        """Codec name of the primary video stream, or None if unknown."""
        ...

    def probe_bitrate(self, path: Path) -> int | None:
        """Video bitrate in kbps, or None if unknown."""
        ...
