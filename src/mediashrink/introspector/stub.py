"""Stub prober returning scripted results, for tests and dry wiring."""

from pathlib import Path

from mediashrink.introspector.interface import MediaProbeError, ProbeResult


class StubProber:
    """MediaProber that answers from a path -> ProbeResult mapping.

    Paths without an entry raise MediaProbeError, like an unreadable
    header would. Every call is recorded in ``calls``.
    """

    def __init__(self, results: dict[Path, ProbeResult] | None = None) -> None:
        self.results: dict[Path, ProbeResult] = dict(results or {})
        self.calls: list[Path] = []

    def set(
        self,
        path: Path,
        codec: str | None,
        bitrate_kbps: int | None,
        duration_seconds: float | None = 3600.0,
    ) -> None:
        self.results[path] = ProbeResult(codec, bitrate_kbps, duration_seconds)

    def probe(self, path: Path) -> ProbeResult:
        self.calls.append(path)
        try:
            return self.results[path]
        except KeyError:
            raise MediaProbeError(f"No scripted probe result for {path}") from None

    def probe_codec(self, path: Path) -> str | None:
        try:
            return self.probe(path).codec
        except MediaProbeError:
            return None

    def probe_bitrate(self, path: Path) -> int | None:
        try:
            return self.probe(path).bitrate_kbps
        except MediaProbeError:
            return None
