"""Encoder protocol.

Every encoder invocation (capability smoke test, trial segment, full
transcode) goes through this interface so the admission logic can be
exercised with a scripted encoder in tests.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from mediashrink.tools.encoders import EncoderProfile


@dataclass(frozen=True)
class Segment:
    """A time window of the source, in seconds."""

    start: float
    duration: float


class Encoder(Protocol):
    """Protocol for encoder adapters."""

    def smoke_test(self, profile: EncoderProfile) -> bool:
        """Encode a tiny synthetic clip with the profile.

        Returns:
            True if the encode exited cleanly and produced a non-empty file.
        """
        ...

    def copy_segment(self, source: Path, dest: Path, segment: Segment) -> bool:
        """Stream-copy the primary video stream of a window of source.

        Returns:
            True on success.
        """
        ...

    def encode(
        self,
        source: Path,
        dest: Path,
        profile: EncoderProfile,
        segment: Segment | None = None,
    ) -> int:
        """Encode source into dest with the profile.

        With a segment only that window of video is encoded. Without one
        the whole file is converted, audio and subtitles copied verbatim.

        Returns:
            The encoder's exit code.
        """
        ...
