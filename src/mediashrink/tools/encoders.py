"""Encoder profile registry and capability probing.

Profiles are tried in priority order (hardware encoders before the
software fallback). A profile counts as usable only if a real encode of a
tiny synthetic clip succeeds with it; nothing else about the GPU or driver
is inspected.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from mediashrink.executor.interface import Encoder

logger = logging.getLogger(__name__)


class NoUsableEncoderError(Exception):
    """Raised when no registered encoder profile works on this host."""

    pass


@dataclass(frozen=True)
class EncoderProfile:
    """One candidate encoder configuration."""

    id: str
    label: str
    params: tuple[str, ...]
    """ffmpeg video encoder arguments, starting with -c:v."""

    codec_family: str
    """Codec produced, also used for the output file name (movie.av1.mkv)."""

    hardware: bool = False


ENCODER_PROFILES: tuple[EncoderProfile, ...] = (
    EncoderProfile(
        id="av1_nvenc",
        label="NVIDIA NVENC AV1",
        params=(
            "-c:v", "av1_nvenc",
            "-preset", "p5",
            "-rc", "vbr",
            "-cq", "32",
            "-b:v", "0",
        ),
        codec_family="av1",
        hardware=True,
    ),
    EncoderProfile(
        id="av1_qsv",
        label="Intel Quick Sync AV1",
        params=(
            "-c:v", "av1_qsv",
            "-preset", "medium",
            "-global_quality", "30",
        ),
        codec_family="av1",
        hardware=True,
    ),
    EncoderProfile(
        id="av1_amf",
        label="AMD AMF AV1",
        params=(
            "-c:v", "av1_amf",
            "-quality", "balanced",
            "-rc", "cqp",
            "-qp_i", "30",
            "-qp_p", "32",
        ),
        codec_family="av1",
        hardware=True,
    ),
    EncoderProfile(
        id="libsvtav1",
        label="SVT-AV1 (software)",
        params=(
            "-c:v", "libsvtav1",
            "-preset", "8",
            "-crf", "32",
        ),
        codec_family="av1",
    ),
)  # fmt: skip


def select_encoder(
    encoder: Encoder,
    profiles: Sequence[EncoderProfile] = ENCODER_PROFILES,
) -> EncoderProfile:
    """Pick the first profile whose smoke test succeeds.

    Args:
        encoder: Encoder used to run the synthetic trial encodes.
        profiles: Candidates in priority order.

    Returns:
        The selected profile.

    Raises:
        NoUsableEncoderError: If every profile fails.
    """
    for profile in profiles:
        logger.debug("Testing encoder profile %s", profile.id)
        if encoder.smoke_test(profile):
            logger.info("Selected encoder: %s (%s)", profile.label, profile.id)
            return profile
        logger.info("Encoder %s unavailable on this host", profile.id)

    raise NoUsableEncoderError(
        "No usable encoder found; tried "
        + ", ".join(profile.id for profile in profiles)
    )
