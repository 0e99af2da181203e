"""Static savings estimate from the source codec.

Ratios are expected AV1 output size over source size. They are only a
cheap pre-download filter; the trial encode is the authoritative check.
A source that is already AV1 predicts no savings.
"""

from __future__ import annotations

from dataclasses import dataclass

CODEC_RATIOS: dict[str, float] = {
    "mpeg1video": 0.25,
    "mpeg2video": 0.25,
    "mpeg4": 0.30,
    "msmpeg4v2": 0.30,
    "msmpeg4v3": 0.30,
    "h264": 0.35,
    "wmv3": 0.35,
    "vc1": 0.40,
    "vp8": 0.45,
    "vp9": 0.70,
    "hevc": 0.70,
    "av1": 1.00,
}

# Unknown codecs are assumed to compress poorly
DEFAULT_RATIO = 0.80

_ALIASES = {
    "h265": "hevc",
    "x265": "hevc",
    "avc": "h264",
    "avc1": "h264",
    "av01": "av1",
}


@dataclass(frozen=True)
class StaticEstimate:
    ratio: float
    predicted_new_size: int
    predicted_percent: float


def ratio_for(codec: str | None) -> float:
    if not codec:
        return DEFAULT_RATIO
    key = codec.casefold()
    key = _ALIASES.get(key, key)
    return CODEC_RATIOS.get(key, DEFAULT_RATIO)


def estimate(codec: str | None, size_bytes: int) -> StaticEstimate:
    """Predict output size and savings for a file.

    Example:
        >>> estimate("h264", 1_000_000_000).predicted_percent
        65.0
    """
    ratio = ratio_for(codec)
    return StaticEstimate(
        ratio=ratio,
        predicted_new_size=int(size_bytes * ratio),
        predicted_percent=round((1.0 - ratio) * 100.0, 2),
    )
