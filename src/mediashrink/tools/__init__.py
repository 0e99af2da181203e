"""External tool discovery and encoder profiles."""

from mediashrink.tools.encoders import (
    ENCODER_PROFILES,
    EncoderProfile,
    NoUsableEncoderError,
    select_encoder,
)
from mediashrink.tools.paths import ToolNotFoundError, find_tool, require_tool

__all__ = [
    "ENCODER_PROFILES",
    "EncoderProfile",
    "NoUsableEncoderError",
    "ToolNotFoundError",
    "find_tool",
    "require_tool",
    "select_encoder",
]
