"""Tests for the encoder profile registry and selection."""

import pytest

from mediashrink.tools.encoders import (
    ENCODER_PROFILES,
    NoUsableEncoderError,
    select_encoder,
)


class TestRegistry:
    """The registry is ordered hardware-first."""

    def test_priority_order(self) -> None:
        assert [p.id for p in ENCODER_PROFILES] == [
            "av1_nvenc",
            "av1_qsv",
            "av1_amf",
            "libsvtav1",
        ]

    def test_software_fallback_last(self) -> None:
        assert all(p.hardware for p in ENCODER_PROFILES[:-1])
        assert not ENCODER_PROFILES[-1].hardware

    def test_params_start_with_codec(self) -> None:
        for profile in ENCODER_PROFILES:
            assert profile.params[:2] == ("-c:v", profile.id)
            assert profile.codec_family == "av1"


class TestSelectEncoder:
    """Tests for select_encoder()."""

    def test_first_working_profile_wins(self, fake_encoder) -> None:
        fake_encoder.available = {"av1_qsv", "libsvtav1"}
        profile = select_encoder(fake_encoder)
        assert profile.id == "av1_qsv"
        assert fake_encoder.calls == [("smoke", "av1_nvenc"), ("smoke", "av1_qsv")]

    def test_software_fallback(self, fake_encoder) -> None:
        assert select_encoder(fake_encoder).id == "libsvtav1"
        assert len(fake_encoder.calls) == len(ENCODER_PROFILES)

    def test_none_usable(self, fake_encoder) -> None:
        fake_encoder.available = set()
        with pytest.raises(NoUsableEncoderError, match="libsvtav1"):
            select_encoder(fake_encoder)
