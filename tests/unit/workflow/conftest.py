"""Fixtures for gate and pipeline tests."""

import itertools
from collections.abc import Callable
from pathlib import Path

import pytest

from mediashrink.cloud.downloads import DownloadCoordinator
from mediashrink.config.models import ConversionConfig
from mediashrink.domain.models import CandidateFile
from mediashrink.history.store import HistoryStore
from mediashrink.tools.encoders import ENCODER_PROFILES
from mediashrink.workflow.gates import AdmissionContext


@pytest.fixture
def history(tmp_path: Path, library: Path) -> HistoryStore:
    return HistoryStore(tmp_path / "history.json", library)


@pytest.fixture
def downloads(fake_cloud) -> DownloadCoordinator:
    return DownloadCoordinator(
        fake_cloud,
        timeout_seconds=5,
        poll_seconds=1,
        sleep=lambda s: None,
        clock=itertools.count().__next__,
    )


@pytest.fixture
def gate_ctx(
    library, history, prober, downloads, fake_encoder, plenty_of_space
) -> AdmissionContext:
    return AdmissionContext(
        config=ConversionConfig(min_file_size_mb=0),
        root=library,
        history=history,
        prober=prober,
        downloads=downloads,
        encoder=fake_encoder,
        profile=ENCODER_PROFILES[-1],
        disk_usage=plenty_of_space,
    )


@pytest.fixture
def make_candidate(make_video, prober) -> Callable[..., CandidateFile]:
    """Create a file with a scripted probe result."""

    def _make(
        name: str = "movie.mp4",
        codec: str | None = "h264",
        bitrate_kbps: int | None = 8000,
        size: int = 100_000,
    ) -> CandidateFile:
        path = make_video(name, size)
        prober.set(path, codec, bitrate_kbps)
        return CandidateFile(path=path, size_bytes=size)

    return _make
