"""Shared test fixtures for mediashrink."""

import os
from collections.abc import Callable
from pathlib import Path

import pytest

from mediashrink.config.models import (
    ConversionConfig,
    LoggingConfig,
    MediaShrinkConfig,
)
from mediashrink.executor.interface import Segment
from mediashrink.introspector.stub import StubProber
from mediashrink.tools.encoders import EncoderProfile
from mediashrink.workflow.gates import DiskUsage

TRIAL_SOURCE_BYTES = 10_000

PLENTY_OF_SPACE = DiskUsage(total=10**13, used=0, free=10**13)


class FakeEncoder:
    """Encoder that writes files of scripted size instead of running ffmpeg.

    Attributes:
        ratio: Full-encode output size as a fraction of the input size.
        trial_ratio: Same, for trial encodes.
        available: Profile ids whose smoke test succeeds.
        returncode: Exit status reported for full encodes.
        fail_trial: Make the trial encode fail.
        on_encode: Called with (source, dest) at the start of a full encode.
        calls: (operation, path) for every call, in order.
    """

    def __init__(
        self,
        ratio: float = 0.5,
        trial_ratio: float | None = None,
        available: tuple[str, ...] = ("libsvtav1",),
        returncode: int = 0,
        fail_trial: bool = False,
    ) -> None:
        self.ratio = ratio
        self.trial_ratio = ratio if trial_ratio is None else trial_ratio
        self.available = set(available)
        self.returncode = returncode
        self.fail_trial = fail_trial
        self.on_encode: Callable[[Path, Path], None] | None = None
        self.calls: list[tuple[str, object]] = []

    def smoke_test(self, profile: EncoderProfile) -> bool:
        self.calls.append(("smoke", profile.id))
        return profile.id in self.available

    def copy_segment(self, source: Path, dest: Path, segment: Segment) -> bool:
        self.calls.append(("trial", source))
        dest.write_bytes(b"\0" * TRIAL_SOURCE_BYTES)
        return True

    def encode(
        self,
        source: Path,
        dest: Path,
        profile: EncoderProfile,
        segment: Segment | None = None,
    ) -> int:
        if segment is not None:
            if self.fail_trial:
                return 1
            size = round(source.stat().st_size * self.trial_ratio)
            dest.write_bytes(b"\0" * max(size, 1))
            return 0

        self.calls.append(("encode", source))
        if self.on_encode is not None:
            self.on_encode(source, dest)
        if self.returncode != 0:
            dest.write_bytes(b"partial")
            return self.returncode
        dest.write_bytes(b"\0" * round(source.stat().st_size * self.ratio))
        return 0

    def paths_for(self, operation: str) -> list[object]:
        return [path for op, path in self.calls if op == operation]


class FakeCloud:
    """CloudSync with an in-memory set of cloud-only paths.

    A download request makes the file local immediately unless
    hydrate_on_request is False.
    """

    def __init__(self, cloud_only=(), hydrate_on_request: bool = True) -> None:
        self.cloud_only: set[Path] = set(cloud_only)
        self.hydrate_on_request = hydrate_on_request
        self.requested: list[Path] = []
        self.released: list[Path] = []

    def is_locally_available(self, path: Path) -> bool:
        return path.exists() and path not in self.cloud_only

    def request_download(self, path: Path) -> bool:
        self.requested.append(path)
        if self.hydrate_on_request:
            self.cloud_only.discard(path)
        return True

    def release_to_cloud_only(self, path: Path) -> bool:
        self.released.append(path)
        if path.exists():
            self.cloud_only.add(path)
        return True


@pytest.fixture(autouse=True)
def isolated_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point the data directory at tmp_path and drop MEDIASHRINK_* overrides."""
    for var in list(os.environ):
        if var.startswith("MEDIASHRINK_"):
            monkeypatch.delenv(var, raising=False)
    data_dir = tmp_path / "data"
    monkeypatch.setenv("MEDIASHRINK_DATA_DIR", str(data_dir))
    return data_dir


@pytest.fixture
def library(tmp_path: Path) -> Path:
    """Empty library root."""
    root = tmp_path / "OneDrive"
    root.mkdir()
    return root


@pytest.fixture
def make_video(library: Path) -> Callable[..., Path]:
    """Create a video file of a given size under the library root.

    Content varies with the name and position so byte-level comparisons
    catch any rewrite.
    """

    def _make(name: str, size: int = 100_000) -> Path:
        path = library / name
        path.parent.mkdir(parents=True, exist_ok=True)
        pattern = name.encode() + bytes(range(256))
        path.write_bytes((pattern * (size // len(pattern) + 1))[:size])
        return path

    return _make


@pytest.fixture
def make_config(library: Path, tmp_path: Path) -> Callable[..., MediaShrinkConfig]:
    """Build a config that accepts tiny files and never really waits."""

    def _make(**conversion) -> MediaShrinkConfig:
        settings = {
            "min_file_size_mb": 0,
            "download_poll_seconds": 0.001,
            "download_timeout_seconds": 5,
            "root": library,
            "history_file": tmp_path / "data" / "history.json",
        }
        settings.update(conversion)
        return MediaShrinkConfig(
            conversion=ConversionConfig(**settings),
            logging=LoggingConfig(file=None),
            data_dir=tmp_path / "data",
        )

    return _make


@pytest.fixture
def fake_encoder() -> FakeEncoder:
    return FakeEncoder()


@pytest.fixture
def fake_cloud() -> FakeCloud:
    return FakeCloud()


@pytest.fixture
def prober() -> StubProber:
    return StubProber()


@pytest.fixture
def plenty_of_space() -> Callable[[Path], DiskUsage]:
    return lambda path: PLENTY_OF_SPACE
