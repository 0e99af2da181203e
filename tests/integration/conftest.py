"""Fixtures for end-to-end runs with stub collaborators."""

from collections.abc import Callable

import pytest

from mediashrink.workflow import RunSummary, run_conversion


@pytest.fixture
def run(
    make_config, fake_encoder, prober, fake_cloud, plenty_of_space
) -> Callable[..., RunSummary]:
    """Run a conversion against the stub collaborators.

    Keyword arguments are conversion settings; disk_usage and
    install_signal_handlers pass through to run_conversion.
    """

    def _run(
        disk_usage=None, install_signal_handlers: bool = False, **conversion
    ) -> RunSummary:
        return run_conversion(
            make_config(**conversion),
            encoder=fake_encoder,
            prober=prober,
            cloud=fake_cloud,
            disk_usage=disk_usage or plenty_of_space,
            install_signal_handlers=install_signal_handlers,
        )

    return _run


@pytest.fixture
def add_video(make_video, prober):
    """Create a library file with a scripted probe result."""

    def _add(name, codec="h264", bitrate_kbps=8000, size=100_000):
        path = make_video(name, size)
        prober.set(path, codec, bitrate_kbps)
        return path

    return _add
