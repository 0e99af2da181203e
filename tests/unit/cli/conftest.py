"""Fixtures for CLI tests."""

from collections.abc import Callable
from pathlib import Path
from unittest.mock import patch

import pytest
from click.testing import CliRunner

from mediashrink.domain.models import OutcomeStatus
from mediashrink.history.store import HistoryStore


@pytest.fixture(autouse=True)
def no_logging_setup():
    """Keep CLI invocations from attaching handlers to the root logger."""
    with patch("mediashrink.cli.configure_logging") as mock:
        yield mock


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()


@pytest.fixture
def library_env(library: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    monkeypatch.setenv("MEDIASHRINK_ROOT", str(library))
    return library


@pytest.fixture
def seeded_history(
    isolated_env: Path, library_env: Path
) -> Callable[..., HistoryStore]:
    """Write history records for paths relative to the library root."""

    def _seed(**records: tuple[OutcomeStatus, int]) -> HistoryStore:
        store = HistoryStore(isolated_env / "history.json", library_env)
        for name, (status, saved) in records.items():
            store.record_outcome(library_env / name.replace("__", "."), status, saved)
        return store

    return _seed
