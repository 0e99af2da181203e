"""Tests for TranscodeExecutor promotion and cleanup."""

from pathlib import Path

import pytest

from mediashrink.domain.models import CandidateFile, OutcomeStatus, temp_path_for
from mediashrink.executor.transcode import TranscodeExecutor
from mediashrink.history.store import HistoryStore
from mediashrink.tools.encoders import ENCODER_PROFILES
from mediashrink.workflow.context import RunContext

SVT = ENCODER_PROFILES[-1]


@pytest.fixture
def history(tmp_path: Path, library: Path) -> HistoryStore:
    return HistoryStore(tmp_path / "history.json", library)


@pytest.fixture
def context(history: HistoryStore) -> RunContext:
    return RunContext(history=history)


@pytest.fixture
def executor(fake_encoder, history, fake_cloud, context) -> TranscodeExecutor:
    return TranscodeExecutor(fake_encoder, history, fake_cloud, context)


def _candidate(path: Path) -> CandidateFile:
    return CandidateFile(path=path, size_bytes=path.stat().st_size)


class TestConverted:
    """Output smaller than the input replaces it."""

    def test_promotes_and_deletes_original(
        self, executor, make_video, history, fake_cloud, fake_encoder, context
    ) -> None:
        fake_encoder.ratio = 0.42
        source = make_video("movie.mp4", 10_000)

        result = executor.execute(_candidate(source), SVT)

        output = source.with_name("movie.av1.mkv")
        assert result.status is OutcomeStatus.CONVERTED
        assert result.bytes_saved == 5_800
        assert output.stat().st_size == 4_200
        assert not source.exists()
        assert not temp_path_for(output).exists()
        assert history.get(source).status is OutcomeStatus.CONVERTED
        assert history.total_saved_bytes == 5_800
        assert fake_cloud.released == [output]
        assert context.temp_path is None

    def test_history_persisted_before_return(
        self, executor, make_video, history
    ) -> None:
        source = make_video("movie.mp4", 10_000)
        executor.execute(_candidate(source), SVT)
        reloaded = HistoryStore.load(history.path, history.root)
        assert reloaded.has(source)

    def test_stale_temp_removed_first(self, executor, make_video) -> None:
        source = make_video("movie.mp4", 10_000)
        stale = temp_path_for(source.with_name("movie.av1.mkv"))
        stale.write_bytes(b"old partial")
        result = executor.execute(_candidate(source), SVT)
        assert result.status is OutcomeStatus.CONVERTED
        assert not stale.exists()


class TestKeptOriginal:
    """Output not smaller leaves the original alone."""

    @pytest.mark.parametrize("ratio", [1.0, 1.3])
    def test_original_untouched(
        self, executor, make_video, history, fake_cloud, fake_encoder, ratio
    ) -> None:
        fake_encoder.ratio = ratio
        source = make_video("movie.mp4", 10_000)
        before = source.read_bytes()

        result = executor.execute(_candidate(source), SVT)

        assert result.status is OutcomeStatus.KEPT_ORIGINAL
        assert result.bytes_saved == 0
        assert source.read_bytes() == before
        assert not source.with_name("movie.av1.mkv").exists()
        assert list(source.parent.iterdir()) == [source]
        assert history.get(source).status is OutcomeStatus.KEPT_ORIGINAL
        assert history.total_saved_bytes == 0
        assert fake_cloud.released == [source]


class TestFailed:
    """Encoder failures are not recorded and leave nothing behind."""

    def test_nonzero_exit(
        self, executor, make_video, history, fake_encoder, context
    ) -> None:
        fake_encoder.returncode = 1
        source = make_video("movie.mp4", 10_000)

        result = executor.execute(_candidate(source), SVT)

        assert result.status is None
        assert not result.success
        assert "exited with 1" in result.error_message
        assert source.exists()
        assert list(source.parent.iterdir()) == [source]
        assert not history.has(source)
        assert context.temp_path is None

    def test_no_output(self, executor, make_video, history, fake_encoder) -> None:
        fake_encoder.ratio = 0.0
        source = make_video("movie.mp4", 10_000)
        result = executor.execute(_candidate(source), SVT)
        assert result.status is None
        assert result.error_message == "encoder produced no output"
        assert not history.has(source)

    def test_clean_exit_without_artifact(
        self, executor, make_video, history, fake_encoder, monkeypatch
    ) -> None:
        monkeypatch.setattr(fake_encoder, "encode", lambda *args, **kwargs: 0)
        source = make_video("movie.mp4", 10_000)

        result = executor.execute(_candidate(source), SVT)

        assert result.status is None
        assert result.attempt.new_size is None
        assert result.error_message == "encoder produced no output"
        assert list(source.parent.iterdir()) == [source]
        assert not history.has(source)

    def test_interrupt_during_encode_cleans_temp(
        self, executor, make_video, fake_encoder, context
    ) -> None:
        source = make_video("movie.mp4", 10_000)
        seen: list[Path | None] = []

        def interrupt(src: Path, dest: Path) -> None:
            dest.write_bytes(b"partial")
            seen.append(context.temp_path)
            raise KeyboardInterrupt

        fake_encoder.on_encode = interrupt
        with pytest.raises(KeyboardInterrupt):
            executor.execute(_candidate(source), SVT)

        assert seen == [temp_path_for(source.with_name("movie.av1.mkv"))]
        assert list(source.parent.iterdir()) == [source]
        assert context.temp_path is None
