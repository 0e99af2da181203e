"""Tests for domain models and path derivation."""

from datetime import datetime, timedelta, timezone
from pathlib import Path

from mediashrink.domain.models import (
    RECORDED_SKIPS,
    CandidateFile,
    OutcomeStatus,
    SkipReason,
    TranscodeAttempt,
    output_path_for,
    temp_path_for,
)


class TestPaths:
    """Tests for canonical output and temp paths."""

    def test_output_path(self) -> None:
        assert output_path_for(Path("/lib/movie.mp4"), "av1") == Path(
            "/lib/movie.av1.mkv"
        )

    def test_output_path_for_mkv_source(self) -> None:
        assert output_path_for(Path("/lib/show.s01e01.mkv"), "av1") == Path(
            "/lib/show.s01e01.av1.mkv"
        )

    def test_temp_path_is_hidden_sibling(self) -> None:
        temp = temp_path_for(Path("/lib/movie.av1.mkv"))
        assert temp == Path("/lib/.mediashrink_tmp_movie.av1.mkv")

    def test_candidate_output_path(self) -> None:
        candidate = CandidateFile(path=Path("/lib/a.avi"), size_bytes=1)
        assert candidate.name == "a.avi"
        assert candidate.output_path("av1") == Path("/lib/a.av1.mkv")
        assert candidate.probed is False


class TestRecordedSkips:
    """Only property-of-the-file skips are persisted."""

    def test_recorded(self) -> None:
        assert RECORDED_SKIPS == {
            SkipReason.LOW_BITRATE: OutcomeStatus.SKIPPED_LOW_BITRATE,
            SkipReason.LOW_STATIC_SAVINGS: OutcomeStatus.SKIPPED_LOW_SAVINGS,
            SkipReason.LOW_TRIAL_SAVINGS: OutcomeStatus.SKIPPED_TEST_LOW_SAVINGS,
        }

    def test_transient_reasons_not_recorded(self) -> None:
        for reason in (
            SkipReason.OUTPUT_EXISTS,
            SkipReason.IN_HISTORY,
            SkipReason.PROBE_FAILED,
            SkipReason.DOWNLOAD_TIMEOUT,
            SkipReason.INSUFFICIENT_DISK_SPACE,
        ):
            assert reason not in RECORDED_SKIPS


class TestTranscodeAttempt:
    """Tests for TranscodeAttempt properties."""

    def _attempt(self, **kwargs) -> TranscodeAttempt:
        return TranscodeAttempt(
            input_path=Path("a.mp4"),
            output_path=Path("a.av1.mkv"),
            temp_path=Path(".mediashrink_tmp_a.av1.mkv"),
            original_size=100,
            **kwargs,
        )

    def test_success_requires_clean_exit_and_output(self) -> None:
        assert self._attempt(returncode=0, new_size=50).success
        assert not self._attempt(returncode=1, new_size=50).success
        assert not self._attempt(returncode=0, new_size=0).success
        assert not self._attempt(returncode=0, new_size=None).success

    def test_elapsed(self) -> None:
        start = datetime(2026, 1, 1, tzinfo=timezone.utc)
        attempt = self._attempt(started_at=start)
        assert attempt.elapsed_seconds is None
        attempt.finished_at = start + timedelta(seconds=90)
        assert attempt.elapsed_seconds == 90.0
