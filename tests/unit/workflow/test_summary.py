"""Tests for RunSummary accounting."""

import logging
from pathlib import Path

from mediashrink.domain.models import CandidateFile, OutcomeStatus, SkipReason
from mediashrink.workflow.admission import FileResult
from mediashrink.workflow.summary import RunSummary

CANDIDATE = CandidateFile(path=Path("a.mp4"), size_bytes=1)


class TestRunSummary:
    """Tests for RunSummary.add() and to_dict()."""

    def test_counts(self) -> None:
        summary = RunSummary(encoder="libsvtav1", files_scanned=5)
        summary.add(FileResult(CANDIDATE, OutcomeStatus.CONVERTED, bytes_saved=300))
        summary.add(FileResult(CANDIDATE, OutcomeStatus.KEPT_ORIGINAL))
        summary.add(FileResult(CANDIDATE, failed=True))
        summary.add(
            FileResult(
                CANDIDATE,
                OutcomeStatus.SKIPPED_LOW_BITRATE,
                skip_reason=SkipReason.LOW_BITRATE,
            )
        )
        summary.add(FileResult(CANDIDATE, skip_reason=SkipReason.DOWNLOAD_TIMEOUT))

        assert summary.converted == 1
        assert summary.kept_original == 1
        assert summary.failed == 1
        assert summary.bytes_saved == 300
        assert summary.files_processed == 5

        data = summary.to_dict()
        assert data["skipped"] == {"download-timeout": 1, "low-bitrate": 1}
        assert data["encoder"] == "libsvtav1"
        assert data["interrupted"] is False

    def test_log(self, caplog) -> None:
        caplog.set_level(logging.INFO)
        summary = RunSummary(files_scanned=2, bytes_saved=2048, total_saved_bytes=4096)
        summary.skipped[SkipReason.OUTPUT_EXISTS] = 2
        summary.log()
        assert "Run complete: 2 scanned" in caplog.text
        assert "skipped (output-exists): 2" in caplog.text
        assert "Saved 2.0 KB this run, 4.0 KB in total" in caplog.text
