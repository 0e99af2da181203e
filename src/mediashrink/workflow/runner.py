"""Top-level conversion run.

Wires the collaborators together and walks the candidate list once, in
path order. An I/O error while handling one file (the sync client removing
it mid-trial, a failed history write) marks that file failed, with no
history record, and the loop moves on. Only a missing root, the absence
of any usable encoder, a gate reporting Fatal or an interrupt end the run
early.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from pathlib import Path

from mediashrink.cloud import DownloadCoordinator, get_cloud_sync
from mediashrink.cloud.interface import CloudSync
from mediashrink.config.env import EnvReader
from mediashrink.config.models import MediaShrinkConfig
from mediashrink.domain.models import CandidateFile
from mediashrink.executor.ffmpeg import FFmpegEncoder
from mediashrink.executor.interface import Encoder
from mediashrink.executor.transcode import TranscodeExecutor
from mediashrink.history.store import HistoryStore
from mediashrink.introspector.ffprobe import FFprobeProber
from mediashrink.introspector.interface import MediaProber
from mediashrink.logging.context import file_context
from mediashrink.scanner.discovery import discover_candidates, discover_root
from mediashrink.tools.encoders import select_encoder
from mediashrink.workflow.admission import AdmissionPipeline, FileResult
from mediashrink.workflow.context import (
    RunContext,
    RunInterrupted,
    interruption_handler,
)
from mediashrink.workflow.gates import AdmissionContext, DiskUsage
from mediashrink.workflow.summary import RunSummary

logger = logging.getLogger(__name__)


def run_conversion(
    config: MediaShrinkConfig,
    *,
    encoder: Encoder | None = None,
    prober: MediaProber | None = None,
    cloud: CloudSync | None = None,
    env_reader: EnvReader | None = None,
    context: RunContext | None = None,
    disk_usage: Callable[[Path], DiskUsage] | None = None,
    install_signal_handlers: bool = True,
) -> RunSummary:
    """Convert every admissible file under the library root.

    Args:
        config: Effective configuration.
        encoder: Encoder to use; defaults to ffmpeg from config.
        prober: Prober to use; defaults to ffprobe from config.
        cloud: Cloud-sync adapter; defaults to the platform adapter.
        env_reader: Used for root discovery.
        context: Run context; a fresh one is created if None.
        disk_usage: Replacement for shutil.disk_usage.
        install_signal_handlers: Whether to convert SIGINT/SIGTERM into
            a clean RunInterrupted.

    Returns:
        RunSummary for the run.

    Raises:
        RootNotFoundError: If the library root cannot be located.
        NoUsableEncoderError: If no encoder profile passes its smoke test.
        FatalRunError: If the root disappears mid-run.
        RunInterrupted: On SIGINT/SIGTERM, after temp cleanup and a
            history flush.
        ToolNotFoundError: If ffmpeg or ffprobe cannot be located.
    """
    conversion = config.conversion
    root = discover_root(conversion.root, env_reader=env_reader)
    logger.info("Library root: %s", root)

    encoder = encoder or FFmpegEncoder(config.tools.ffmpeg)
    profile = select_encoder(encoder)
    prober = prober or FFprobeProber(config.tools.ffprobe)
    cloud = cloud or get_cloud_sync()

    history = HistoryStore.load(config.history_path, root)
    context = context or RunContext()
    context.history = history

    downloads = DownloadCoordinator(
        cloud,
        timeout_seconds=conversion.download_timeout_seconds,
        poll_seconds=conversion.download_poll_seconds,
        prefetch_count=conversion.prefetch_count,
    )
    gate_context = AdmissionContext(
        config=conversion,
        root=root,
        history=history,
        prober=prober,
        downloads=downloads,
        encoder=encoder,
        profile=profile,
    )
    if disk_usage is not None:
        gate_context.disk_usage = disk_usage
    pipeline = AdmissionPipeline(
        gate_context,
        TranscodeExecutor(encoder, history, cloud, context),
    )

    summary = RunSummary(encoder=profile.id)
    if install_signal_handlers:
        with interruption_handler(context):
            _process_all(pipeline, root, conversion.min_file_size_bytes, summary)
    else:
        _process_all(pipeline, root, conversion.min_file_size_bytes, summary)

    summary.total_saved_bytes = history.total_saved_bytes
    summary.log()
    return summary


def _process_all(
    pipeline: AdmissionPipeline,
    root: Path,
    min_size_bytes: int,
    summary: RunSummary,
) -> None:
    candidates = discover_candidates(
        root, min_size_bytes, (pipeline.ctx.profile.codec_family,)
    )
    summary.files_scanned = len(candidates)
    logger.info("Found %d candidate files", len(candidates))

    try:
        for index, candidate in enumerate(candidates):
            with file_context(f"F{index + 1:03d}", candidate.path):
                upcoming = candidates[index + 1 : index + 1 + pipeline.prefetch_window]
                result = _process_one(pipeline, candidate, upcoming)
            summary.add(result)
    except RunInterrupted:
        summary.interrupted = True
        summary.total_saved_bytes = pipeline.ctx.history.total_saved_bytes
        summary.log()
        raise


def _process_one(
    pipeline: AdmissionPipeline,
    candidate: CandidateFile,
    upcoming: Sequence[CandidateFile],
) -> FileResult:
    """Process one file, turning an I/O error into a failed result.

    Nothing is recorded for a failed file, so the next run retries it.
    FatalRunError and RunInterrupted propagate.
    """
    try:
        return pipeline.process(candidate, upcoming)
    except OSError as e:
        logger.exception("I/O error while processing %s", candidate.name)
        return FileResult(candidate=candidate, failed=True, detail=str(e))
