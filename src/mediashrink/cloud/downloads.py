"""Download coordination for cloud-resident files.

Two modes:

- ensure_local() blocks until a file is materialized, polling its
  locality at a fixed interval, or gives up after the timeout.
- prefetch() fires download requests for a bounded number of upcoming
  candidates so their downloads overlap the current transcode. Requests
  are not tracked as tasks; when a prefetched file's turn comes,
  ensure_local() finds it local or falls back to waiting.

The in-flight set is only touched from the pipeline thread.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable, Iterable
from pathlib import Path
from typing import TYPE_CHECKING

from mediashrink.core.formatting import format_file_size

if TYPE_CHECKING:
    from mediashrink.cloud.interface import CloudSync
    from mediashrink.domain.models import CandidateFile

logger = logging.getLogger(__name__)


class DownloadCoordinator:
    """Materializes cloud files on demand and ahead of time."""

    def __init__(
        self,
        cloud: CloudSync,
        timeout_seconds: float = 3600,
        poll_seconds: float = 5.0,
        prefetch_count: int = 2,
        sleep: Callable[[float], None] = time.sleep,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.cloud = cloud
        self.timeout_seconds = timeout_seconds
        self.poll_seconds = poll_seconds
        self.prefetch_count = prefetch_count
        self._sleep = sleep
        self._clock = clock
        self._in_flight: set[Path] = set()
        self.downloads_requested = 0

    @property
    def in_flight(self) -> frozenset[Path]:
        return frozenset(self._in_flight)

    def is_local(self, path: Path) -> bool:
        return self.cloud.is_locally_available(path)

    def _request(self, path: Path) -> bool:
        issued = self.cloud.request_download(path)
        if issued:
            self.downloads_requested += 1
        return issued

    def ensure_local(self, path: Path) -> bool:
        """Block until the file is local or the timeout elapses.

        Returns:
            True if the file is local. False on timeout or if the file
            disappeared; the caller treats that as a retryable skip.
        """
        try:
            if not path.exists():
                logger.warning("File vanished before download: %s", path)
                return False
            if self.cloud.is_locally_available(path):
                return True

            if path in self._in_flight:
                logger.info("Waiting for prefetched download: %s", path.name)
            else:
                logger.info("Downloading %s", path.name)
                self._request(path)

            deadline = self._clock() + self.timeout_seconds
            while self._clock() < deadline:
                self._sleep(self.poll_seconds)
                if self.cloud.is_locally_available(path):
                    logger.info("Download complete: %s", path.name)
                    return True

            logger.warning(
                "Download of %s did not finish within %ss",
                path.name,
                self.timeout_seconds,
            )
            return False
        finally:
            self._in_flight.discard(path)

    def refresh(self) -> None:
        """Forget in-flight entries whose files are now local."""
        for path in list(self._in_flight):
            if self.cloud.is_locally_available(path):
                logger.debug("Prefetch complete: %s", path.name)
                self._in_flight.discard(path)

    def prefetch(
        self,
        upcoming: Iterable[CandidateFile],
        admit: Callable[[CandidateFile], bool],
    ) -> list[Path]:
        """Start background downloads for upcoming candidates.

        Args:
            upcoming: Candidates in processing order.
            admit: Cheap pre-download check; only candidates it accepts
                are fetched.

        Returns:
            Paths for which a download was requested by this call.
        """
        if self.prefetch_count <= 0:
            return []
        self.refresh()

        started: list[Path] = []
        for candidate in upcoming:
            if len(self._in_flight) >= self.prefetch_count:
                break
            path = candidate.path
            if path in self._in_flight or self.cloud.is_locally_available(path):
                continue
            if not admit(candidate):
                continue
            if self._request(path):
                self._in_flight.add(path)
                started.append(path)
                logger.info(
                    "Prefetching %s (%s)",
                    path.name,
                    format_file_size(candidate.size_bytes),
                )
        return started
