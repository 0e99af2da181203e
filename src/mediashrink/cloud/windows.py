"""Windows cloud-files (OneDrive) adapter.

Locality comes from two file attribute bits: a file whose content lives
only in the cloud carries OFFLINE and/or RECALL_ON_DATA_ACCESS. Pinning
(attrib +P -U) makes the sync client download a file; unpinning
(attrib -P +U) lets it free the local copy.
"""

from __future__ import annotations

import logging
import os
import subprocess  # nosec B404 - subprocess is required for attrib invocation
from pathlib import Path

from mediashrink.core.subprocess_utils import run_command, spawn_detached

logger = logging.getLogger(__name__)

FILE_ATTRIBUTE_OFFLINE = 0x00001000
FILE_ATTRIBUTE_RECALL_ON_DATA_ACCESS = 0x00400000

CLOUD_ONLY_MASK = FILE_ATTRIBUTE_OFFLINE | FILE_ATTRIBUTE_RECALL_ON_DATA_ACCESS

ATTRIB_TIMEOUT = 60


def file_attributes(path: Path) -> int:
    """Windows attribute bits of a file (0 where unsupported)."""
    return getattr(os.stat(path), "st_file_attributes", 0)


class WindowsCloudSync:
    """CloudSync backed by file attributes and attrib.exe."""

    def __init__(self, attrib: str = "attrib") -> None:
        self.attrib = attrib

    def is_locally_available(self, path: Path) -> bool:
        try:
            return not file_attributes(path) & CLOUD_ONLY_MASK
        except OSError as e:
            logger.debug("Cannot read attributes of %s: %s", path, e)
            return False

    def request_download(self, path: Path) -> bool:
        logger.debug("Requesting download: %s", path)
        return spawn_detached([self.attrib, "+P", "-U", path])

    def release_to_cloud_only(self, path: Path) -> bool:
        try:
            _, stderr, returncode = run_command(
                [self.attrib, "-P", "+U", path], timeout=ATTRIB_TIMEOUT
            )
        except (OSError, subprocess.TimeoutExpired) as e:
            logger.warning("Could not release %s to cloud-only: %s", path.name, e)
            return False
        if returncode != 0:
            logger.warning(
                "Could not release %s to cloud-only: %s",
                path.name,
                stderr.strip() or returncode,
            )
            return False
        logger.info("Released to cloud-only: %s", path.name)
        return True
