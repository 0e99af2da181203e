"""Library root discovery and candidate enumeration."""

from __future__ import annotations

import logging
import os
from collections.abc import Iterable
from pathlib import Path

from mediashrink.config.env import EnvReader
from mediashrink.domain.models import OUTPUT_CONTAINER, TEMP_PREFIX, CandidateFile

logger = logging.getLogger(__name__)

VIDEO_EXTENSIONS = frozenset(
    {
        ".mp4",
        ".mkv",
        ".avi",
        ".mov",
        ".wmv",
        ".flv",
        ".m4v",
        ".mpg",
        ".mpeg",
        ".ts",
        ".webm",
    }
)

# Environment variables set by the OneDrive client, most specific last
ONEDRIVE_ENV_VARS = ("OneDriveCommercial", "OneDriveConsumer", "OneDrive")


class RootNotFoundError(Exception):
    """Raised when the library root folder cannot be located."""

    pass


def discover_root(
    configured: Path | None = None,
    env_reader: EnvReader | None = None,
    home: Path | None = None,
) -> Path:
    """Locate the library root.

    Precedence: the configured path, the OneDrive environment variables,
    then ~/OneDrive.

    Raises:
        RootNotFoundError: If no candidate exists as a directory.
    """
    if configured is not None:
        root = configured.expanduser()
        if root.is_dir():
            return root.resolve()
        raise RootNotFoundError(f"Configured root folder does not exist: {root}")

    reader = env_reader or EnvReader()
    candidates: list[Path] = []
    for var in ONEDRIVE_ENV_VARS:
        value = reader.get_path(var)
        if value is not None:
            candidates.append(value)
    candidates.append((home or Path.home()) / "OneDrive")

    for candidate in candidates:
        if candidate.is_dir():
            logger.debug("Discovered library root: %s", candidate)
            return candidate.resolve()

    raise RootNotFoundError(
        "Could not locate the library root; tried "
        + ", ".join(str(c) for c in candidates)
        + ". Pass --root or set MEDIASHRINK_ROOT."
    )


def is_conversion_output(path: Path, codec_families: Iterable[str]) -> bool:
    """True for files this tool produced (e.g. movie.av1.mkv)."""
    if path.suffix.casefold() != OUTPUT_CONTAINER:
        return False
    return any(
        path.stem.casefold().endswith(f".{family.casefold()}")
        for family in codec_families
    )


def discover_candidates(
    root: Path,
    min_size_bytes: int,
    codec_families: Iterable[str] = ("av1",),
) -> list[CandidateFile]:
    """Enumerate video files under root that are big enough to consider.

    Hidden files and directories, in-flight temp artifacts and earlier
    conversion outputs are skipped. Sizes come from stat(), which is
    valid for cloud placeholders without downloading them.

    Returns:
        Candidates sorted by path.
    """
    families = tuple(codec_families)
    found: list[CandidateFile] = []
    scanned = 0

    for dirpath, dirnames, filenames in os.walk(root):
        dirnames[:] = [d for d in dirnames if not d.startswith(".")]
        for filename in filenames:
            if filename.startswith(".") or filename.startswith(TEMP_PREFIX):
                continue
            path = Path(dirpath) / filename
            if path.suffix.casefold() not in VIDEO_EXTENSIONS:
                continue
            scanned += 1
            if is_conversion_output(path, families):
                continue
            try:
                size = path.stat().st_size
            except OSError as e:
                logger.warning("Cannot stat %s: %s", path, e)
                continue
            if size < min_size_bytes:
                continue
            found.append(CandidateFile(path=path, size_bytes=size))

    found.sort(key=lambda c: str(c.path).casefold())
    logger.info(
        "Found %d candidate(s) among %d video file(s) under %s",
        len(found),
        scanned,
        root,
    )
    return found
