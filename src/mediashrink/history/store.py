"""Durable per-file outcome history.

The store is write-through: every mutation rewrites the whole file
(temp file + fsync + atomic rename) before returning, so a crash can only
lose the outcome that was still being computed.

Loading never fails. A missing file is a fresh start; an unreadable,
non-JSON or structurally wrong file is logged and treated as empty;
individual malformed records are dropped.
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
from collections import Counter
from datetime import datetime, timezone
from pathlib import Path, PurePath

from pydantic import ValidationError

from mediashrink.domain.models import OutcomeStatus
from mediashrink.history.models import (
    HistoryDocument,
    HistoryRecord,
    migrate_document,
)

logger = logging.getLogger(__name__)


def history_key(path: Path, root: Path) -> str:
    """Key for a file: its path relative to the library root.

    Separators are normalized to "/" and leading separators trimmed so the
    key survives a drive letter or mount point change.
    """
    try:
        rel = os.path.relpath(path, root)
    except ValueError:
        # Different drive on Windows; fall back to the path without anchor
        pure = PurePath(path)
        rel = str(pure.relative_to(pure.anchor))
    key = rel.replace("\\", "/")
    while key.startswith("./"):
        key = key[2:]
    return key.lstrip("/")


class HistoryStore:
    """Typed, write-through history of per-file outcomes."""

    def __init__(
        self, path: Path, root: Path, document: HistoryDocument | None = None
    ) -> None:
        self.path = path
        self.root = root
        self._doc = document or HistoryDocument()

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------

    @classmethod
    def load(cls, path: Path, root: Path) -> HistoryStore:
        """Load the store, tolerating a missing or corrupt file."""
        if not path.exists():
            logger.info("No history at %s, starting fresh", path)
            return cls(path, root)

        try:
            raw = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
            logger.warning("History file %s is unreadable, starting empty: %s", path, e)
            return cls(path, root)

        if not isinstance(raw, dict):
            logger.warning("History file %s is not a JSON object, starting empty", path)
            return cls(path, root)

        try:
            migrated = migrate_document(raw)
        except ValueError as e:
            logger.warning("Cannot use history file %s, starting empty: %s", path, e)
            return cls(path, root)

        document = cls._parse_document(migrated)
        logger.info(
            "Loaded history: %d files, %d bytes saved so far",
            len(document.files),
            document.total_saved_bytes,
        )
        return cls(path, root, document)

    @staticmethod
    def _parse_document(data: dict) -> HistoryDocument:
        files: dict[str, HistoryRecord] = {}
        raw_files = data.get("files")
        if not isinstance(raw_files, dict):
            raw_files = {}
        for key, entry in raw_files.items():
            try:
                files[str(key)] = HistoryRecord.model_validate(entry)
            except ValidationError as e:
                first = e.errors()[0] if e.errors() else {}
                logger.warning(
                    "Dropping malformed history record %r: %s",
                    key,
                    first.get("msg", "validation error"),
                )

        document = HistoryDocument(files=files)
        derived = document.converted_total()
        stored = data.get("total_saved_bytes")
        if stored != derived:
            logger.warning(
                "History counter %r disagrees with records (%d); using records",
                stored,
                derived,
            )
        document.total_saved_bytes = derived
        return document

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def key_for(self, path: Path) -> str:
        return history_key(path, self.root)

    def has(self, path: Path) -> bool:
        """True if the file already has a recorded outcome."""
        return self.key_for(path) in self._doc.files

    def get(self, path: Path) -> HistoryRecord | None:
        return self._doc.files.get(self.key_for(path))

    @property
    def records(self) -> dict[str, HistoryRecord]:
        return dict(self._doc.files)

    @property
    def total_saved_bytes(self) -> int:
        return self._doc.total_saved_bytes

    def status_counts(self) -> Counter[OutcomeStatus]:
        return Counter(record.status for record in self._doc.files.values())

    # ------------------------------------------------------------------
    # Mutation (each call persists before returning)
    # ------------------------------------------------------------------

    def record_outcome(
        self, path: Path, status: OutcomeStatus, bytes_saved: int = 0
    ) -> HistoryRecord:
        """Record or replace a file's outcome and persist the store.

        Raises:
            pydantic.ValidationError: If bytes_saved is negative, or
                non-zero for a status other than converted.
            OSError: If the store cannot be written.
        """
        key = self.key_for(path)
        record = HistoryRecord(
            status=status,
            timestamp=datetime.now(timezone.utc),
            bytes_saved=bytes_saved,
        )
        previous = self._doc.files.get(key)
        if previous is not None and previous.status is OutcomeStatus.CONVERTED:
            self._doc.total_saved_bytes -= previous.bytes_saved
        self._doc.files[key] = record
        self._doc.total_saved_bytes += record.bytes_saved
        logger.debug("History: %s -> %s (%d bytes)", key, status.value, bytes_saved)
        self.save()
        return record

    def forget(self, path_or_key: Path | str) -> bool:
        """Remove one record so the file is reconsidered next run.

        Returns:
            True if a record was removed.
        """
        if isinstance(path_or_key, Path):
            key = self.key_for(path_or_key)
        else:
            key = path_or_key.replace("\\", "/").lstrip("/")
        record = self._doc.files.pop(key, None)
        if record is None:
            return False
        if record.status is OutcomeStatus.CONVERTED:
            self._doc.total_saved_bytes -= record.bytes_saved
        self.save()
        return True

    def reset(self) -> int:
        """Remove every record. Returns how many were removed."""
        count = len(self._doc.files)
        self._doc = HistoryDocument()
        self.save()
        return count

    def save(self) -> None:
        """Atomically write the store to disk."""
        self.path.parent.mkdir(parents=True, exist_ok=True)
        payload = self._doc.model_dump_json(indent=2)
        fd, tmp_name = tempfile.mkstemp(
            prefix=f".{self.path.name}.", suffix=".tmp", dir=self.path.parent
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(payload)
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp_name, self.path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise

    flush = save
