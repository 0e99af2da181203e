"""Persistent record of per-file outcomes and cumulative savings."""

from mediashrink.history.models import (
    SCHEMA_VERSION,
    HistoryDocument,
    HistoryRecord,
    migrate_document,
)
from mediashrink.history.store import HistoryStore, history_key

__all__ = [
    "SCHEMA_VERSION",
    "HistoryDocument",
    "HistoryRecord",
    "HistoryStore",
    "history_key",
    "migrate_document",
]
