"""
Learning history lifecycle.

Provides:
- HistoryStore (insert, delete, restore, clear, import, export)
- Pure helpers for duplicate detection and merging
"""

from knowledge_decay.history.store import (
    EXPORT_VERSION,
    HistoryStore,
    ImportFormatError,
    insert_entry,
    is_duplicate,
    merge_histories,
    parse_import,
)

__all__ = [
    "EXPORT_VERSION",
    "HistoryStore",
    "ImportFormatError",
    "insert_entry",
    "is_duplicate",
    "merge_histories",
    "parse_import",
]
