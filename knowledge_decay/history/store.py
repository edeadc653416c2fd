"""
Learning history store.

Owns the ordered collection of learning entries (most recent first) kept in
a single key-value slot. Handles:
- Insert with duplicate suppression and capacity trimming
- Delete, memory restore and subtopic grouping
- Import (replace or merge by id) and export snapshots

All mutations run under one lock so that the read-modify-write against the
slot is never interleaved.
"""

import asyncio
import logging
from datetime import datetime, timezone
from typing import Any

from pydantic import ValidationError

from knowledge_decay.config import HistoryConfig
from knowledge_decay.models.entry import (
    ExportSnapshot,
    ImportMode,
    InsertOutcome,
    LearningEntry,
    TopicEntry,
    now_ms,
)
from knowledge_decay.storage.base import BaseKeyValueStore, StorageError


logger = logging.getLogger(__name__)

EXPORT_VERSION = "1.0"


class ImportFormatError(ValueError):
    """Raised when an import payload does not have the export shape."""

    pass


def is_duplicate(
    entry: TopicEntry,
    existing: TopicEntry,
    window_ms: int = 300_000,
) -> bool:
    """
    Check whether ``entry`` repeats ``existing``.

    Only the elapsed time since the existing capture is compared, so an
    entry dated *before* an existing one with the same URL also counts as
    a duplicate.
    """
    return existing.url == entry.url and (entry.learned_at - existing.learned_at) < window_ms


def insert_entry(
    history: list[LearningEntry],
    entry: LearningEntry,
    capacity: int = 100,
    window_ms: int = 300_000,
) -> tuple[list[LearningEntry], InsertOutcome]:
    """
    Prepend an entry unless it duplicates one already stored.

    Returns:
        (new history, outcome). The history is trimmed to ``capacity``,
        dropping the oldest entries.
    """
    if any(is_duplicate(entry, item, window_ms) for item in history):
        return list(history), InsertOutcome.SKIPPED_DUPLICATE

    return ([entry] + list(history))[:capacity], InsertOutcome.INSERTED


def merge_histories(
    existing: list[LearningEntry],
    incoming: list[LearningEntry],
    mode: ImportMode = ImportMode.MERGE,
) -> list[LearningEntry]:
    """
    Combine a stored history with an imported one.

    REPLACE adopts ``incoming`` as is. MERGE keys both by id: entries only in
    ``existing`` are kept, entries only in ``incoming`` are added, and on an id
    collision the imported entry replaces the stored one.

    Within each input, a repeated id keeps its first position and last value.
    """
    merged: dict[str, LearningEntry] = {}

    if mode == ImportMode.MERGE:
        for entry in existing:
            merged[entry.id] = entry

    for entry in incoming:
        merged[entry.id] = entry

    return list(merged.values())


def parse_import(payload: Any) -> list[LearningEntry]:
    """
    Validate an export payload and return its entries.

    Raises:
        ImportFormatError: If ``data`` is missing, not a list, or holds
            an entry that cannot be read
    """
    if not isinstance(payload, dict):
        raise ImportFormatError("Import file must contain a JSON object")

    data = payload.get("data")
    if not isinstance(data, list):
        raise ImportFormatError("Import file has no 'data' list")

    entries = []
    for index, item in enumerate(data):
        if not isinstance(item, dict):
            raise ImportFormatError(f"Entry {index} is not an object")
        try:
            entries.append(LearningEntry.from_dict(item))
        except ValidationError as e:
            raise ImportFormatError(f"Entry {index} is invalid: {e}") from e

    return entries


def _drop_repeated_ids(history: list[LearningEntry]) -> list[LearningEntry]:
    """Remove subtopics whose id is already used elsewhere in the history."""
    seen = {entry.id for entry in history}
    cleaned = []

    for entry in history:
        subtopics = []
        for sub in entry.subtopics:
            if sub.id in seen:
                logger.info(f"Dropping subtopic {sub.id} with repeated id")
                continue
            seen.add(sub.id)
            subtopics.append(sub)

        if len(subtopics) != len(entry.subtopics):
            entry = entry.model_copy(update={"subtopics": subtopics})
        cleaned.append(entry)

    return cleaned


class HistoryStore:
    """
    The learning history, persisted through an injected key-value backend.

    Usage:
        store = HistoryStore(InMemoryKeyValueStore())
        await store.backend.connect()

        outcome = await store.insert(entry)
        entries = await store.all()
    """

    def __init__(
        self,
        backend: BaseKeyValueStore,
        config: HistoryConfig | None = None,
    ):
        self.backend = backend
        self.config = config or HistoryConfig()
        self._lock = asyncio.Lock()

    async def _load(self) -> list[LearningEntry]:
        """Read and validate the stored history."""
        raw = await self.backend.get(self.config.storage_key)
        if raw is None:
            return []
        if not isinstance(raw, list):
            raise StorageError(f"Stored history under {self.config.storage_key!r} is not a list")

        try:
            return [LearningEntry.from_dict(item) for item in raw]
        except ValidationError as e:
            raise StorageError(f"Stored history is corrupt: {e}") from e

    async def _save(self, history: list[LearningEntry]) -> None:
        await self.backend.set(
            self.config.storage_key,
            [entry.to_dict() for entry in history],
        )

    # Reads

    async def all(self) -> list[LearningEntry]:
        """All entries, most recent first."""
        return await self._load()

    async def get(self, entry_id: str) -> LearningEntry | None:
        """Find a top-level entry by id."""
        for entry in await self._load():
            if entry.id == entry_id:
                return entry
        return None

    async def count(self) -> int:
        return len(await self._load())

    async def export(self, now: datetime | None = None) -> ExportSnapshot:
        """Snapshot of the whole history for backup."""
        if now is None:
            now = datetime.now(timezone.utc)

        history = await self._load()
        return ExportSnapshot(
            version=EXPORT_VERSION,
            export_date=now.isoformat(timespec="milliseconds").replace("+00:00", "Z"),
            total_topics=len(history),
            data=history,
        )

    # Mutations

    async def insert(self, entry: LearningEntry) -> InsertOutcome:
        """
        Store a new entry at the front of the history.

        A capture of the same URL within the duplicate window of an existing
        entry is skipped, not an error.

        Raises:
            ValueError: If the entry's id is already in use
        """
        async with self._lock:
            history = await self._load()

            used_ids = {i for item in history for i in item.iter_ids()}
            if any(i in used_ids for i in entry.iter_ids()):
                raise ValueError(f"Entry id already in use: {entry.id}")

            history, outcome = insert_entry(
                history,
                entry,
                capacity=self.config.capacity,
                window_ms=self.config.duplicate_window_ms,
            )

            if outcome == InsertOutcome.SKIPPED_DUPLICATE:
                logger.info(f"Duplicate entry skipped: {entry.url}")
                return outcome

            await self._save(history)
            logger.debug(f"Stored entry {entry.id} ({len(history)} total)")
            return outcome

    async def delete(self, entry_id: str) -> bool:
        """
        Remove a top-level entry.

        Returns:
            True if deleted, False if not found
        """
        async with self._lock:
            history = await self._load()
            remaining = [entry for entry in history if entry.id != entry_id]

            if len(remaining) == len(history):
                logger.info(f"Delete: entry {entry_id} not found")
                return False

            await self._save(remaining)
            return True

    async def restore_memory(self, entry_id: str, now: int | None = None) -> bool:
        """
        Mark an entry as still remembered by resetting its learned time.

        Matches top-level entries and subtopics. No other field changes.

        Returns:
            True if restored, False if not found
        """
        if now is None:
            now = now_ms()

        async with self._lock:
            history = await self._load()
            found = False

            for index, entry in enumerate(history):
                if entry.id == entry_id:
                    history[index] = entry.model_copy(update={"learned_at": now})
                    found = True
                    break

                subtopics = list(entry.subtopics)
                for sub_index, sub in enumerate(subtopics):
                    if sub.id == entry_id:
                        subtopics[sub_index] = sub.model_copy(update={"learned_at": now})
                        history[index] = entry.model_copy(update={"subtopics": subtopics})
                        found = True
                        break
                if found:
                    break

            if not found:
                logger.info(f"Restore: entry {entry_id} not found")
                return False

            await self._save(history)
            return True

    async def add_subtopic(self, parent_id: str, subtopic: TopicEntry) -> bool:
        """
        Group a related capture under an existing top-level entry.

        Returns:
            True if attached, False if the parent was not found

        Raises:
            ValueError: If the subtopic's id is already in use
        """
        if isinstance(subtopic, LearningEntry):
            subtopic = TopicEntry.model_validate(subtopic.model_dump(exclude={"subtopics"}))

        async with self._lock:
            history = await self._load()

            used_ids = {i for item in history for i in item.iter_ids()}
            if subtopic.id in used_ids:
                raise ValueError(f"Entry id already in use: {subtopic.id}")

            for index, entry in enumerate(history):
                if entry.id == parent_id:
                    history[index] = entry.model_copy(
                        update={"subtopics": list(entry.subtopics) + [subtopic]}
                    )
                    await self._save(history)
                    return True

            logger.info(f"Add subtopic: parent {parent_id} not found")
            return False

    async def clear_all(self) -> None:
        """Remove every entry. Irreversible."""
        async with self._lock:
            await self._save([])
            logger.info("Learning history cleared")

    async def import_entries(
        self,
        incoming: list[LearningEntry],
        mode: ImportMode = ImportMode.MERGE,
    ) -> list[LearningEntry]:
        """
        Replace or merge the stored history with imported entries.

        The result is ordered most recent first and trimmed to capacity.

        Returns:
            The new history
        """
        async with self._lock:
            existing = await self._load() if mode == ImportMode.MERGE else []
            merged = merge_histories(existing, incoming, mode)

            merged.sort(key=lambda entry: entry.learned_at, reverse=True)
            if len(merged) > self.config.capacity:
                logger.info(
                    f"Import exceeds capacity, dropping {len(merged) - self.config.capacity} oldest entries"
                )
                merged = merged[: self.config.capacity]
            merged = _drop_repeated_ids(merged)

            await self._save(merged)
            logger.info(f"Imported {len(incoming)} entries ({mode.value}), {len(merged)} stored")
            return merged

    async def import_data(
        self,
        payload: Any,
        mode: ImportMode = ImportMode.MERGE,
    ) -> list[LearningEntry]:
        """
        Import an export payload.

        The payload is fully validated before anything is written.

        Raises:
            ImportFormatError: If the payload is malformed (store untouched)
        """
        incoming = parse_import(payload)
        return await self.import_entries(incoming, mode)
