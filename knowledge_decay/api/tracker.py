"""
Learning Tracker Orchestrator.

The main entry point for the Knowledge Decay tracker.
Ties capture, analysis, history and review together.
"""

import json
import logging
from dataclasses import dataclass
from pathlib import Path

from pydantic import BaseModel

from knowledge_decay.api.hooks import HookContext, HookEvent, HookRegistry
from knowledge_decay.capture import CaptureEvent, CapturePolicy
from knowledge_decay.config import KnowledgeDecayConfig
from knowledge_decay.encoding.analyzer import BaseAnalyzer, create_analyzer
from knowledge_decay.encoding.normalizer import fallback_analysis
from knowledge_decay.history.store import HistoryStore, ImportFormatError
from knowledge_decay.models.entry import (
    ExportSnapshot,
    ImportMode,
    InsertOutcome,
    LearningEntry,
    TopicEntry,
    now_ms,
)
from knowledge_decay.review.classifier import (
    BucketFilter,
    HistoryStats,
    RetentionClassifier,
    ScoredEntry,
    compute_stats,
    filter_entries,
)
from knowledge_decay.storage import BaseKeyValueStore, create_store


logger = logging.getLogger(__name__)


class TrackResult(BaseModel):
    """Result of tracking a capture."""

    outcome: InsertOutcome
    entry: LearningEntry


@dataclass
class Dashboard:
    """Scored view of the history at one moment."""

    stats: HistoryStats
    entries: list[ScoredEntry]


class LearningTracker:
    """
    The main Learning Tracker orchestrator.

    Provides a unified interface for:
    - Tracking finished learning sessions (analysis with fallback)
    - Scored, filtered dashboard views
    - Restoring, deleting and clearing entries
    - Export and import

    Usage:
        tracker = LearningTracker()
        await tracker.initialize()

        await tracker.observe(CaptureEvent(title=..., url=..., content=..., time_spent=45))
        view = await tracker.dashboard("review")
    """

    def __init__(
        self,
        config: KnowledgeDecayConfig | None = None,
        backend: BaseKeyValueStore | None = None,
        analyzer: BaseAnalyzer | None = None,
    ):
        self.config = config or KnowledgeDecayConfig()

        self.backend = backend or create_store(self.config.storage)
        self.store = HistoryStore(self.backend, self.config.history)
        self.analyzer = analyzer if analyzer is not None else create_analyzer(self.config.llm)
        self.policy = CapturePolicy(self.config.capture)
        self.classifier = RetentionClassifier(self.config.retention)
        self.hooks = HookRegistry()

        self._initialized = False

    async def initialize(self) -> None:
        """Connect the storage backend."""
        if self._initialized:
            return
        await self.backend.connect()
        self._initialized = True

    async def close(self) -> None:
        """Release storage and HTTP resources."""
        if self.analyzer is not None:
            await self.analyzer.close()
        await self.backend.disconnect()
        self._initialized = False

    async def __aenter__(self) -> "LearningTracker":
        await self.initialize()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    # Capture

    async def observe(self, event: CaptureEvent) -> TrackResult | None:
        """
        Track a session if it qualifies as learning.

        Returns:
            The track result, or None if the session was ignored
        """
        if not self.policy.qualifies(event):
            logger.debug(f"Ignoring session: {event.url}")
            return None
        return await self.track(event)

    async def _build_entry(self, event: CaptureEvent) -> LearningEntry:
        content = self.policy.clip_content(event.content)

        if self.analyzer is None:
            analysis = fallback_analysis(event.title)
        else:
            analysis = await self.analyzer.analyze(event.title, content, event.time_spent)

        return LearningEntry(
            title=event.title,
            url=event.url,
            time_spent=event.time_spent,
            learned_at=event.timestamp,
            concepts=analysis.concepts,
            summary=analysis.summary,
            complexity=analysis.complexity,
            domain=analysis.domain,
        )

    async def track(self, event: CaptureEvent) -> TrackResult:
        """
        Analyze a capture and store it.

        Analysis failures fall back to the title heuristic; storage
        failures propagate.
        """
        logger.info(f"Processing learning data: {event.title}")
        entry = await self._build_entry(event)
        outcome = await self.store.insert(entry)

        if outcome == InsertOutcome.INSERTED:
            logger.info(f"Learning session saved: {entry.concepts}")
            await self.hooks.trigger(HookContext(
                event=HookEvent.ENTRY_TRACKED,
                entry=entry,
                entry_id=entry.id,
            ))
        else:
            await self.hooks.trigger(HookContext(
                event=HookEvent.ENTRY_SKIPPED,
                entry=entry,
                data={"url": entry.url},
            ))

        return TrackResult(outcome=outcome, entry=entry)

    async def attach_subtopic(self, parent_id: str, event: CaptureEvent) -> TopicEntry | None:
        """
        Analyze a capture and group it under an existing entry.

        Returns:
            The stored subtopic, or None if the parent was not found
        """
        entry = await self._build_entry(event)
        subtopic = TopicEntry.model_validate(entry.model_dump(exclude={"subtopics"}))

        if not await self.store.add_subtopic(parent_id, subtopic):
            return None
        return subtopic

    # Review

    async def dashboard(
        self,
        bucket: BucketFilter = "all",
        now: int | None = None,
    ) -> Dashboard:
        """
        Score every entry now and return the filtered view.

        Statistics always cover the whole history.
        """
        if now is None:
            now = now_ms()

        scored = self.classifier.score_entries(await self.store.all(), now)
        return Dashboard(
            stats=compute_stats(scored),
            entries=filter_entries(scored, bucket),
        )

    async def remember(self, entry_id: str) -> bool:
        """Reset an entry to full strength."""
        restored = await self.store.restore_memory(entry_id)
        if restored:
            await self.hooks.trigger(HookContext(event=HookEvent.MEMORY_RESTORED, entry_id=entry_id))
        return restored

    async def forget(self, entry_id: str) -> bool:
        """Delete an entry."""
        deleted = await self.store.delete(entry_id)
        if deleted:
            await self.hooks.trigger(HookContext(event=HookEvent.ENTRY_DELETED, entry_id=entry_id))
        return deleted

    async def clear(self) -> None:
        """Delete the whole history. Callers confirm with the user first."""
        await self.store.clear_all()
        await self.hooks.trigger(HookContext(event=HookEvent.HISTORY_CLEARED))

    # Backup

    async def export(self) -> ExportSnapshot:
        return await self.store.export()

    async def export_to_file(self, path: Path) -> ExportSnapshot:
        """Write an export snapshot as JSON."""
        snapshot = await self.store.export()

        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w") as f:
            json.dump(snapshot.to_dict(), f, indent=2)

        return snapshot

    async def import_from_file(
        self,
        path: Path,
        mode: ImportMode = ImportMode.MERGE,
    ) -> list[LearningEntry]:
        """
        Import an export file.

        Raises:
            ImportFormatError: If the file cannot be read or is not a valid
                export (history untouched)
        """
        try:
            with open(path) as f:
                payload = json.load(f)
        except OSError as e:
            raise ImportFormatError(f"Cannot read import file: {e}") from e
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise ImportFormatError(f"Invalid file format: {e}") from e

        history = await self.store.import_data(payload, mode)
        await self.hooks.trigger(HookContext(
            event=HookEvent.HISTORY_IMPORTED,
            data={"mode": mode.value, "total": len(history)},
        ))
        return history
