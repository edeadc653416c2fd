"""
Data models for learned topics.
"""

from knowledge_decay.models.entry import (
    AnalysisResult,
    ExportSnapshot,
    ImportMode,
    InsertOutcome,
    LearningEntry,
    MemoryBucket,
    TopicEntry,
    coerce_complexity,
    coerce_concepts,
    coerce_text,
    new_entry_id,
    now_ms,
    placeholder_concept,
)

__all__ = [
    "AnalysisResult",
    "ExportSnapshot",
    "ImportMode",
    "InsertOutcome",
    "LearningEntry",
    "MemoryBucket",
    "TopicEntry",
    "coerce_complexity",
    "coerce_concepts",
    "coerce_text",
    "new_entry_id",
    "now_ms",
    "placeholder_concept",
]
