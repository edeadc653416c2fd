"""
Knowledge Decay - Learning history with forgetting-curve retention

Tracks time spent on learning content, has an LLM summarize and classify it,
and estimates how much of each topic is still remembered:
- Exponential forgetting curve with complexity-based half-lives
- Normalization of untrusted LLM analysis, with a title heuristic fallback
- History store with duplicate suppression, capacity trimming,
  restore, import/merge and export
- Strong / review / forgotten buckets and dashboard statistics

Quick Start:
    from knowledge_decay import LearningTracker, CaptureEvent

    tracker = LearningTracker()
    await tracker.initialize()
    await tracker.observe(CaptureEvent(title="Intro to Python", url=..., content=..., time_spent=120))
    view = await tracker.dashboard("review")
"""

from knowledge_decay.config import KnowledgeDecayConfig
from knowledge_decay.models.entry import (
    AnalysisResult,
    ExportSnapshot,
    ImportMode,
    InsertOutcome,
    LearningEntry,
    MemoryBucket,
    TopicEntry,
)
from knowledge_decay.capture import CaptureEvent, CapturePolicy
from knowledge_decay.decay.functions import RetentionCalculator, retention_score
from knowledge_decay.encoding.normalizer import fallback_analysis, normalize_analysis
from knowledge_decay.history.store import HistoryStore, ImportFormatError
from knowledge_decay.review.classifier import RetentionClassifier, compute_stats, filter_entries
from knowledge_decay.api.tracker import LearningTracker

__version__ = "0.1.0"

__all__ = [
    # Main entry point
    "LearningTracker",

    # Configuration
    "KnowledgeDecayConfig",

    # Models
    "AnalysisResult",
    "ExportSnapshot",
    "LearningEntry",
    "TopicEntry",
    "CaptureEvent",

    # Enums
    "ImportMode",
    "InsertOutcome",
    "MemoryBucket",

    # Components
    "CapturePolicy",
    "HistoryStore",
    "ImportFormatError",
    "RetentionCalculator",
    "RetentionClassifier",
    "retention_score",
    "normalize_analysis",
    "fallback_analysis",
    "compute_stats",
    "filter_entries",
]
