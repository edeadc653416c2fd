"""
Review module: retention buckets, filtered views and statistics.
"""

from knowledge_decay.review.classifier import (
    BucketFilter,
    HistoryStats,
    RetentionClassifier,
    ScoredEntry,
    classify,
    compute_stats,
    filter_entries,
)

__all__ = [
    "BucketFilter",
    "HistoryStats",
    "RetentionClassifier",
    "ScoredEntry",
    "classify",
    "compute_stats",
    "filter_entries",
]
