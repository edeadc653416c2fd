"""
Tests for retention buckets, filtering and statistics.
"""

import pytest

from knowledge_decay.models.entry import MemoryBucket, TopicEntry
from knowledge_decay.review.classifier import (
    RetentionClassifier,
    ScoredEntry,
    classify,
    compute_stats,
    filter_entries,
)


HOUR_MS = 3_600_000


def scored(score: float, entry_id: str = "x") -> ScoredEntry:
    return ScoredEntry(entry=TopicEntry(id=entry_id), score=score, bucket=classify(score))


class TestClassify:
    """Tests for bucket boundaries."""

    @pytest.mark.parametrize("score,bucket", [
        (100.0, MemoryBucket.STRONG),
        (80.0, MemoryBucket.STRONG),
        (79.999, MemoryBucket.REVIEW),
        (50.0, MemoryBucket.REVIEW),
        (49.999, MemoryBucket.FORGOTTEN),
        (0.0, MemoryBucket.FORGOTTEN),
    ])
    def test_boundaries(self, score, bucket):
        assert classify(score) == bucket

    def test_partition_is_exhaustive_and_disjoint(self):
        """Every score in [0, 100] lands in exactly one bucket."""
        for tenth in range(0, 1001):
            score = tenth / 10
            matches = [
                score >= 80,
                50 <= score < 80,
                score < 50,
            ]
            assert matches.count(True) == 1
            assert classify(score) in set(MemoryBucket)


class TestRetentionClassifier:
    """Tests for scoring entries."""

    def test_score_entries_preserves_order(self, make_entry, now):
        entries = [
            make_entry(complexity=3, learned_at=now),
            make_entry(complexity=3, learned_at=now - 36 * HOUR_MS),
            make_entry(complexity=5, learned_at=now - 100 * HOUR_MS),
        ]

        result = RetentionClassifier().score_entries(entries, now)

        assert [item.id for item in result] == [e.id for e in entries]
        assert [item.bucket for item in result] == [
            MemoryBucket.STRONG,
            MemoryBucket.REVIEW,
            MemoryBucket.FORGOTTEN,
        ]

    def test_subtopics_scored(self, make_entry, now):
        sub = TopicEntry(id="sub", complexity=1, learned_at=now - 72 * HOUR_MS)
        entry = make_entry(learned_at=now, subtopics=[sub])

        item = RetentionClassifier().score_entry(entry, now)

        assert item.score == pytest.approx(100.0)
        assert item.subtopics[0].id == "sub"
        assert item.subtopics[0].score == pytest.approx(50.0)
        assert item.subtopics[0].subtopics == []


class TestFilterEntries:
    """Tests for filtered views."""

    def test_all_returns_everything_in_order(self):
        items = [scored(90, "a"), scored(10, "b"), scored(60, "c")]
        assert filter_entries(items, "all") == items

    @pytest.mark.parametrize("bucket,expected", [
        (MemoryBucket.STRONG, ["a", "d"]),
        (MemoryBucket.REVIEW, ["c"]),
        (MemoryBucket.FORGOTTEN, ["b"]),
        ("review", ["c"]),
    ])
    def test_bucket_filter(self, bucket, expected):
        items = [scored(90, "a"), scored(10, "b"), scored(60, "c"), scored(85, "d")]
        assert [item.id for item in filter_entries(items, bucket)] == expected

    def test_unknown_bucket_raises(self):
        with pytest.raises(ValueError):
            filter_entries([scored(90)], "bogus")


class TestComputeStats:
    """Tests for dashboard statistics."""

    def test_empty(self):
        stats = compute_stats([])
        assert stats.total == 0
        assert stats.needs_review == 0
        assert stats.average_score == 0.0

    def test_counts_and_mean(self):
        stats = compute_stats([scored(90), scored(10), scored(60), scored(40)])
        assert stats.total == 4
        assert stats.needs_review == 2
        assert stats.average_score == pytest.approx(50.0)
