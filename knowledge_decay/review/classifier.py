"""
Retention classification for review.

Scores entries against the current time, buckets them into
strong / review / forgotten, and computes dashboard statistics.
"""

from dataclasses import dataclass, field
from typing import Literal, Union

from pydantic import BaseModel

from knowledge_decay.config import RetentionConfig
from knowledge_decay.decay.functions import RetentionCalculator
from knowledge_decay.models.entry import LearningEntry, MemoryBucket, TopicEntry, now_ms


BucketFilter = Union[MemoryBucket, Literal["all"]]


def classify(
    score: float,
    strong_threshold: float = 80.0,
    review_threshold: float = 50.0,
) -> MemoryBucket:
    """
    Bucket a retention score.

    - strong: score >= 80
    - review: 50 <= score < 80
    - forgotten: score < 50
    """
    if score >= strong_threshold:
        return MemoryBucket.STRONG
    if score >= review_threshold:
        return MemoryBucket.REVIEW
    return MemoryBucket.FORGOTTEN


@dataclass
class ScoredEntry:
    """An entry with its retention score at a given moment."""

    entry: TopicEntry
    score: float
    bucket: MemoryBucket
    subtopics: list["ScoredEntry"] = field(default_factory=list)

    @property
    def id(self) -> str:
        return self.entry.id


class HistoryStats(BaseModel):
    """Aggregate statistics over scored entries."""

    total: int
    needs_review: int  # forgotten entries
    average_score: float


class RetentionClassifier:
    """
    Scores and buckets entries.

    Scores are derived on every call from the supplied time, so the result
    always reflects how long ago each topic was learned.
    """

    def __init__(
        self,
        config: RetentionConfig | None = None,
        calculator: RetentionCalculator | None = None,
    ):
        self.config = config or RetentionConfig()
        self.calculator = calculator or RetentionCalculator(self.config)

    def classify(self, score: float) -> MemoryBucket:
        return classify(score, self.config.strong_threshold, self.config.review_threshold)

    def score_entry(self, entry: TopicEntry, now: int | None = None) -> ScoredEntry:
        """Score one entry and any subtopics it has."""
        if now is None:
            now = now_ms()

        score = self.calculator.score(entry, now)
        subtopics = []
        if isinstance(entry, LearningEntry):
            subtopics = [self.score_entry(sub, now) for sub in entry.subtopics]

        return ScoredEntry(
            entry=entry,
            score=score,
            bucket=self.classify(score),
            subtopics=subtopics,
        )

    def score_entries(
        self,
        entries: list[LearningEntry],
        now: int | None = None,
    ) -> list[ScoredEntry]:
        """Score entries, preserving their order."""
        if now is None:
            now = now_ms()
        return [self.score_entry(entry, now) for entry in entries]


def filter_entries(
    scored: list[ScoredEntry],
    bucket: BucketFilter = "all",
) -> list[ScoredEntry]:
    """
    Keep entries in a bucket, preserving relative order.

    ``"all"`` returns every entry unchanged.
    """
    if bucket == "all":
        return list(scored)

    bucket = MemoryBucket(bucket)
    return [item for item in scored if item.bucket == bucket]


def compute_stats(scored: list[ScoredEntry]) -> HistoryStats:
    """Count, forgotten count and mean score (0 for an empty history)."""
    total = len(scored)
    if total == 0:
        return HistoryStats(total=0, needs_review=0, average_score=0.0)

    return HistoryStats(
        total=total,
        needs_review=sum(1 for item in scored if item.bucket == MemoryBucket.FORGOTTEN),
        average_score=sum(item.score for item in scored) / total,
    )
