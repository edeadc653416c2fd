"""
Retention functions implementing the forgetting curve.

Based on the Ebbinghaus forgetting curve, expressed with a half-life:
harder material (higher complexity) has a shorter half-life and fades faster.
"""

import math

from pydantic import BaseModel

from knowledge_decay.config import RetentionConfig
from knowledge_decay.models.entry import TopicEntry, now_ms


MS_PER_HOUR = 3_600_000

# Half-life in hours by complexity
HALF_LIFE_HOURS: dict[int, float] = {
    1: 72.0,  # 3 days - very simple
    2: 48.0,  # 2 days - simple
    3: 36.0,  # 1.5 days - moderate
    4: 24.0,  # 1 day - complex
    5: 18.0,  # very complex
}
DEFAULT_HALF_LIFE_HOURS = 36.0


def half_life_hours(
    complexity: int,
    table: dict[int, float] | None = None,
    default: float = DEFAULT_HALF_LIFE_HOURS,
) -> float:
    """Look up the half-life for a complexity, falling back to the default."""
    if table is None:
        table = HALF_LIFE_HOURS
    return table.get(complexity, default)


def retention_score(
    complexity: int,
    learned_at: int,
    now: int,
    table: dict[int, float] | None = None,
    default_half_life: float = DEFAULT_HALF_LIFE_HOURS,
) -> float:
    """
    Exponential forgetting curve.

    Formula: R(t) = 100 × 0.5^(t/h)

    Where:
    - t = hours since learned_at (negative values count as zero)
    - h = half-life for the complexity

    Args:
        complexity: Entry complexity (1-5)
        learned_at: Capture time in ms since epoch
        now: Current time in ms since epoch

    Returns:
        Retention score in [0, 100]
    """
    hours_elapsed = max(0.0, (now - learned_at) / MS_PER_HOUR)
    half_life = half_life_hours(complexity, table, default_half_life)

    retention = 100.0 * math.pow(0.5, hours_elapsed / half_life)
    return max(0.0, min(100.0, retention))


class RetentionResult(BaseModel):
    """Result of a retention calculation."""

    score: float
    hours_elapsed: float
    half_life_hours: float


class RetentionCalculator:
    """
    Calculator for entry retention.

    Scores are always derived from the current time and never stored.
    """

    def __init__(self, config: RetentionConfig | None = None):
        self.config = config or RetentionConfig()

    def half_life(self, complexity: int) -> float:
        return half_life_hours(
            complexity,
            self.config.half_life_hours,
            self.config.default_half_life_hours,
        )

    def score(self, entry: TopicEntry, now: int | None = None) -> float:
        """Current retention score of an entry (0-100)."""
        if now is None:
            now = now_ms()
        return retention_score(
            entry.complexity,
            entry.learned_at,
            now,
            self.config.half_life_hours,
            self.config.default_half_life_hours,
        )

    def calculate(self, entry: TopicEntry, now: int | None = None) -> RetentionResult:
        """Calculate retention with metadata about the calculation."""
        if now is None:
            now = now_ms()
        return RetentionResult(
            score=self.score(entry, now),
            hours_elapsed=max(0.0, (now - entry.learned_at) / MS_PER_HOUR),
            half_life_hours=self.half_life(entry.complexity),
        )

    def hours_until_threshold(
        self,
        entry: TopicEntry,
        threshold: float | None = None,
        now: int | None = None,
    ) -> float:
        """
        Estimate hours until an entry's score falls below a threshold.

        Defaults to the review threshold, i.e. when the topic will count
        as forgotten.

        Returns:
            Hours until threshold (0 if already below, inf if never)
        """
        if threshold is None:
            threshold = self.config.review_threshold
        if threshold <= 0:
            return float("inf")

        current = self.score(entry, now)
        if current <= threshold:
            return 0.0

        # From R(t) = R₀ × 0.5^(t/h), solve for t when R(t) = threshold
        half_life = self.half_life(entry.complexity)
        return max(0.0, half_life * math.log2(current / threshold))
