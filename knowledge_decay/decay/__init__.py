"""
Decay module for memory strength estimation.

Provides:
- Half-life lookup by complexity
- Exponential forgetting curve scoring
- Retention calculator with review-time estimates
"""

from knowledge_decay.decay.functions import (
    DEFAULT_HALF_LIFE_HOURS,
    HALF_LIFE_HOURS,
    RetentionCalculator,
    RetentionResult,
    half_life_hours,
    retention_score,
)

__all__ = [
    "DEFAULT_HALF_LIFE_HOURS",
    "HALF_LIFE_HOURS",
    "RetentionCalculator",
    "RetentionResult",
    "half_life_hours",
    "retention_score",
]
