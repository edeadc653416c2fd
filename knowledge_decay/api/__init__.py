"""
API module for the Knowledge Decay tracker.

Provides:
- LearningTracker: main orchestrator
- Hook registry for lifecycle events
"""

from knowledge_decay.api.hooks import (
    HookContext,
    HookEvent,
    HookRegistry,
)
from knowledge_decay.api.tracker import (
    Dashboard,
    LearningTracker,
    TrackResult,
)

__all__ = [
    # Tracker
    "LearningTracker",
    "Dashboard",
    "TrackResult",
    # Hooks
    "HookEvent",
    "HookContext",
    "HookRegistry",
]
