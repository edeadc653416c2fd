"""
Event hooks for learning history lifecycle.

Provides a pub/sub system for:
- Tracked and skipped captures (e.g. desktop notifications)
- Deletes, restores and clears
- Imports
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Awaitable, Callable

from knowledge_decay.models.entry import LearningEntry


logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    """Get current UTC time (timezone-aware)."""
    return datetime.now(timezone.utc)


class HookEvent(str, Enum):
    """Types of hook events."""

    ENTRY_TRACKED = "entry_tracked"
    ENTRY_SKIPPED = "entry_skipped"
    ENTRY_DELETED = "entry_deleted"
    MEMORY_RESTORED = "memory_restored"
    HISTORY_CLEARED = "history_cleared"
    HISTORY_IMPORTED = "history_imported"


@dataclass
class HookContext:
    """Context passed to hook callbacks."""

    event: HookEvent
    timestamp: datetime = field(default_factory=_utcnow)
    entry: LearningEntry | None = None
    entry_id: str | None = None
    data: dict = field(default_factory=dict)


# Type for hook callbacks
HookCallback = Callable[[HookContext], None]
AsyncHookCallback = Callable[[HookContext], Awaitable[None]]


class HookRegistry:
    """
    Registry for history event hooks.

    Callback failures are collected and logged; they never interrupt
    the operation that fired the event.
    """

    def __init__(self):
        self._sync_hooks: dict[HookEvent, list[HookCallback]] = {}
        self._async_hooks: dict[HookEvent, list[AsyncHookCallback]] = {}
        self._enabled = True

    def register(self, event: HookEvent, callback: HookCallback) -> None:
        """Register a synchronous hook for an event."""
        self._sync_hooks.setdefault(event, []).append(callback)

    def register_async(self, event: HookEvent, callback: AsyncHookCallback) -> None:
        """Register an async hook for an event."""
        self._async_hooks.setdefault(event, []).append(callback)

    def unregister(self, event: HookEvent, callback: HookCallback) -> bool:
        """
        Unregister a hook.

        Returns:
            True if callback was found and removed
        """
        for hooks in (self._sync_hooks, self._async_hooks):
            if callback in hooks.get(event, []):
                hooks[event].remove(callback)
                return True
        return False

    async def trigger(self, context: HookContext) -> list[Exception]:
        """
        Trigger all hooks for an event.

        Returns:
            List of any exceptions that occurred
        """
        if not self._enabled:
            return []

        errors = []

        for callback in self._sync_hooks.get(context.event, []):
            try:
                callback(context)
            except Exception as e:
                errors.append(e)

        for callback in self._async_hooks.get(context.event, []):
            try:
                await callback(context)
            except Exception as e:
                errors.append(e)

        for error in errors:
            logger.error(f"Hook for {context.event.value} failed: {error}")

        return errors

    def enable(self) -> None:
        self._enabled = True

    def disable(self) -> None:
        self._enabled = False

    def clear(self, event: HookEvent | None = None) -> None:
        """Clear hooks for one event, or all of them."""
        if event:
            self._sync_hooks.pop(event, None)
            self._async_hooks.pop(event, None)
        else:
            self._sync_hooks.clear()
            self._async_hooks.clear()

    def get_hook_count(self, event: HookEvent | None = None) -> int:
        """Get count of registered hooks."""
        if event:
            return len(self._sync_hooks.get(event, [])) + len(self._async_hooks.get(event, []))

        return sum(len(hooks) for hooks in self._sync_hooks.values()) + sum(
            len(hooks) for hooks in self._async_hooks.values()
        )
