"""
Tests for the hook registry.
"""

import pytest

from knowledge_decay.api.hooks import HookContext, HookEvent, HookRegistry


class TestHookRegistry:
    """Tests for HookRegistry."""

    @pytest.mark.asyncio
    async def test_sync_and_async_hooks(self):
        registry = HookRegistry()
        calls = []

        async def on_cleared(ctx):
            calls.append(("async", ctx.event))

        registry.register(HookEvent.HISTORY_CLEARED, lambda ctx: calls.append(("sync", ctx.event)))
        registry.register_async(HookEvent.HISTORY_CLEARED, on_cleared)

        errors = await registry.trigger(HookContext(event=HookEvent.HISTORY_CLEARED))

        assert errors == []
        assert calls == [
            ("sync", HookEvent.HISTORY_CLEARED),
            ("async", HookEvent.HISTORY_CLEARED),
        ]

    @pytest.mark.asyncio
    async def test_errors_are_collected(self):
        """A failing hook does not stop the others."""
        registry = HookRegistry()
        calls = []

        def broken(ctx):
            raise RuntimeError("boom")

        registry.register(HookEvent.ENTRY_DELETED, broken)
        registry.register(HookEvent.ENTRY_DELETED, lambda ctx: calls.append(ctx.entry_id))

        errors = await registry.trigger(HookContext(event=HookEvent.ENTRY_DELETED, entry_id="a"))

        assert len(errors) == 1
        assert isinstance(errors[0], RuntimeError)
        assert calls == ["a"]

    @pytest.mark.asyncio
    async def test_only_matching_event(self):
        registry = HookRegistry()
        calls = []
        registry.register(HookEvent.ENTRY_TRACKED, lambda ctx: calls.append(ctx))

        await registry.trigger(HookContext(event=HookEvent.ENTRY_SKIPPED))

        assert calls == []

    @pytest.mark.asyncio
    async def test_disable(self):
        registry = HookRegistry()
        calls = []
        registry.register(HookEvent.ENTRY_TRACKED, lambda ctx: calls.append(ctx))

        registry.disable()
        await registry.trigger(HookContext(event=HookEvent.ENTRY_TRACKED))
        registry.enable()
        await registry.trigger(HookContext(event=HookEvent.ENTRY_TRACKED))

        assert len(calls) == 1

    def test_unregister_and_count(self):
        registry = HookRegistry()

        def callback(ctx):
            pass

        registry.register(HookEvent.ENTRY_TRACKED, callback)
        registry.register(HookEvent.ENTRY_DELETED, callback)
        assert registry.get_hook_count() == 2
        assert registry.get_hook_count(HookEvent.ENTRY_TRACKED) == 1

        assert registry.unregister(HookEvent.ENTRY_TRACKED, callback) is True
        assert registry.unregister(HookEvent.ENTRY_TRACKED, callback) is False

        registry.clear()
        assert registry.get_hook_count() == 0
