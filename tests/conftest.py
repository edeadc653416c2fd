"""
Pytest configuration and shared fixtures.
"""

import tempfile
from pathlib import Path

import pytest

from knowledge_decay.config import HistoryConfig
from knowledge_decay.history.store import HistoryStore
from knowledge_decay.models.entry import LearningEntry
from knowledge_decay.storage.memory import InMemoryKeyValueStore


HOUR_MS = 3_600_000

# Fixed reference time: 2024-01-01T00:00:00Z
NOW_MS = 1_704_067_200_000


@pytest.fixture
def temp_directory():
    """Create a temporary directory for tests."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def now():
    """A fixed 'current time' in ms."""
    return NOW_MS


@pytest.fixture
def make_entry(now):
    """Factory for learning entries."""
    counter = {"n": 0}

    def _make(**overrides) -> LearningEntry:
        counter["n"] += 1
        data = {
            "id": f"learn_test_{counter['n']}",
            "title": f"Topic {counter['n']}",
            "url": f"https://example.org/page/{counter['n']}",
            "concepts": ["concept"],
            "summary": "A summary",
            "domain": "general",
            "complexity": 3,
            "time_spent": 60,
            "learned_at": now,
        }
        data.update(overrides)
        return LearningEntry(**data)

    return _make


@pytest.fixture
async def backend():
    """A connected in-memory key-value store."""
    store = InMemoryKeyValueStore()
    await store.connect()
    yield store
    await store.disconnect()


@pytest.fixture
def history_store(backend):
    """A history store over the in-memory backend."""
    return HistoryStore(backend, HistoryConfig())
