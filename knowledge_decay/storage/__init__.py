"""
Storage backends for the Knowledge Decay tracker.

Provides:
- In-memory key-value store (tests, ephemeral use)
- SQLite key-value store
- Abstract base class for custom backends
"""

from knowledge_decay.config import StorageConfig
from knowledge_decay.storage.base import (
    BaseKeyValueStore,
    StorageError,
)
from knowledge_decay.storage.memory import InMemoryKeyValueStore
from knowledge_decay.storage.sqlite import SQLiteKeyValueStore


def create_store(config: StorageConfig | None = None) -> BaseKeyValueStore:
    """
    Factory function to create the configured key-value backend.

    Args:
        config: Storage configuration. Uses defaults if None.
    """
    if config is None:
        config = StorageConfig()

    if config.backend == "memory":
        return InMemoryKeyValueStore()
    if config.backend == "sqlite":
        return SQLiteKeyValueStore(config)
    raise ValueError(f"Unknown storage backend: {config.backend}")


__all__ = [
    # Base
    "BaseKeyValueStore",
    "StorageError",
    # Implementations
    "InMemoryKeyValueStore",
    "SQLiteKeyValueStore",
    "create_store",
]
