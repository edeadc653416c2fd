"""
In-memory key-value backend.

Used for tests and for running without a database file.
"""

import copy
from typing import Any

from knowledge_decay.storage.base import BaseKeyValueStore, StorageError


class InMemoryKeyValueStore(BaseKeyValueStore):
    """Dictionary-backed store. Values are deep-copied in and out."""

    def __init__(self, initial: dict[str, Any] | None = None):
        self._data: dict[str, Any] = copy.deepcopy(initial) if initial else {}
        self._connected = False

    async def connect(self) -> None:
        self._connected = True

    async def disconnect(self) -> None:
        self._connected = False

    async def is_connected(self) -> bool:
        return self._connected

    def _ensure_connected(self) -> None:
        if not self._connected:
            raise StorageError("Store is not connected")

    async def get(self, key: str) -> Any | None:
        self._ensure_connected()
        return copy.deepcopy(self._data.get(key))

    async def set(self, key: str, value: Any) -> None:
        self._ensure_connected()
        self._data[key] = copy.deepcopy(value)

    async def delete(self, key: str) -> bool:
        self._ensure_connected()
        return self._data.pop(key, None) is not None
