"""
Abstract base classes for storage backends.

The history is persisted as a single value in a key-value store; backends
only need whole-value get and set.
"""

from abc import ABC, abstractmethod
from typing import Any


# Custom exceptions
class StorageError(Exception):
    """Base exception for storage errors."""

    pass


class BaseKeyValueStore(ABC):
    """
    Abstract base class for key-value persistence backends.

    Values must be JSON-serializable. Each ``set`` is fully visible to the
    next ``get``; callers serialize read-modify-write sequences themselves.
    """

    @abstractmethod
    async def connect(self) -> None:
        """Initialize connection to storage backend."""
        pass

    @abstractmethod
    async def disconnect(self) -> None:
        """Close connection to storage backend."""
        pass

    @abstractmethod
    async def is_connected(self) -> bool:
        """Check if storage is connected."""
        pass

    @abstractmethod
    async def get(self, key: str) -> Any | None:
        """
        Read the value stored under a key.

        Args:
            key: The slot name

        Returns:
            The stored value, or None if the key is empty
        """
        pass

    @abstractmethod
    async def set(self, key: str, value: Any) -> None:
        """
        Replace the value stored under a key.

        Args:
            key: The slot name
            value: JSON-serializable value
        """
        pass

    @abstractmethod
    async def delete(self, key: str) -> bool:
        """
        Remove a key.

        Returns:
            True if the key existed
        """
        pass

    # Context manager support
    async def __aenter__(self) -> "BaseKeyValueStore":
        await self.connect()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.disconnect()
