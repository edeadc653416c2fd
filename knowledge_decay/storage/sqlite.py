"""
SQLite key-value backend.

Uses aiosqlite for async operations. Values are stored as JSON text.
"""

import json
from datetime import datetime, timezone
from typing import Any

import aiosqlite

from knowledge_decay.config import StorageConfig
from knowledge_decay.storage.base import BaseKeyValueStore, StorageError


# SQL Schema
SCHEMA = """
CREATE TABLE IF NOT EXISTS kv_store (
    key TEXT PRIMARY KEY,
    value_json TEXT NOT NULL,
    updated_at TEXT NOT NULL
);
"""


class SQLiteKeyValueStore(BaseKeyValueStore):
    """
    SQLite-based key-value store.

    Each key holds one JSON document; writes replace the whole document.
    """

    def __init__(self, config: StorageConfig | None = None):
        """
        Initialize SQLite storage.

        Args:
            config: Storage configuration
        """
        self.config = config or StorageConfig()
        self.db_path = self.config.sqlite_path
        self._connection: aiosqlite.Connection | None = None
        self._connected = False

    async def connect(self) -> None:
        """Initialize connection and create schema."""
        try:
            # Ensure directory exists
            self.db_path.parent.mkdir(parents=True, exist_ok=True)

            self._connection = await aiosqlite.connect(str(self.db_path))
            self._connection.row_factory = aiosqlite.Row

            await self._connection.executescript(SCHEMA)
            await self._connection.commit()

            self._connected = True
        except Exception as e:
            raise StorageError(f"Failed to connect to SQLite: {e}") from e

    async def disconnect(self) -> None:
        """Close the database connection."""
        if self._connection:
            await self._connection.close()
            self._connection = None
        self._connected = False

    async def is_connected(self) -> bool:
        """Check if storage is connected."""
        return self._connected and self._connection is not None

    def _ensure_connected(self) -> None:
        """Raise error if not connected."""
        if not self._connected:
            raise StorageError("Not connected to database")

    async def get(self, key: str) -> Any | None:
        self._ensure_connected()

        try:
            async with self._connection.execute(
                "SELECT value_json FROM kv_store WHERE key = ?",
                (key,),
            ) as cursor:
                row = await cursor.fetchone()
        except aiosqlite.Error as e:
            raise StorageError(f"Failed to read {key!r}: {e}") from e

        if row is None:
            return None

        try:
            return json.loads(row["value_json"])
        except json.JSONDecodeError as e:
            raise StorageError(f"Corrupt value stored under {key!r}: {e}") from e

    async def set(self, key: str, value: Any) -> None:
        self._ensure_connected()

        try:
            value_json = json.dumps(value)
        except (TypeError, ValueError) as e:
            raise StorageError(f"Value for {key!r} is not JSON-serializable: {e}") from e

        try:
            await self._connection.execute(
                """
                INSERT INTO kv_store (key, value_json, updated_at)
                VALUES (?, ?, ?)
                ON CONFLICT(key) DO UPDATE SET
                    value_json = excluded.value_json,
                    updated_at = excluded.updated_at
                """,
                (key, value_json, datetime.now(timezone.utc).isoformat()),
            )
            await self._connection.commit()
        except aiosqlite.Error as e:
            raise StorageError(f"Failed to write {key!r}: {e}") from e

    async def delete(self, key: str) -> bool:
        self._ensure_connected()

        try:
            cursor = await self._connection.execute(
                "DELETE FROM kv_store WHERE key = ?",
                (key,),
            )
            await self._connection.commit()
        except aiosqlite.Error as e:
            raise StorageError(f"Failed to delete {key!r}: {e}") from e

        return cursor.rowcount > 0
