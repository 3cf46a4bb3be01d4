"""SQLite adapter for durable client-side key/value storage."""

import logging
import sqlite3
from contextlib import closing
from pathlib import Path

from ...core.domain.exceptions import StorageError
from ...core.ports.storage_port import StoragePort

logger = logging.getLogger(__name__)


class SQLiteStorage(StoragePort):
    """Key/value store kept in a single SQLite table.

    Each call opens its own connection, commits and closes it before
    returning, so a value written here survives the process exiting right
    afterwards and no file handles are left open.
    """

    def __init__(self, db_path: str | Path = "data/local_storage.db") -> None:
        """Initialize the storage adapter.

        Args:
            db_path: Path to the SQLite database file.

        Raises:
            StorageError: If the schema cannot be created.
        """
        self.db_path = Path(db_path)
        self._ensure_db_dir()
        self._init_db()

    def _ensure_db_dir(self) -> None:
        """Ensure the database directory exists."""
        self.db_path.parent.mkdir(parents=True, exist_ok=True)

    def _connect(self) -> closing[sqlite3.Connection]:
        """Open a connection that is closed when the block exits."""
        return closing(sqlite3.connect(self.db_path))

    def _init_db(self) -> None:
        """Initialize the database schema."""
        try:
            with self._connect() as conn, conn:
                conn.execute("""
                    CREATE TABLE IF NOT EXISTS local_storage (
                        key TEXT PRIMARY KEY,
                        value TEXT NOT NULL,
                        updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
                    )
                """)
                conn.commit()
        except sqlite3.Error as e:
            logger.error(f"Failed to initialize local storage: {e}")
            raise StorageError(
                "Failed to initialize local storage",
                cause=e,
                context={"db_path": str(self.db_path)},
            ) from e

    def get(self, key: str) -> str | None:
        try:
            with self._connect() as conn, conn:
                row = conn.execute(
                    "SELECT value FROM local_storage WHERE key = ?", (key,)
                ).fetchone()
        except sqlite3.Error as e:
            raise StorageError(f"Failed to read '{key}'", cause=e) from e
        return row[0] if row else None

    def set(self, key: str, value: str) -> None:
        try:
            with self._connect() as conn, conn:
                conn.execute(
                    """
                    INSERT INTO local_storage (key, value, updated_at)
                    VALUES (?, ?, CURRENT_TIMESTAMP)
                    ON CONFLICT(key) DO UPDATE SET
                        value = excluded.value,
                        updated_at = excluded.updated_at
                    """,
                    (key, value),
                )
                conn.commit()
        except sqlite3.Error as e:
            raise StorageError(f"Failed to write '{key}'", cause=e) from e

    def remove(self, key: str) -> None:
        try:
            with self._connect() as conn, conn:
                conn.execute("DELETE FROM local_storage WHERE key = ?", (key,))
                conn.commit()
        except sqlite3.Error as e:
            raise StorageError(f"Failed to remove '{key}'", cause=e) from e

    def clear(self) -> None:
        try:
            with self._connect() as conn, conn:
                conn.execute("DELETE FROM local_storage")
                conn.commit()
        except sqlite3.Error as e:
            raise StorageError("Failed to clear local storage", cause=e) from e

    def keys(self) -> list[str]:
        """List stored keys, mainly for diagnostics."""
        try:
            with self._connect() as conn, conn:
                rows = conn.execute("SELECT key FROM local_storage ORDER BY key").fetchall()
        except sqlite3.Error as e:
            raise StorageError("Failed to list local storage keys", cause=e) from e
        return [row[0] for row in rows]


class MemoryStorage(StoragePort):
    """Process-local storage with the same contract, for tests and dry runs."""

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self._data: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> str | None:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def remove(self, key: str) -> None:
        self._data.pop(key, None)

    def clear(self) -> None:
        self._data.clear()

    def keys(self) -> list[str]:
        return sorted(self._data)
