"""Keyed JSON blob storage backed by SQLite.

Plays the role browser local storage plays for a single-page app: a
handful of named values read at startup and rewritten after every
mutation. Absence of a key means "use defaults".
"""

import json
import sqlite3
import time
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Dict, Iterable, Iterator, List, Optional

from config import get_logger
from exceptions import StorageError

logger = get_logger(__name__).bind(component="storage")


class SQLiteStateStorage:
    """
    Persistent key/value store using SQLite.

    Values are JSON-encoded. Multi-key writes go through set_many() or
    write_batch() so they land in one transaction.
    """

    def __init__(self, db_path: str):
        """
        Initialize state storage.

        Args:
            db_path: Path to SQLite database file (parent dirs created lazily)
        """
        self.db_path = str(db_path)
        Path(self.db_path).parent.mkdir(parents=True, exist_ok=True)
        self._init_db()

    def _init_db(self):
        """Initialize state table"""
        with self._connection() as conn:
            conn.execute("PRAGMA journal_mode=WAL")
            conn.execute("""
                CREATE TABLE IF NOT EXISTS state (
                    key TEXT PRIMARY KEY,
                    value TEXT NOT NULL,
                    updated_at REAL NOT NULL
                )
            """)
        logger.info("initialized state storage", db_path=self.db_path)

    @contextmanager
    def _connection(self) -> Iterator[sqlite3.Connection]:
        """Open a connection, commit on success, always close"""
        try:
            conn = sqlite3.connect(self.db_path)
        except sqlite3.Error as e:
            raise StorageError("Failed to open state database", original_error=e) from e
        try:
            with conn:
                yield conn
        except sqlite3.Error as e:
            raise StorageError("State database operation failed", original_error=e) from e
        finally:
            conn.close()

    def get(self, key: str, default: Any = None) -> Any:
        """Return the decoded value for key, or default when absent"""
        with self._connection() as conn:
            row = conn.execute("SELECT value FROM state WHERE key = ?", (key,)).fetchone()

        if row is None:
            return default

        try:
            return json.loads(row[0])
        except json.JSONDecodeError as e:
            raise StorageError("Corrupt value in state storage", key=key, original_error=e) from e

    def set(self, key: str, value: Any):
        self.set_many({key: value})

    def set_many(self, values: Dict[str, Any]):
        """Write several keys in a single transaction"""
        now = time.time()
        rows = [(key, json.dumps(value), now) for key, value in values.items()]
        with self._connection() as conn:
            conn.executemany(
                "INSERT OR REPLACE INTO state (key, value, updated_at) VALUES (?, ?, ?)",
                rows,
            )

    def write_batch(
        self,
        values: Optional[Dict[str, Any]] = None,
        delete_keys: Iterable[str] = (),
        delete_prefixes: Iterable[str] = (),
    ) -> int:
        """Prefix deletes, key deletes and sets in one transaction

        Either every change lands or none does. Returns the number of rows
        removed by the deletes.
        """
        now = time.time()
        rows = [(key, json.dumps(value), now) for key, value in (values or {}).items()]
        removed = 0
        with self._connection() as conn:
            for prefix in delete_prefixes:
                removed += conn.execute(
                    "DELETE FROM state WHERE substr(key, 1, ?) = ?",
                    (len(prefix), prefix),
                ).rowcount
            for key in delete_keys:
                removed += conn.execute("DELETE FROM state WHERE key = ?", (key,)).rowcount
            conn.executemany(
                "INSERT OR REPLACE INTO state (key, value, updated_at) VALUES (?, ?, ?)",
                rows,
            )
        return removed

    def delete(self, key: str):
        with self._connection() as conn:
            conn.execute("DELETE FROM state WHERE key = ?", (key,))

    def delete_prefix(self, prefix: str) -> int:
        """Delete every key starting with prefix. Returns rows removed."""
        with self._connection() as conn:
            cursor = conn.execute(
                "DELETE FROM state WHERE substr(key, 1, ?) = ?",
                (len(prefix), prefix),
            )
            return cursor.rowcount

    def keys(self, prefix: str = "") -> List[str]:
        with self._connection() as conn:
            rows = conn.execute(
                "SELECT key FROM state WHERE substr(key, 1, ?) = ? ORDER BY key",
                (len(prefix), prefix),
            ).fetchall()
        return [row[0] for row in rows]
