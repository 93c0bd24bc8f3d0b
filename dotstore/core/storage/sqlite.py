"""SQLite backing store: one table per root segment, one row per record."""

from __future__ import annotations

import sqlite3
import threading
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path

from dotstore.core.config import DEFAULT_DB_DIR, DEFAULT_DB_NAME, get_logger
from dotstore.core.exceptions import StorageError
from dotstore.core.models import ABSENT, Absent

LOGGER = get_logger("storage.sqlite")

_MEMORY = ":memory:"

_CREATE_TABLE = """
CREATE TABLE IF NOT EXISTS {table} (
    key TEXT PRIMARY KEY,
    value BLOB NOT NULL
)
"""


class SQLiteBackingStore:
    """Backing store that keeps each collection in its own SQLite table."""

    def __init__(
        self,
        db_path: Path | str,
        *,
        table_prefix: str = "dotstore_",
        timeout: float = 5.0,
    ) -> None:
        self._db_path = db_path
        self._table_prefix = table_prefix
        self._timeout = timeout
        self._conn: sqlite3.Connection | None = None
        self._lock = threading.RLock()
        # Collections known to exist; tables are never dropped.
        self._collections: set[str] = set()

    def _get_connection(self) -> sqlite3.Connection:
        """Get or create a database connection."""
        if self._conn is None:
            if str(self._db_path) != _MEMORY:
                Path(self._db_path).parent.mkdir(parents=True, exist_ok=True)
            self._conn = sqlite3.connect(
                self._db_path, timeout=self._timeout, check_same_thread=False
            )
        return self._conn

    def close(self) -> None:
        """Close the database connection."""
        with self._lock:
            if self._conn is not None:
                self._conn.close()
                self._conn = None

    def __enter__(self) -> SQLiteBackingStore:
        return self

    def __exit__(self, exc_type: type | None, exc_val: Exception | None, exc_tb: object) -> None:
        self.close()

    @contextmanager
    def _session(self, action: str) -> Iterator[sqlite3.Connection]:
        """Serialize access to the connection and translate driver errors."""
        with self._lock:
            try:
                conn = self._get_connection()
                yield conn
            except sqlite3.Error as exc:
                if self._conn is not None and self._conn.in_transaction:
                    self._conn.rollback()
                LOGGER.warning("SQLite %s failed: %s", action, exc)
                raise StorageError(f"Failed to {action}: {exc}") from exc

    def table_name(self, collection: str) -> str:
        """Quoted table identifier for a collection."""
        name = f"{self._table_prefix}{collection}"
        return '"' + name.replace('"', '""') + '"'

    def ensure_collection(self, name: str) -> None:
        """Create the collection's table unless this instance already did."""
        if name in self._collections:
            return
        with self._session(f"create collection '{name}'") as conn:
            conn.execute(_CREATE_TABLE.format(table=self.table_name(name)))
            conn.commit()
        self._collections.add(name)
        LOGGER.info("Collection '%s' ready", name)

    def _collection_exists(self, conn: sqlite3.Connection, name: str) -> bool:
        if name in self._collections:
            return True
        # Table names are case-insensitive: "Foo" and "foo" share one table.
        row = conn.execute(
            "SELECT 1 FROM sqlite_master WHERE type = 'table' AND name = ? COLLATE NOCASE",
            (f"{self._table_prefix}{name}",),
        ).fetchone()
        if row is None:
            return False
        self._collections.add(name)
        return True

    def read(self, collection: str, key: str) -> bytes | Absent:
        """Get a record's bytes, or ABSENT if it was never written."""
        with self._session(f"read '{collection}/{key}'") as conn:
            if not self._collection_exists(conn, collection):
                return ABSENT
            row = conn.execute(
                f"SELECT value FROM {self.table_name(collection)} WHERE key = ?",
                (key,),
            ).fetchone()
        if row is None:
            return ABSENT
        value = row[0]
        # Rows written by other tools may hold TEXT rather than BLOB.
        return value.encode("utf-8") if isinstance(value, str) else bytes(value)

    def upsert(self, collection: str, key: str, value: bytes) -> None:
        """Insert or replace a record in a single statement."""
        self.ensure_collection(collection)
        with self._session(f"write '{collection}/{key}'") as conn:
            conn.execute(
                f"""
                INSERT INTO {self.table_name(collection)} (key, value) VALUES (?, ?)
                ON CONFLICT(key) DO UPDATE SET value = excluded.value
                """,
                (key, sqlite3.Binary(value)),
            )
            conn.commit()

    def delete_record(self, collection: str, key: str) -> None:
        """Delete a record. A missing collection or record is not an error."""
        with self._session(f"delete '{collection}/{key}'") as conn:
            if not self._collection_exists(conn, collection):
                return
            conn.execute(f"DELETE FROM {self.table_name(collection)} WHERE key = ?", (key,))
            conn.commit()

    def collections(self) -> list[str]:
        """Names of the collections that have a table, sorted."""
        prefix = self._table_prefix
        with self._session("list collections") as conn:
            rows = conn.execute(
                "SELECT name FROM sqlite_master WHERE type = 'table' ORDER BY name"
            ).fetchall()
        return [row[0][len(prefix) :] for row in rows if row[0].startswith(prefix)]


def get_default_db_path(project_root: Path) -> Path:
    """Get the default database path for a project."""
    return project_root / DEFAULT_DB_DIR / DEFAULT_DB_NAME
