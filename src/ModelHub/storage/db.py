"""SQLite-backed document store utilities."""

from __future__ import annotations

import json
import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Iterator, Mapping, Sequence

from ModelHub.utils.log import log

#: Collections holding domain data; counted when deciding fresh vs. legacy installs.
ENTITY_COLLECTIONS: tuple[str, ...] = (
    "artifacts",
    "branches",
    "elements",
    "organizations",
    "projects",
    "users",
)

#: Every collection the store manages.
COLLECTIONS: tuple[str, ...] = ENTITY_COLLECTIONS + ("webhooks", "server_data")

WEBHOOK_URL_INDEX_DDL = (
    "CREATE INDEX IF NOT EXISTS idx_webhooks_url "
    "ON webhooks(json_extract(data, '$.url'))"
)


class DatabaseManager:
    """Shared database connection manager.

    Uses singleton pattern to ensure only one connection is created per process.
    Migration runs are strictly sequential, so a single connection also keeps
    marker writes and step writes on the same transaction timeline.

    Supports context manager protocol for automatic connection cleanup.
    """

    _instance = None

    def __new__(cls, db_path: Path):
        """Create or return existing DatabaseManager instance.

        Args:
            db_path: Absolute path or project-relative path to database file.

        Returns:
            DatabaseManager singleton instance.
        """
        if cls._instance is None:
            cls._instance = super().__new__(cls)
            cls._instance.db_path = Path(db_path)
            cls._instance.conn = ensure_db(Path(db_path))
            init_schema(cls._instance.conn)
        return cls._instance

    def get_connection(self) -> sqlite3.Connection:
        """Get the shared database connection.

        Returns:
            SQLite connection.
        """
        return self.conn

    def close(self) -> None:
        """Close the database connection and reset singleton instance.

        This ensures the connection is properly closed and allows creating
        a new instance with a different database path if needed.
        """
        if hasattr(self, 'conn') and self.conn:
            self.conn.close()
            self.conn = None
            type(self)._instance = None

    def __enter__(self) -> DatabaseManager:
        """Enter context manager.

        Returns:
            Self for use in with statement.
        """
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        """Exit context manager and close connection."""
        self.close()


def ensure_db(db_path: Path) -> sqlite3.Connection:
    """Ensure database file exists and return connection.

    The connection runs in autocommit mode; multi-statement writes are wrapped
    in explicit ``BEGIN``/``COMMIT`` by :meth:`DocumentStore.transaction`.

    Args:
        db_path: Absolute path or project-relative path to database file.

    Returns:
        SQLite connection.

    Raises:
        OSError: If directory creation fails.
        sqlite3.Error: If database connection fails.
    """
    db_path.parent.mkdir(parents=True, exist_ok=True)
    conn = sqlite3.connect(str(db_path), isolation_level=None)
    return conn


def init_schema(conn: sqlite3.Connection) -> None:
    """Create one document table per collection if missing.

    Args:
        conn: SQLite connection.
    """
    for name in COLLECTIONS:
        conn.execute(
            f"CREATE TABLE IF NOT EXISTS {name} ("
            "  id TEXT PRIMARY KEY,"
            "  data TEXT NOT NULL"
            ")"
        )
    conn.execute(WEBHOOK_URL_INDEX_DDL)


def _check_collection(name: str) -> str:
    if name not in COLLECTIONS:
        raise ValueError(f"Unknown collection: {name!r}")
    return name


class DocumentStore:
    """JSON document store with one SQLite table per collection.

    Documents are plain mappings carrying a string ``id``; the whole document
    is serialized into the ``data`` column.
    """

    def __init__(self, db_manager: DatabaseManager):
        """Initialize document store.

        Args:
            db_manager: Shared database manager instance.
        """
        log.debug("Initializing DocumentStore")
        self.conn = db_manager.get_connection()
        self._depth = 0

    @contextmanager
    def transaction(self) -> Iterator[None]:
        """Run the enclosed writes atomically.

        Nested use joins the outermost transaction.
        """
        if self._depth:
            self._depth += 1
            try:
                yield
            finally:
                self._depth -= 1
            return

        self.conn.execute("BEGIN")
        self._depth = 1
        try:
            yield
        except BaseException:
            self.conn.execute("ROLLBACK")
            raise
        else:
            self.conn.execute("COMMIT")
        finally:
            self._depth = 0

    def find(
        self,
        collection: str,
        *,
        ids: Sequence[str] | None = None,
        skip: int = 0,
        limit: int | None = None,
    ) -> list[dict[str, Any]]:
        """Return documents of a collection ordered by id.

        Args:
            collection: Collection name.
            ids: Optional id filter.
            skip: Number of documents to skip.
            limit: Maximum number of documents to return.

        Returns:
            Decoded documents.
        """
        table = _check_collection(collection)
        sql = f"SELECT data FROM {table}"
        params: list[Any] = []
        if ids is not None:
            if not ids:
                return []
            sql += f" WHERE id IN ({', '.join('?' for _ in ids)})"
            params.extend(ids)
        sql += " ORDER BY id"
        if limit is not None or skip:
            sql += " LIMIT ? OFFSET ?"
            params.extend([-1 if limit is None else limit, skip])
        rows = self.conn.execute(sql, params).fetchall()
        return [json.loads(row[0]) for row in rows]

    def count(self, collection: str) -> int:
        """Return the number of documents in a collection."""
        table = _check_collection(collection)
        return self.conn.execute(f"SELECT COUNT(*) FROM {table}").fetchone()[0]

    def count_entities(self) -> int:
        """Return the number of domain documents across entity collections."""
        return sum(self.count(name) for name in ENTITY_COLLECTIONS)

    def insert_many(self, collection: str, docs: Sequence[Mapping[str, Any]]) -> None:
        """Insert documents; each must carry a string ``id``.

        Raises:
            ValueError: If a document has no ``id``.
            sqlite3.IntegrityError: If an id already exists.
        """
        table = _check_collection(collection)
        rows = []
        for doc in docs:
            doc_id = doc.get("id")
            if not isinstance(doc_id, str) or not doc_id:
                raise ValueError(f"Document in {collection} has no string id")
            rows.append((doc_id, json.dumps(dict(doc), ensure_ascii=False)))
        if not rows:
            return
        with self.transaction():
            self.conn.executemany(f"INSERT INTO {table} (id, data) VALUES (?, ?)", rows)
        log.debug("Inserted %d documents into %s", len(rows), collection)

    def replace_one(self, collection: str, doc: Mapping[str, Any]) -> None:
        """Replace the document sharing ``doc['id']`` wholesale."""
        table = _check_collection(collection)
        self.conn.execute(
            f"UPDATE {table} SET data = ? WHERE id = ?",
            (json.dumps(dict(doc), ensure_ascii=False), doc["id"]),
        )

    def delete_many(self, collection: str, ids: Sequence[str] | None = None) -> int:
        """Delete documents by id, or every document when ``ids`` is None.

        Returns:
            Number of deleted documents.
        """
        table = _check_collection(collection)
        if ids is None:
            cursor = self.conn.execute(f"DELETE FROM {table}")
        else:
            if not ids:
                return 0
            cursor = self.conn.execute(
                f"DELETE FROM {table} WHERE id IN ({', '.join('?' for _ in ids)})",
                list(ids),
            )
        return cursor.rowcount

    def clear(self) -> None:
        """Drop every collection and recreate empty tables."""
        with self.transaction():
            for name in COLLECTIONS:
                self.conn.execute(f"DROP TABLE IF EXISTS {name}")
            init_schema(self.conn)
        log.debug("Cleared document store")
