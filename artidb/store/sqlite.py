"""
SQLite live store for ArtiDB.

This module persists the character and artifact databases in a single
SQLite file. Records are stored as JSON text and are never interpreted.

Invariants:
    - One SQLite file per data directory
    - clear_all and bulk_load run inside a single transaction
    - A failed bulk_load rolls back and leaves the previous contents intact
    - Listing order is insertion order

How to change safely:
    - Schema migrations must be backward compatible
    - Use transactions for all write operations

Table schema:
    characters:
        - char_id TEXT PRIMARY KEY
        - record_json TEXT
    artifacts:
        - art_id TEXT PRIMARY KEY
        - record_json TEXT
"""

from __future__ import annotations

import json
import logging
import sqlite3
import time
from collections.abc import Iterable, Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Mapping

from ..errors import StoreError
from .base import Record, RecordMap

logger = logging.getLogger(__name__)


class SqliteLiveStore:
    """LiveStore backed by a SQLite database file.

    Thread safety:
        Each operation opens its own connection. Writes take an immediate
        transaction, so concurrent readers see either the committed old
        contents or the committed new contents.

    Example:
        >>> store = SqliteLiveStore("/tmp/artidb")
        >>> store.bulk_load({"c1": {"key": "Amber"}}, {"a1": {"level": 20}})
        >>> store.list_artifact_ids()
        ['a1']
    """

    SCHEMA_VERSION = 1

    def __init__(
        self,
        data_dir: str,
        db_filename: str = "artidb.db",
        wal_mode: bool = True,
        busy_timeout_ms: int = 5000,
    ) -> None:
        """Initialize the SQLite store.

        Args:
            data_dir: Directory for the database file
            db_filename: Database file name
            wal_mode: Enable SQLite WAL mode
            busy_timeout_ms: SQLite busy timeout
        """
        self.data_dir = Path(data_dir)
        self.db_path = self.data_dir / db_filename
        self.wal_mode = wal_mode
        self.busy_timeout_ms = busy_timeout_ms
        self._initialized = False

    @contextmanager
    def _get_connection(self, operation: str = "read") -> Iterator[sqlite3.Connection]:
        """Open a configured connection, creating the schema on first use.

        Raises:
            StoreError: If the database cannot be opened or queried
        """
        self.data_dir.mkdir(parents=True, exist_ok=True)

        try:
            conn = sqlite3.connect(
                str(self.db_path),
                timeout=self.busy_timeout_ms / 1000.0,
                isolation_level=None,  # Autocommit by default, explicit transactions
            )
        except sqlite3.Error as e:
            raise StoreError(f"Cannot open {self.db_path}: {e}", operation=operation) from e

        try:
            conn.execute(f"PRAGMA busy_timeout = {self.busy_timeout_ms}")
            if self.wal_mode:
                conn.execute("PRAGMA journal_mode = WAL")
            conn.execute("PRAGMA synchronous = NORMAL")

            if not self._initialized:
                self._create_schema(conn)
                self._initialized = True

            yield conn
        except sqlite3.Error as e:
            logger.error(f"Store {operation} failed on {self.db_path}: {e}")
            raise StoreError(f"Store {operation} failed: {e}", operation=operation) from e
        finally:
            conn.close()

    def _create_schema(self, conn: sqlite3.Connection) -> None:
        """Create database schema."""
        conn.executescript("""
            CREATE TABLE IF NOT EXISTS schema_version (
                version INTEGER PRIMARY KEY,
                applied_at INTEGER NOT NULL
            );

            CREATE TABLE IF NOT EXISTS characters (
                char_id TEXT PRIMARY KEY,
                record_json TEXT NOT NULL
            );

            CREATE TABLE IF NOT EXISTS artifacts (
                art_id TEXT PRIMARY KEY,
                record_json TEXT NOT NULL
            );

            INSERT OR IGNORE INTO schema_version (version, applied_at)
            VALUES (1, strftime('%s', 'now') * 1000);
        """)
        logger.info(f"Initialized store database: {self.db_path}")

    def _list_ids(self, table: str, id_column: str) -> list[str]:
        with self._get_connection() as conn:
            cursor = conn.execute(f"SELECT {id_column} FROM {table} ORDER BY rowid")
            return [row[0] for row in cursor.fetchall()]

    def _get_records(self, table: str, id_column: str) -> RecordMap:
        with self._get_connection() as conn:
            cursor = conn.execute(f"SELECT {id_column}, record_json FROM {table} ORDER BY rowid")
            return {row[0]: json.loads(row[1]) for row in cursor.fetchall()}

    def list_character_ids(self) -> list[str]:
        return self._list_ids("characters", "char_id")

    def list_artifact_ids(self) -> list[str]:
        return self._list_ids("artifacts", "art_id")

    def get_all_character_records(self) -> RecordMap:
        return self._get_records("characters", "char_id")

    def get_all_artifact_records(self) -> RecordMap:
        return self._get_records("artifacts", "art_id")

    def clear_all(self) -> None:
        """Delete every character and artifact in one transaction.

        Raises:
            StoreError: If the transaction could not be committed
        """
        self._write("clear_all", {}, {})

    def bulk_load(
        self,
        character_records: Mapping[str, Record],
        artifact_records: Mapping[str, Record],
    ) -> None:
        """Replace all rows in one transaction.

        Raises:
            StoreError: If a record cannot be encoded or the transaction
                could not be committed. The previous contents are kept.
        """
        self._write("bulk_load", character_records, artifact_records)

    def _write(
        self,
        operation: str,
        character_records: Mapping[str, Record],
        artifact_records: Mapping[str, Record],
    ) -> None:
        start_time = time.time()

        with self._get_connection(operation) as conn:
            # Lock or corruption errors here become StoreError in _get_connection
            conn.execute("BEGIN IMMEDIATE")
            try:
                conn.execute("DELETE FROM characters")
                conn.execute("DELETE FROM artifacts")
                conn.executemany(
                    "INSERT INTO characters (char_id, record_json) VALUES (?, ?)",
                    _encode_rows(character_records),
                )
                conn.executemany(
                    "INSERT INTO artifacts (art_id, record_json) VALUES (?, ?)",
                    _encode_rows(artifact_records),
                )
                conn.execute("COMMIT")

            except (sqlite3.Error, TypeError, ValueError) as e:
                try:
                    conn.execute("ROLLBACK")
                except sqlite3.Error as rollback_error:
                    logger.error(f"Store {operation} rollback failed: {rollback_error}")
                logger.error(f"Store {operation} rolled back: {e}")
                raise StoreError(f"Store {operation} failed: {e}", operation=operation) from e

        logger.info(
            f"Store {operation} committed",
            extra={
                "num_char": len(character_records),
                "num_art": len(artifact_records),
                "duration_ms": int((time.time() - start_time) * 1000),
            },
        )


def _encode_rows(records: Mapping[str, Any]) -> Iterable[tuple[str, str]]:
    for record_id, record in records.items():
        if not isinstance(record_id, str):
            raise TypeError(f"Record id must be a string, got {type(record_id).__name__}")
        yield record_id, json.dumps(record, ensure_ascii=False)
