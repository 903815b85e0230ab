"""
Unit tests for the SQLite live store.

Tests cover:
- Bulk load and listing
- Persistence across instances
- Transactional rollback on failure
- Store factory
"""

import os
import sqlite3
from contextlib import contextmanager

import pytest

from artidb.config import StorageConfig, StoreBackend
from artidb.errors import StoreError
from artidb.store import InMemoryLiveStore, LiveStore, SqliteLiveStore, create_live_store


class TestSqliteLiveStore:
    """Tests for SqliteLiveStore."""

    @pytest.fixture
    def store(self, data_dir):
        return SqliteLiveStore(data_dir, wal_mode=False)

    def test_implements_protocol(self, store):
        assert isinstance(store, LiveStore)

    def test_empty_store(self, store):
        assert store.list_character_ids() == []
        assert store.get_all_artifact_records() == {}

    def test_bulk_load(self, store):
        store.bulk_load(
            {"c1": {"key": "Sucrose", "constellation": 6}},
            {"a1": {"slotKey": "sands"}, "a2": {"slotKey": "goblet"}},
        )

        assert store.list_character_ids() == ["c1"]
        assert store.list_artifact_ids() == ["a1", "a2"]
        assert store.get_all_character_records() == {"c1": {"key": "Sucrose", "constellation": 6}}

    def test_bulk_load_overwrites(self, store):
        store.bulk_load({"c1": {}}, {"a1": {}})

        store.bulk_load({}, {"a9": {"level": 0}})

        assert store.list_character_ids() == []
        assert store.get_all_artifact_records() == {"a9": {"level": 0}}

    def test_insertion_order_preserved(self, store):
        store.bulk_load({"z": {}, "a": {}, "m": {}}, {})

        assert store.list_character_ids() == ["z", "a", "m"]

    def test_persists_across_instances(self, store, data_dir):
        store.bulk_load({"c1": {"name": "可莉"}}, {})

        reopened = SqliteLiveStore(data_dir, wal_mode=False)

        assert reopened.get_all_character_records() == {"c1": {"name": "可莉"}}

    def test_clear_all(self, store):
        store.bulk_load({"c1": {}}, {"a1": {}})

        store.clear_all()
        store.clear_all()

        assert store.list_character_ids() == []
        assert store.list_artifact_ids() == []

    def test_failed_bulk_load_rolls_back(self, store):
        """A record that cannot be encoded leaves the previous contents."""
        store.bulk_load({"c1": {"key": "Fischl"}}, {"a1": {}})

        with pytest.raises(StoreError) as exc_info:
            store.bulk_load({"c2": {}}, {"a2": {"bad": object()}})

        assert exc_info.value.operation == "bulk_load"
        assert store.list_character_ids() == ["c1"]
        assert store.list_artifact_ids() == ["a1"]

    def test_non_string_id_rejected(self, store):
        with pytest.raises(StoreError):
            store.bulk_load({1: {}}, {})

        assert store.list_character_ids() == []

    def test_not_a_database_file(self, data_dir):
        with open(os.path.join(data_dir, "artidb.db"), "wb") as f:
            f.write(b"this is not sqlite" * 100)
        store = SqliteLiveStore(data_dir, wal_mode=False)

        with pytest.raises(StoreError):
            store.list_character_ids()
        with pytest.raises(StoreError) as exc_info:
            store.bulk_load({"c1": {}}, {})

        assert exc_info.value.operation == "bulk_load"

    def test_locked_database(self, data_dir):
        store = SqliteLiveStore(data_dir, wal_mode=False, busy_timeout_ms=0)
        store.bulk_load({"c1": {}}, {})

        other = sqlite3.connect(str(store.db_path), isolation_level=None)
        try:
            other.execute("BEGIN IMMEDIATE")
            with pytest.raises(StoreError) as exc_info:
                store.clear_all()
            other.execute("ROLLBACK")
        finally:
            other.close()

        assert exc_info.value.operation == "clear_all"
        assert store.list_character_ids() == ["c1"]

    def test_rollback_failure_keeps_original_error(self, store, monkeypatch):
        """A failing ROLLBACK does not mask the error that triggered it."""
        open_connection = store._get_connection

        class RollbackFailsConnection:
            def __init__(self, conn):
                self._conn = conn

            def execute(self, sql, *args):
                if sql == "ROLLBACK":
                    raise sqlite3.OperationalError("cannot rollback")
                return self._conn.execute(sql, *args)

            def executemany(self, sql, rows):
                return self._conn.executemany(sql, rows)

        @contextmanager
        def flaky_connection(operation="read"):
            with open_connection(operation) as conn:
                yield RollbackFailsConnection(conn)

        monkeypatch.setattr(store, "_get_connection", flaky_connection)

        with pytest.raises(StoreError) as exc_info:
            store.bulk_load({"c1": {"bad": object()}}, {})

        assert isinstance(exc_info.value.__cause__, TypeError)


class TestCreateLiveStore:
    """Tests for the store factory."""

    def test_memory_backend(self):
        store = create_live_store(StorageConfig(backend=StoreBackend.MEMORY))

        assert isinstance(store, InMemoryLiveStore)

    def test_sqlite_backend(self, data_dir):
        config = StorageConfig(
            backend=StoreBackend.SQLITE,
            data_dir=data_dir,
            db_filename="test.db",
            wal_mode=False,
        )

        store = create_live_store(config)

        assert isinstance(store, SqliteLiveStore)
        assert store.db_path.name == "test.db"
