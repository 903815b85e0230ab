"""
Unit tests for StoreMutator.

Tests cover:
- Full overwrite semantics
- Clear idempotence
- Single atomic store call per operation
- Precondition checks
"""

import pytest

from artidb.snapshot.codec import Snapshot
from artidb.snapshot.mutator import StoreMutator
from artidb.store.memory import InMemoryLiveStore


class SpyStore(InMemoryLiveStore):
    """In-memory store that records mutation calls."""

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.calls = []

    def clear_all(self):
        self.calls.append("clear_all")
        super().clear_all()

    def bulk_load(self, character_records, artifact_records):
        self.calls.append("bulk_load")
        super().bulk_load(character_records, artifact_records)


class TestStoreMutator:
    """Tests for StoreMutator."""

    @pytest.fixture
    def store(self):
        return SpyStore(characters={"c1": {"key": "Amber"}})

    def test_replace_is_full_overwrite(self, store):
        """Records missing from the snapshot are lost."""
        StoreMutator(store).replace(Snapshot({}, {"a1": {"level": 20}}))

        assert store.list_character_ids() == []
        assert store.list_artifact_ids() == ["a1"]

    def test_replace_preserves_ids(self, store):
        snapshot = Snapshot(
            {"char_7": {"key": "Bennett"}, "char_3": {"key": "Xingqiu"}},
            {"artifact_99": {}},
        )

        StoreMutator(store).replace(snapshot)

        assert store.list_character_ids() == ["char_7", "char_3"]
        assert store.get_all_character_records()["char_3"] == {"key": "Xingqiu"}
        assert store.list_artifact_ids() == ["artifact_99"]

    def test_replace_single_store_call(self, store):
        """Replace reaches the store as one bulk_load, no separate clear."""
        StoreMutator(store).replace(Snapshot({"c2": {}}, {}))

        assert store.calls == ["bulk_load"]

    def test_replace_publishes_once(self):
        store = InMemoryLiveStore(characters={"c1": {}})
        before = store.version

        StoreMutator(store).replace(Snapshot({"c2": {}}, {"a1": {}}))

        assert store.version == before + 1

    def test_replace_does_not_alias_snapshot(self, store):
        record = {"key": "Diluc", "level": 80}
        snapshot = Snapshot({"c9": record}, {})

        StoreMutator(store).replace(snapshot)
        record["level"] = 1

        assert store.get_all_character_records()["c9"]["level"] == 80

    def test_replace_requires_snapshot(self, store):
        """Raw dicts are rejected; only validated snapshots are applied."""
        with pytest.raises(TypeError):
            StoreMutator(store).replace({"characterDatabase": {}, "artifactDatabase": {}})

        assert store.calls == []
        assert store.list_character_ids() == ["c1"]

    def test_clear(self, store):
        store.put_artifact("a1", {})

        StoreMutator(store).clear()

        assert store.list_character_ids() == []
        assert store.list_artifact_ids() == []

    def test_clear_idempotent(self, store):
        """Clearing twice leaves the same empty state as clearing once."""
        mutator = StoreMutator(store)

        mutator.clear()
        once = (store.get_all_character_records(), store.get_all_artifact_records())
        mutator.clear()
        twice = (store.get_all_character_records(), store.get_all_artifact_records())

        assert once == twice == ({}, {})
