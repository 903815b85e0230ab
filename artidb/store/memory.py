"""
In-memory live store implementation.

This module provides a process-local LiveStore for:
- Unit tests
- Integration tests
- Dry runs of an import without touching the persisted database

Invariants:
    - All data is lost on process exit
    - The store state is a single immutable pair of mappings; writers build
      a new pair and publish it with one assignment
    - Readers never observe a partially loaded store

How to change safely:
    - Keep interface compatible with the LiveStore protocol
    - Add testing helpers rather than new mutation paths
"""

from __future__ import annotations

import copy
import logging
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Dict, List, Mapping

from .base import Record, RecordMap

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class _StoreState:
    """One published version of the store contents."""

    characters: Mapping[str, Record] = field(default_factory=lambda: MappingProxyType({}))
    artifacts: Mapping[str, Record] = field(default_factory=lambda: MappingProxyType({}))


class InMemoryLiveStore:
    """In-memory implementation of LiveStore.

    Every write builds a complete new state and swaps it in with a single
    attribute assignment, so a reader holding the previous state (or reading
    concurrently from another coroutine) sees either the old or the new
    contents.

    Example:
        >>> store = InMemoryLiveStore()
        >>> store.put_character("c1", {"key": "Amber"})
        >>> store.list_character_ids()
        ['c1']
    """

    def __init__(
        self,
        characters: Mapping[str, Record] | None = None,
        artifacts: Mapping[str, Record] | None = None,
    ) -> None:
        """Initialize the store.

        Args:
            characters: Optional initial character records
            artifacts: Optional initial artifact records
        """
        self._state = self._build_state(characters or {}, artifacts or {})
        self._version = 0

    @staticmethod
    def _build_state(
        characters: Mapping[str, Record],
        artifacts: Mapping[str, Record],
    ) -> _StoreState:
        return _StoreState(
            characters=MappingProxyType(copy.deepcopy(dict(characters))),
            artifacts=MappingProxyType(copy.deepcopy(dict(artifacts))),
        )

    @property
    def version(self) -> int:
        """Number of writes published since creation."""
        return self._version

    def _publish(self, state: _StoreState) -> None:
        self._state = state
        self._version += 1

    # LiveStore protocol

    def list_character_ids(self) -> List[str]:
        return list(self._state.characters)

    def list_artifact_ids(self) -> List[str]:
        return list(self._state.artifacts)

    def get_all_character_records(self) -> RecordMap:
        return copy.deepcopy(dict(self._state.characters))

    def get_all_artifact_records(self) -> RecordMap:
        return copy.deepcopy(dict(self._state.artifacts))

    def clear_all(self) -> None:
        self._publish(_StoreState())
        logger.debug("InMemoryLiveStore cleared")

    def bulk_load(
        self,
        character_records: Mapping[str, Record],
        artifact_records: Mapping[str, Record],
    ) -> None:
        state = self._build_state(character_records, artifact_records)
        self._publish(state)
        logger.debug(
            "InMemoryLiveStore loaded",
            extra={"num_char": len(state.characters), "num_art": len(state.artifacts)},
        )

    # Testing helpers

    def put_character(self, char_id: str, record: Record) -> None:
        """Add or overwrite one character."""
        characters: Dict[str, Record] = dict(self._state.characters)
        characters[char_id] = record
        self._publish(self._build_state(characters, self._state.artifacts))

    def put_artifact(self, art_id: str, record: Record) -> None:
        """Add or overwrite one artifact."""
        artifacts: Dict[str, Record] = dict(self._state.artifacts)
        artifacts[art_id] = record
        self._publish(self._build_state(self._state.characters, artifacts))
