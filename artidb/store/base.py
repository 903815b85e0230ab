"""
Live store protocol for ArtiDB.

This module defines the LiveStore protocol: the narrow contract through
which the transfer subsystem reads and writes the character and artifact
databases. The per-entity engine behind it is not part of this package.

Invariants:
    - Ids are strings and unique within a collection
    - Records are opaque; the store returns them as given to bulk_load
    - bulk_load and clear_all are observed as a single atomic step

How to change safely:
    - Protocol changes require updating all implementations
    - Keep the transfer subsystem limited to these methods
"""

from __future__ import annotations

import logging
from typing import (
    TYPE_CHECKING,
    Any,
    Dict,
    List,
    Mapping,
    Protocol,
    runtime_checkable,
)

if TYPE_CHECKING:
    from ..config import StorageConfig

logger = logging.getLogger(__name__)

Record = Any
RecordMap = Dict[str, Record]


@runtime_checkable
class LiveStore(Protocol):
    """Protocol for the live character/artifact store.

    Implementations:
    - InMemoryLiveStore: process-local, for tests and dry runs
    - SqliteLiveStore: persisted to a single SQLite file

    Example:
        >>> store: LiveStore = InMemoryLiveStore()
        >>> store.bulk_load({"c1": {"key": "Amber"}}, {})
        >>> store.list_character_ids()
        ['c1']
    """

    def list_character_ids(self) -> List[str]:
        """Ids of all stored characters."""
        ...

    def list_artifact_ids(self) -> List[str]:
        """Ids of all stored artifacts."""
        ...

    def get_all_character_records(self) -> RecordMap:
        """Mapping of character id to record."""
        ...

    def get_all_artifact_records(self) -> RecordMap:
        """Mapping of artifact id to record."""
        ...

    def clear_all(self) -> None:
        """Remove every character and artifact."""
        ...

    def bulk_load(
        self,
        character_records: Mapping[str, Record],
        artifact_records: Mapping[str, Record],
    ) -> None:
        """Replace the whole store with the given records.

        The previous contents are discarded. Readers observe either the
        old contents or the new contents, never a mix.
        """
        ...


def create_live_store(config: StorageConfig) -> LiveStore:
    """Create a live store based on configuration.

    Args:
        config: Storage configuration

    Returns:
        LiveStore implementation for the configured backend

    Raises:
        ValueError: If backend is not supported
    """
    from ..config import StoreBackend

    if config.backend == StoreBackend.MEMORY:
        from .memory import InMemoryLiveStore

        return InMemoryLiveStore()

    if config.backend == StoreBackend.SQLITE:
        from .sqlite import SqliteLiveStore

        return SqliteLiveStore(
            data_dir=config.data_dir,
            db_filename=config.db_filename,
            wal_mode=config.wal_mode,
            busy_timeout_ms=config.busy_timeout_ms,
        )

    raise ValueError(f"Unsupported store backend: {config.backend}")
