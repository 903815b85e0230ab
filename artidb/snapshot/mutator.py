"""
Store mutator for ArtiDB.

Applies destructive changes to the live store: full replacement from a
validated Snapshot, or clearing both collections.

Invariants:
    - Callers confirm before calling; the mutator never prompts
    - replace is a full overwrite, never a merge; ids are preserved
    - Each operation reaches the store as exactly one clear_all or
      bulk_load call, which backends apply atomically
    - The store never aliases the caller's record objects
"""

from __future__ import annotations

import copy
import logging

from ..store.base import LiveStore
from .codec import Snapshot

logger = logging.getLogger(__name__)


class StoreMutator:
    """Destructive operations on the live store.

    Attributes:
        store: LiveStore to mutate
    """

    def __init__(self, store: LiveStore) -> None:
        self.store = store

    def clear(self) -> None:
        """Empty both collections. Idempotent."""
        self.store.clear_all()
        logger.info("Store cleared")

    def replace(self, snapshot: Snapshot) -> None:
        """Overwrite the store with the snapshot's contents.

        Args:
            snapshot: Validated snapshot (see parse_snapshot)

        Raises:
            TypeError: If snapshot is not a Snapshot
            StoreError: If the backend could not commit the load
        """
        if not isinstance(snapshot, Snapshot):
            raise TypeError(
                f"replace() requires a validated Snapshot, got {type(snapshot).__name__}"
            )

        self.store.bulk_load(
            copy.deepcopy(snapshot.character_database),
            copy.deepcopy(snapshot.artifact_database),
        )
        logger.info(
            "Store replaced",
            extra={"num_char": snapshot.num_char, "num_art": snapshot.num_art},
        )
