"""
Live store backends for ArtiDB.

This module provides the LiveStore contract and two implementations:
- SQLite (persisted, default)
- In-memory (for testing and dry runs)

Invariants:
    - The transfer subsystem only uses the LiveStore protocol methods
    - bulk_load/clear_all are atomic for every backend

How to change safely:
    - New backends must implement the LiveStore protocol
    - Register them in create_live_store
"""

from .base import LiveStore, Record, RecordMap, create_live_store
from .memory import InMemoryLiveStore
from .sqlite import SqliteLiveStore

__all__ = [
    # Protocol and types
    "LiveStore",
    "Record",
    "RecordMap",
    # Factory
    "create_live_store",
    # Implementations
    "InMemoryLiveStore",
    "SqliteLiveStore",
]
