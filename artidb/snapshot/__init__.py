"""
Snapshot module for ArtiDB.

This module handles conversion of the live store to and from portable
snapshots, and the destructive operations that apply them:
- SnapshotCodec: store -> Snapshot -> JSON text, and validated parsing back
- StoreMutator: clear the store, or replace it with a Snapshot

Invariants:
    - Only validated snapshots reach the mutator
    - Snapshots are ephemeral; persistence is the live store's job
"""

from .codec import (
    ARTIFACT_KEY,
    CHARACTER_KEY,
    ParseError,
    ParseResult,
    Snapshot,
    SnapshotCodec,
    dump_snapshot,
    parse_snapshot,
)
from .mutator import StoreMutator

__all__ = [
    "ARTIFACT_KEY",
    "CHARACTER_KEY",
    "ParseError",
    "ParseResult",
    "Snapshot",
    "SnapshotCodec",
    "StoreMutator",
    "dump_snapshot",
    "parse_snapshot",
]
