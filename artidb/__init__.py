"""
ArtiDB - Local character/artifact database transfer.

This package moves the contents of a local character/artifact store in
and out of the process:
- Export the live store as a portable JSON snapshot
- Validate an untrusted snapshot before it touches the store
- Atomically replace or clear the store behind an explicit confirmation

Architecture:
    ┌──────────────┐     ┌──────────────┐     ┌──────────────┐
    │  Transfer    │────▶│  Snapshot    │────▶│ Confirmation │
    │  Adapter     │     │  Codec       │     │ Gate         │
    │ (file/clip/  │◀────│ (parse/      │     └──────┬───────┘
    │  upload/     │     │  serialize)  │            │
    │  paste)      │     └──────▲───────┘            ▼
    └──────────────┘            │             ┌──────────────┐
                                │             │ Store        │
                         ┌──────┴────────────▶│ Mutator      │
                         │    Live Store      │ (clear/      │
                         │ (memory / SQLite)  │  replace)    │
                         └────────────────────┴──────────────┘

Invariants:
    - A snapshot is trusted only after schema validation
    - clear/replace never run without a confirmation returning True
    - Readers never observe a partially replaced store
    - Every failure path leaves the live store unchanged

How to change safely:
    - The wire format (characterDatabase/artifactDatabase) is a stable
      contract for previously exported files; add keys, never rename
    - New transports must implement the capability protocols in
      artidb.transfer.base
    - New store backends must implement the LiveStore protocol
"""

from ._version import __version__

__all__ = ["__version__"]
