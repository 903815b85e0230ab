"""
Transport capability protocols for ArtiDB.

Each I/O boundary the snapshot text crosses is a small capability so the
core pipeline has no platform dependency and tests can substitute fakes.

Invariants:
    - Transports move text only; they never parse or validate it
    - Failures are raised as TransferIOError
"""

from __future__ import annotations

import os
from typing import Protocol, Union, runtime_checkable

SNAPSHOT_MIME_TYPE = "application/json; charset=utf-8"
SNAPSHOT_EXTENSION = ".json"
DEFAULT_EXPORT_FILENAME = "data.json"

FileHandle = Union[str, "os.PathLike[str]"]


@runtime_checkable
class Downloader(Protocol):
    """Makes text available to the user as a named file."""

    def download(self, text: str, filename: str) -> None:
        ...


@runtime_checkable
class ClipboardWriter(Protocol):
    """Writes text to the system clipboard."""

    def write(self, text: str) -> None:
        ...


@runtime_checkable
class FileReader(Protocol):
    """Reads the full text content of a user-selected file."""

    async def read_text(self, handle: FileHandle) -> str:
        ...
