"""
Transfer module for ArtiDB.

This module moves serialized snapshots across I/O boundaries:
- Download to a file
- System clipboard
- Uploaded file
- Pasted text

How to change safely:
    - New transports implement a protocol from .base and plug into
      TransferAdapter; the pipeline stays unchanged
"""

from .adapter import TransferAdapter
from .base import (
    DEFAULT_EXPORT_FILENAME,
    SNAPSHOT_EXTENSION,
    SNAPSHOT_MIME_TYPE,
    ClipboardWriter,
    Downloader,
    FileHandle,
    FileReader,
)
from .local import FileDownloader, LocalFileReader, SystemClipboardWriter

__all__ = [
    # Constants
    "DEFAULT_EXPORT_FILENAME",
    "SNAPSHOT_EXTENSION",
    "SNAPSHOT_MIME_TYPE",
    # Protocols
    "ClipboardWriter",
    "Downloader",
    "FileHandle",
    "FileReader",
    # Adapter
    "TransferAdapter",
    # Implementations
    "FileDownloader",
    "LocalFileReader",
    "SystemClipboardWriter",
]
