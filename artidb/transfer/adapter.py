"""
Transfer adapter for ArtiDB.

Normalizes the four snapshot transports into one text-in/text-out
contract:
- emit_download: text -> named file
- emit_clipboard: text -> system clipboard
- read_upload: user-selected file -> text (async)
- read_paste: pasted text -> text

Invariants:
    - No transport validates the text; validation is the codec's job
    - A missing upload handle means the picker was dismissed and resolves
      to None without touching the reader
"""

from __future__ import annotations

import logging
from typing import Optional

from .base import (
    DEFAULT_EXPORT_FILENAME,
    ClipboardWriter,
    Downloader,
    FileHandle,
    FileReader,
)

logger = logging.getLogger(__name__)


class TransferAdapter:
    """Moves snapshot text across I/O boundaries.

    Attributes:
        downloader: Downloader capability
        clipboard: ClipboardWriter capability
        reader: FileReader capability
        default_filename: File name used when emit_download gets none

    Example:
        >>> adapter = TransferAdapter(FileDownloader(), SystemClipboardWriter(), LocalFileReader())
        >>> adapter.emit_download(text)  # writes ./data.json
        >>> text = await adapter.read_upload("backup.json")
    """

    def __init__(
        self,
        downloader: Downloader,
        clipboard: ClipboardWriter,
        reader: FileReader,
        default_filename: str = DEFAULT_EXPORT_FILENAME,
    ) -> None:
        self.downloader = downloader
        self.clipboard = clipboard
        self.reader = reader
        self.default_filename = default_filename

    def emit_download(self, text: str, filename: Optional[str] = None) -> str:
        """Offer text as a downloadable file.

        Returns:
            The file name used
        """
        filename = filename or self.default_filename
        self.downloader.download(text, filename)
        return filename

    def emit_clipboard(self, text: str) -> None:
        self.clipboard.write(text)

    async def read_upload(self, handle: Optional[FileHandle]) -> Optional[str]:
        """Read an uploaded file.

        Args:
            handle: Selected file, or None if the picker was dismissed

        Returns:
            File text, or None when no file was selected
        """
        if handle is None:
            logger.debug("Upload cancelled, no file selected")
            return None
        return await self.reader.read_text(handle)

    def read_paste(self, text: str) -> str:
        return text
