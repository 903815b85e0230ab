"""
Local platform transports.

Concrete Downloader, ClipboardWriter and FileReader implementations for
running on a workstation:
- FileDownloader writes the export into a downloads directory
- SystemClipboardWriter pipes text to the OS clipboard helper
- LocalFileReader reads an uploaded file without blocking the event loop

Invariants:
    - A download is written to a temporary file and renamed into place,
      so a partial export is never visible under the final name
    - Every failure surfaces as TransferIOError
"""

from __future__ import annotations

import asyncio
import logging
import os
import subprocess
import sys
from contextlib import suppress
from pathlib import Path
from typing import Callable, Optional, Sequence

from ..errors import TransferIOError
from .base import FileHandle

logger = logging.getLogger(__name__)


class FileDownloader:
    """Downloader that saves files into a directory.

    Example:
        >>> downloader = FileDownloader("~/Downloads")
        >>> downloader.download('{"characterDatabase": {}, ...}', "data.json")
    """

    def __init__(self, download_dir: str = ".") -> None:
        self.download_dir = Path(download_dir).expanduser()

    def target_path(self, filename: str) -> Path:
        """Resolve the destination for ``filename``.

        Raises:
            TransferIOError: If filename is not a bare file name
        """
        if not filename or filename in (".", "..") or Path(filename).name != filename:
            raise TransferIOError(
                f"Invalid download filename: {filename!r}",
                transport="download",
                target=filename,
            )
        return self.download_dir / filename

    def download(self, text: str, filename: str) -> None:
        target = self.target_path(filename)
        partial = target.with_name(target.name + ".part")

        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            with open(partial, "w", encoding="utf-8") as f:
                f.write(text)
            partial.replace(target)
        except OSError as e:
            with suppress(OSError):
                partial.unlink(missing_ok=True)
            raise TransferIOError(
                f"Failed to write {target}: {e}",
                transport="download",
                target=str(target),
            ) from e

        logger.info("Wrote download", extra={"path": str(target), "size_chars": len(text)})


def default_clipboard_commands() -> list[list[str]]:
    """Clipboard helper commands to try for the current platform, in order."""
    if sys.platform.startswith("win"):
        # PowerShell handles Unicode reliably; clip.exe would need UTF-16.
        return [
            [
                "powershell",
                "-NoProfile",
                "-Command",
                "Set-Clipboard -Value ([Console]::In.ReadToEnd())",
            ]
        ]
    if sys.platform == "darwin":
        return [["pbcopy"]]
    return [["xclip", "-selection", "clipboard"], ["wl-copy"]]


class SystemClipboardWriter:
    """ClipboardWriter that pipes text into an OS clipboard helper.

    Attributes:
        commands: Candidate helper commands, tried in order until one exists
    """

    def __init__(
        self,
        command: Optional[Sequence[str]] = None,
        runner: Callable[..., subprocess.CompletedProcess] = subprocess.run,
    ) -> None:
        """Initialize the clipboard writer.

        Args:
            command: Explicit helper argv; platform defaults when None
            runner: subprocess.run compatible callable
        """
        self.commands = [list(command)] if command else default_clipboard_commands()
        self._runner = runner

    def write(self, text: str) -> None:
        """Copy text to the clipboard.

        Raises:
            TransferIOError: If no helper is available or the helper fails
        """
        failures: list[str] = []

        for cmd in self.commands:
            try:
                cp = self._runner(
                    cmd,
                    input=text,
                    text=True,
                    encoding="utf-8",
                    capture_output=True,
                    check=False,
                )
            except FileNotFoundError:
                failures.append(f"{cmd[0]}: not found")
                continue
            except OSError as e:
                failures.append(f"{cmd[0]}: {e}")
                continue

            if cp.returncode == 0:
                logger.info("Copied to clipboard", extra={"helper": cmd[0]})
                return

            stderr = (cp.stderr or "").strip()
            failures.append(f"{cmd[0]}: exit {cp.returncode} {stderr}".strip())

        raise TransferIOError(
            "Clipboard copy failed (" + "; ".join(failures) + ")",
            transport="clipboard",
        )


class LocalFileReader:
    """FileReader for paths on the local filesystem.

    The blocking read runs in the event loop's default executor so other
    coroutines keep running while it is pending.
    """

    def __init__(self, max_bytes: int = 64 * 1024 * 1024) -> None:
        self.max_bytes = max_bytes

    async def read_text(self, handle: FileHandle) -> str:
        """Read the whole file as UTF-8 text.

        Raises:
            TransferIOError: If the file is missing, too large or not UTF-8
        """
        path = Path(os.fspath(handle)).expanduser()
        return await asyncio.get_event_loop().run_in_executor(None, self._read, path)

    def _read(self, path: Path) -> str:
        try:
            size = path.stat().st_size
            if size > self.max_bytes:
                raise TransferIOError(
                    f"File too large: {size} bytes (limit {self.max_bytes})",
                    transport="upload",
                    target=str(path),
                )
            # utf-8-sig drops a leading byte order mark
            with open(path, encoding="utf-8-sig") as f:
                text = f.read()
        except (OSError, UnicodeDecodeError) as e:
            raise TransferIOError(
                f"Failed to read {path}: {e}",
                transport="upload",
                target=str(path),
            ) from e

        logger.info("Read upload", extra={"path": str(path), "size_bytes": size})
        return text
