"""
Transfer CLI tool for ArtiDB.

Command-line access to the database transfer operations:
- stats: Show stored character/artifact counts
- export: Write the database to a file and/or the clipboard
- import: Replace the database from a file or pasted stdin text
- clear: Delete the whole database

Usage:
    artidb stats
    artidb export [-o data.json] [--clipboard]
    artidb import backup.json
    artidb import --paste < backup.json
    artidb --yes clear

Invariants:
    - import and clear always ask for confirmation unless --yes is given
    - Exit code 0 on success, 1 on failure or empty store, 2 if cancelled
"""

from __future__ import annotations

import argparse
import asyncio
import dataclasses
import logging
import sys
from typing import Optional, Sequence

from ..config import AppConfig, StoreBackend
from ..errors import ArtiDbError, TransferIOError
from ..gate import console_confirm, static_confirm
from ..main import create_service, setup_logging
from ..service import DatabaseTransferService, TransferResult, TransferStatus

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_FAILED = 1
EXIT_CANCELLED = 2


class TransferCLI:
    """CLI commands over a DatabaseTransferService.

    Example:
        >>> cli = TransferCLI(service)
        >>> cli.stats()
        0
    """

    def __init__(self, service: DatabaseTransferService, out=None) -> None:
        self.service = service
        self.out = out or sys.stdout

    def _print(self, message: str) -> None:
        print(message, file=self.out)

    def _report(self, result: TransferResult, action: str) -> int:
        if result.success:
            self._print(f"{action} completed successfully")
            self._print(f"  Characters: {result.num_char}")
            self._print(f"  Artifacts: {result.num_art}")
            if result.filename:
                self._print(f"  File: {result.filename}")
            return EXIT_OK

        if result.status == TransferStatus.CANCELLED:
            self._print(f"{action} cancelled")
            return EXIT_CANCELLED

        if result.status == TransferStatus.EMPTY:
            self._print("Database is empty, nothing to do")
            return EXIT_FAILED

        self._print(f"{action} failed: {result.error}")
        return EXIT_FAILED

    def stats(self) -> int:
        summary = self.service.summary()
        self._print(f"{summary.num_char} Characters Stored")
        self._print(f"{summary.num_art} Artifacts Stored")
        return EXIT_OK

    def export(self, output: Optional[str], clipboard: bool) -> int:
        if clipboard:
            code = self._report(self.service.export_to_clipboard(), "Clipboard export")
            if code != EXIT_OK or output is None:
                return code
        return self._report(self.service.export_as_download(output), "Export")

    def import_file(self, path: str) -> int:
        result = asyncio.run(self.service.import_from_file(path))
        return self._report(result, "Import")

    def import_paste(self, text: str) -> int:
        return self._report(self.service.import_from_pasted_text(text), "Import")

    def clear(self) -> int:
        return self._report(self.service.clear_store(), "Clear")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="artidb",
        description="Export, import and clear the local character/artifact database",
    )
    parser.add_argument("--yes", action="store_true", help="Skip confirmation prompts")
    parser.add_argument("--data-dir", help="Directory holding the database")
    parser.add_argument(
        "--backend",
        choices=[b.value for b in StoreBackend],
        help="Store backend (default from ARTIDB_STORE_BACKEND)",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Verbose output")

    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("stats", help="Show stored counts")

    export = sub.add_parser("export", help="Export the database")
    export.add_argument("-o", "--output", help="Download file name (default data.json)")
    export.add_argument("--clipboard", action="store_true", help="Copy to the clipboard")

    imp = sub.add_parser("import", help="Replace the database from a snapshot")
    imp.add_argument("file", nargs="?", help="Snapshot file to upload")
    imp.add_argument("--paste", action="store_true", help="Read snapshot text from stdin")

    sub.add_parser("clear", help="Delete the database")

    return parser


def _apply_overrides(config: AppConfig, args: argparse.Namespace) -> AppConfig:
    storage = config.storage
    if args.data_dir:
        storage = dataclasses.replace(storage, data_dir=args.data_dir)
    if args.backend:
        storage = dataclasses.replace(storage, backend=StoreBackend(args.backend))
    return dataclasses.replace(config, storage=storage)


def run(argv: Optional[Sequence[str]] = None, config: Optional[AppConfig] = None, stdin=None) -> int:
    """Run the CLI and return the exit code."""
    parser = build_parser()
    args = parser.parse_args(argv)
    if args.command == "import" and bool(args.file) == bool(args.paste):
        parser.error("import needs exactly one of FILE or --paste")

    config = _apply_overrides(config or AppConfig.from_env(), args)
    config.validate()
    setup_logging(config, verbose=args.verbose)
    config.log_config()

    service = create_service(
        config,
        confirm=static_confirm(True) if args.yes else console_confirm,
    )
    cli = TransferCLI(service)

    try:
        if args.command == "stats":
            return cli.stats()
        if args.command == "export":
            return cli.export(args.output, args.clipboard)
        if args.command == "import":
            if args.paste:
                return cli.import_paste((stdin or sys.stdin).read())
            return cli.import_file(args.file)
        if args.command == "clear":
            return cli.clear()
    except TransferIOError as e:
        print(f"Transfer failed: {e.message}", file=sys.stderr)
        return EXIT_FAILED
    except ArtiDbError as e:
        logger.error(f"{args.command} failed: {e}", exc_info=True)
        print(f"{args.command} failed: {e.message}", file=sys.stderr)
        return EXIT_FAILED

    return EXIT_FAILED


def main() -> None:
    """CLI entry point."""
    sys.exit(run())


if __name__ == "__main__":
    main()
