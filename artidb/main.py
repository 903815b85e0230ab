"""
ArtiDB - composition root.

This module wires the transfer subsystem together from configuration:
- Live store (SQLite or in-memory)
- Transfer adapter with local platform transports
- Confirmation gate
- DatabaseTransferService

It also owns process-wide logging setup.

Usage:
    python -m artidb.main stats

Configuration is entirely via environment variables.
See config.py for all available settings.
"""

from __future__ import annotations

import logging
from typing import Optional

import json_log_formatter

from .config import AppConfig
from .gate import ConfirmationGate, Confirmer, console_confirm
from .service import DatabaseTransferService
from .store import LiveStore, create_live_store
from .transfer import (
    FileDownloader,
    LocalFileReader,
    SystemClipboardWriter,
    TransferAdapter,
)

logger = logging.getLogger(__name__)


def setup_logging(config: AppConfig, verbose: bool = False) -> None:
    """Configure logging based on configuration.

    Args:
        config: Application configuration
        verbose: Force DEBUG level
    """
    level = getattr(logging, config.observability.log_level.upper(), logging.INFO)
    if verbose:
        level = logging.DEBUG

    if config.observability.log_format == "json":
        formatter: logging.Formatter = json_log_formatter.JSONFormatter()
    else:
        formatter = logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")

    handler = logging.StreamHandler()
    handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.handlers = [handler]


def create_adapter(config: AppConfig) -> TransferAdapter:
    """Build the transfer adapter with local transports."""
    return TransferAdapter(
        downloader=FileDownloader(config.transfer.download_dir),
        clipboard=SystemClipboardWriter(config.transfer.clipboard_command),
        reader=LocalFileReader(config.transfer.max_upload_bytes),
        default_filename=config.transfer.export_filename,
    )


def create_service(
    config: AppConfig,
    confirm: Confirmer = console_confirm,
    store: Optional[LiveStore] = None,
) -> DatabaseTransferService:
    """Build a DatabaseTransferService from configuration.

    Args:
        config: Application configuration
        confirm: Confirmation prompt used by the gate
        store: Live store to manage; created from config when None

    Returns:
        Ready-to-use service
    """
    if store is None:
        store = create_live_store(config.storage)

    service = DatabaseTransferService(
        store=store,
        adapter=create_adapter(config),
        gate=ConfirmationGate(confirm),
    )
    logger.debug(
        "Transfer service created",
        extra={"store": type(store).__name__},
    )
    return service


def main() -> None:
    """Entry point; delegates to the transfer CLI."""
    from .tools.transfer_cli import main as cli_main

    cli_main()


if __name__ == "__main__":
    main()
