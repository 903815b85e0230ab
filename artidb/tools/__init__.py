"""
CLI tools for ArtiDB administration.

This module provides command-line tools for:
- transfer: Export, import and clear the local database

Invariants:
    - Destructive commands always go through the confirmation gate
    - All operations are logged
"""

from .transfer_cli import TransferCLI

__all__ = ["TransferCLI"]
