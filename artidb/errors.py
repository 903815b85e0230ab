"""
Error types for ArtiDB.

This module defines all exception types raised by the transfer subsystem:
- ArtiDbError: Base exception
- SnapshotSyntaxError: Input is not parseable JSON
- SnapshotSchemaError: Parsed input lacks the required collections
- UserCancelledError: Confirmation declined or file picker dismissed
- TransferIOError: Download, clipboard or upload transport failure
- StoreError: Live store backend failure

Invariants:
    - All errors inherit from ArtiDbError
    - Errors include context for debugging
    - Error messages never include record contents
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional


class ArtiDbError(Exception):
    """Base exception for all ArtiDB errors.

    Attributes:
        message: Error message
        code: Error code for programmatic handling
        details: Additional error context
    """

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.code = code or "ARTIDB_ERROR"
        self.details = details or {}


class SnapshotSyntaxError(ArtiDbError):
    """Snapshot text is not structurally parseable.

    Raised when:
    - Input is not valid JSON
    - Input is empty

    The message carries the underlying parser's message.
    """

    def __init__(
        self,
        message: str,
        line: Optional[int] = None,
        column: Optional[int] = None,
    ) -> None:
        super().__init__(
            message,
            code="SYNTAX_ERROR",
            details={"line": line, "column": column},
        )
        self.line = line
        self.column = column


class SnapshotSchemaError(ArtiDbError):
    """Snapshot parsed but is not well-formed.

    Raised when:
    - characterDatabase or artifactDatabase is missing
    - Either collection is not an object
    - The document itself is not an object
    """

    def __init__(
        self,
        message: str,
        errors: Optional[List[str]] = None,
    ) -> None:
        super().__init__(
            message,
            code="SCHEMA_ERROR",
            details={"errors": errors or []},
        )
        self.errors = errors or []


class UserCancelledError(ArtiDbError):
    """The user declined a confirmation or dismissed the file picker.

    This is a normal control-flow outcome, not a failure.
    """

    def __init__(self, message: str, operation: Optional[str] = None) -> None:
        super().__init__(
            message,
            code="USER_CANCELLED",
            details={"operation": operation},
        )
        self.operation = operation


class TransferIOError(ArtiDbError):
    """A transport failed to move the snapshot text.

    Raised when:
    - The download target cannot be written
    - The clipboard helper is missing or fails
    - An uploaded file cannot be read or decoded
    """

    def __init__(
        self,
        message: str,
        transport: str,
        target: Optional[str] = None,
    ) -> None:
        super().__init__(
            message,
            code="IO_ERROR",
            details={"transport": transport, "target": target},
        )
        self.transport = transport
        self.target = target


class StoreError(ArtiDbError):
    """Live store backend failed.

    Raised when:
    - A bulk load or clear could not be committed

    Backends roll back before raising, so the store is unchanged.
    """

    def __init__(self, message: str, operation: Optional[str] = None) -> None:
        super().__init__(
            message,
            code="STORE_ERROR",
            details={"operation": operation},
        )
        self.operation = operation
