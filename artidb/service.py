"""
Database transfer service for ArtiDB.

This is the surface the UI (or CLI) calls. Each operation composes the
transfer adapter, snapshot codec, confirmation gate and store mutator:

    export:  store -> codec.serialize -> adapter.emit_*
    import:  adapter.read_* -> codec.parse -> gate -> mutator.replace
    clear:   gate -> mutator.clear

Import state machine (one user-initiated action):

    IDLE -> READING -> PARSED | PARSE_FAILED
    PARSED -> AWAITING_CONFIRMATION -> CONFIRMED | CANCELLED
    CONFIRMED -> REPLACED -> IDLE
    PARSE_FAILED, CANCELLED -> IDLE

Invariants:
    - The store is only mutated after the gate returned True
    - Syntax/schema errors are returned as INVALID results, never raised
    - Cancellation is a normal outcome, logged at INFO
    - Transport failures (TransferIOError) propagate to the caller
    - Every path returns the service to IDLE with the store unchanged
      unless the mutation itself completed
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional

from .errors import SnapshotSyntaxError, TransferIOError, UserCancelledError
from .gate import ConfirmationGate, DestroyKind
from .snapshot.codec import ParseError, ParseResult, Snapshot, SnapshotCodec
from .snapshot.mutator import StoreMutator
from .store.base import LiveStore
from .transfer.adapter import TransferAdapter
from .transfer.base import FileHandle

logger = logging.getLogger(__name__)

NOT_ACTIONABLE_MESSAGE = "Unable to parse character & artifact data from file."


class ImportState(Enum):
    """States of the import pipeline."""

    IDLE = "idle"
    READING = "reading"
    PARSED = "parsed"
    PARSE_FAILED = "parse_failed"
    AWAITING_CONFIRMATION = "awaiting_confirmation"
    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"
    REPLACED = "replaced"


class TransferStatus(Enum):
    """Outcome of a UI-facing operation."""

    EXPORTED = "exported"
    REPLACED = "replaced"
    CLEARED = "cleared"
    CANCELLED = "cancelled"
    INVALID = "invalid"
    EMPTY = "empty"


@dataclass(frozen=True)
class StoreSummary:
    """Record counts of the live store.

    Attributes:
        num_char: Number of stored characters
        num_art: Number of stored artifacts
    """

    num_char: int
    num_art: int

    @property
    def is_actionable(self) -> bool:
        """Whether export/clear make sense (store is not empty)."""
        return bool(self.num_char or self.num_art)


@dataclass(frozen=True)
class TransferResult:
    """Result of a transfer operation.

    Attributes:
        status: What happened
        num_char: Characters exported, imported or deleted
        num_art: Artifacts exported, imported or deleted
        filename: Download file name, for EXPORTED downloads
        error: Validation message, for INVALID results
        error_code: Error code of the validation failure
    """

    status: TransferStatus
    num_char: int = 0
    num_art: int = 0
    filename: Optional[str] = None
    error: Optional[str] = None
    error_code: Optional[str] = None

    @property
    def success(self) -> bool:
        return self.status in (
            TransferStatus.EXPORTED,
            TransferStatus.REPLACED,
            TransferStatus.CLEARED,
        )


def describe_parse_error(error: ParseError) -> str:
    """User-facing message for a rejected snapshot."""
    if isinstance(error, SnapshotSyntaxError):
        return f"Invalid JSON: {error.message}"
    return error.message


class DatabaseTransferService:
    """Export, import and clear the live store.

    Attributes:
        store: LiveStore being managed
        adapter: TransferAdapter for all transports
        gate: ConfirmationGate for destructive operations

    Example:
        >>> service = DatabaseTransferService(store, adapter, ConfirmationGate())
        >>> service.export_as_download()
        TransferResult(status=<TransferStatus.EXPORTED: 'exported'>, ...)
        >>> result = await service.import_from_file("backup.json")
    """

    def __init__(
        self,
        store: LiveStore,
        adapter: TransferAdapter,
        gate: ConfirmationGate,
    ) -> None:
        self.store = store
        self.adapter = adapter
        self.gate = gate
        self.codec = SnapshotCodec(store)
        self.mutator = StoreMutator(store)

        self._state = ImportState.IDLE
        self._history: List[ImportState] = [ImportState.IDLE]

    @property
    def state(self) -> ImportState:
        """Current import pipeline state."""
        return self._state

    @property
    def state_history(self) -> tuple[ImportState, ...]:
        """States visited by the most recent import."""
        return tuple(self._history)

    def _begin_import(self) -> None:
        if self._state is not ImportState.IDLE:
            raise RuntimeError(f"Import already in progress (state: {self._state.value})")
        self._history = [ImportState.IDLE]

    def _transition(self, state: ImportState) -> None:
        logger.debug(f"Import state {self._state.value} -> {state.value}")
        self._state = state
        self._history.append(state)

    def _require_confirmation(self, kind: DestroyKind) -> None:
        """Raise UserCancelledError unless the gate approves ``kind``."""
        if not self.gate.confirm_destroy(kind):
            raise UserCancelledError(f"{kind.value} declined by user", operation=kind.value)

    def summary(self) -> StoreSummary:
        return StoreSummary(
            num_char=len(self.store.list_character_ids()),
            num_art=len(self.store.list_artifact_ids()),
        )

    def preview(self, text: str) -> ParseResult:
        """Validate candidate snapshot text without applying it."""
        return self.codec.parse(text)

    # Export

    def _snapshot_for_export(self) -> Optional[Snapshot]:
        snapshot = self.codec.serialize()
        if snapshot.is_empty:
            logger.info("Nothing to export, store is empty")
            return None
        return snapshot

    def export_as_download(self, filename: Optional[str] = None) -> TransferResult:
        """Export the store as a downloadable JSON file.

        Raises:
            TransferIOError: If the file could not be written
        """
        snapshot = self._snapshot_for_export()
        if snapshot is None:
            return TransferResult(TransferStatus.EMPTY)

        try:
            used = self.adapter.emit_download(self.codec.serialize_to_text(snapshot), filename)
        except TransferIOError as e:
            logger.error(f"Download export failed: {e}")
            raise

        logger.info(
            "Exported store as download",
            extra={"export_filename": used, "num_char": snapshot.num_char, "num_art": snapshot.num_art},
        )
        return TransferResult(
            TransferStatus.EXPORTED,
            num_char=snapshot.num_char,
            num_art=snapshot.num_art,
            filename=used,
        )

    def export_to_clipboard(self) -> TransferResult:
        """Copy the store's JSON snapshot to the clipboard.

        Raises:
            TransferIOError: If the clipboard could not be written
        """
        snapshot = self._snapshot_for_export()
        if snapshot is None:
            return TransferResult(TransferStatus.EMPTY)

        try:
            self.adapter.emit_clipboard(self.codec.serialize_to_text(snapshot))
        except TransferIOError as e:
            logger.error(f"Clipboard export failed: {e}")
            raise

        logger.info(
            "Copied database to clipboard",
            extra={"num_char": snapshot.num_char, "num_art": snapshot.num_art},
        )
        return TransferResult(
            TransferStatus.EXPORTED,
            num_char=snapshot.num_char,
            num_art=snapshot.num_art,
        )

    # Import

    async def import_from_file(self, handle: Optional[FileHandle]) -> TransferResult:
        """Replace the store with the snapshot in an uploaded file.

        Args:
            handle: Selected file, or None if the picker was dismissed

        Returns:
            REPLACED, CANCELLED or INVALID result

        Raises:
            TransferIOError: If the file could not be read
        """
        self._begin_import()
        try:
            self._transition(ImportState.READING)
            try:
                text = await self.adapter.read_upload(handle)
            except TransferIOError as e:
                logger.error(f"Upload read failed: {e}")
                raise

            if text is None:
                logger.info("Import cancelled, no file selected")
                return TransferResult(TransferStatus.CANCELLED)

            return self._import_text(text)
        finally:
            self._transition(ImportState.IDLE)

    def import_from_pasted_text(self, text: str) -> TransferResult:
        """Replace the store with the snapshot in pasted text.

        Returns:
            REPLACED, CANCELLED or INVALID result
        """
        self._begin_import()
        try:
            self._transition(ImportState.READING)
            return self._import_text(self.adapter.read_paste(text))
        finally:
            self._transition(ImportState.IDLE)

    def _import_text(self, text: str) -> TransferResult:
        result = self.codec.parse(text)

        if result.error is not None:
            self._transition(ImportState.PARSE_FAILED)
            return TransferResult(
                TransferStatus.INVALID,
                error=describe_parse_error(result.error),
                error_code=result.error.code,
            )

        self._transition(ImportState.PARSED)
        snapshot = result.unwrap()

        if not snapshot.is_actionable:
            logger.info("Import rejected, snapshot holds no records")
            return TransferResult(TransferStatus.INVALID, error=NOT_ACTIONABLE_MESSAGE)

        self._transition(ImportState.AWAITING_CONFIRMATION)
        try:
            self._require_confirmation(DestroyKind.REPLACE)
        except UserCancelledError as e:
            self._transition(ImportState.CANCELLED)
            logger.info(f"Import cancelled: {e.message}")
            return TransferResult(
                TransferStatus.CANCELLED,
                num_char=snapshot.num_char,
                num_art=snapshot.num_art,
            )

        self._transition(ImportState.CONFIRMED)
        self.mutator.replace(snapshot)
        self._transition(ImportState.REPLACED)

        return TransferResult(
            TransferStatus.REPLACED,
            num_char=snapshot.num_char,
            num_art=snapshot.num_art,
        )

    # Clear

    def clear_store(self) -> TransferResult:
        """Delete every character and artifact after confirmation.

        Returns:
            CLEARED, CANCELLED or EMPTY result
        """
        summary = self.summary()
        if not summary.is_actionable:
            logger.info("Nothing to clear, store is empty")
            return TransferResult(TransferStatus.EMPTY)

        try:
            self._require_confirmation(DestroyKind.CLEAR)
        except UserCancelledError as e:
            logger.info(f"Clear cancelled: {e.message}")
            return TransferResult(TransferStatus.CANCELLED)

        self.mutator.clear()
        return TransferResult(
            TransferStatus.CLEARED,
            num_char=summary.num_char,
            num_art=summary.num_art,
        )
