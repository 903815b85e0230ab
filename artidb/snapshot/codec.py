"""
Snapshot codec for ArtiDB.

The codec converts the live store into a Snapshot and parses untrusted
snapshot text back into one.

Wire format (stable; previously exported files must keep loading):
    {
        "characterDatabase": {"<char id>": <record>, ...},
        "artifactDatabase": {"<artifact id>": <record>, ...}
    }

File extension ``.json``, MIME type ``application/json; charset=utf-8``.

Parsing is two-phase:
    1. JSON parse. Failure -> SnapshotSyntaxError (parser message kept)
    2. Schema validation. Failure -> SnapshotSchemaError

Invariants:
    - Missing collections are invalid, never treated as empty
    - Records are opaque and passed through unexamined
    - Counts are derived from the collections, never stored
    - Unknown top-level keys are ignored

How to change safely:
    - Add new optional top-level keys; never rename the two collections
    - Test old exported files before changing validation
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, NoReturn, Optional, Union

from pydantic import BaseModel, ConfigDict, Field
from pydantic import ValidationError as PydanticValidationError

from ..errors import SnapshotSchemaError, SnapshotSyntaxError
from ..store.base import LiveStore

logger = logging.getLogger(__name__)

CHARACTER_KEY = "characterDatabase"
ARTIFACT_KEY = "artifactDatabase"

ParseError = Union[SnapshotSyntaxError, SnapshotSchemaError]


@dataclass(frozen=True)
class Snapshot:
    """Full contents of the character and artifact collections.

    Attributes:
        character_database: Character id -> record
        artifact_database: Artifact id -> record
    """

    character_database: Dict[str, Any] = field(default_factory=dict)
    artifact_database: Dict[str, Any] = field(default_factory=dict)

    @property
    def num_char(self) -> int:
        return len(self.character_database)

    @property
    def num_art(self) -> int:
        return len(self.artifact_database)

    @property
    def is_empty(self) -> bool:
        return self.num_char == 0 and self.num_art == 0

    @property
    def is_actionable(self) -> bool:
        """Whether this snapshot may drive a destructive replace.

        True when at least one collection holds a record. A snapshot with
        one empty collection is still actionable (partial data import).
        """
        return not self.is_empty

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the wire-format dictionary."""
        return {
            CHARACTER_KEY: self.character_database,
            ARTIFACT_KEY: self.artifact_database,
        }


class SnapshotDocument(BaseModel):
    """Schema of a snapshot document."""

    model_config = ConfigDict(extra="ignore")

    character_database: Dict[str, Any] = Field(alias=CHARACTER_KEY)
    artifact_database: Dict[str, Any] = Field(alias=ARTIFACT_KEY)


@dataclass(frozen=True)
class ParseResult:
    """Tagged result of parsing snapshot text.

    Exactly one of ``snapshot`` and ``error`` is set.

    Example:
        >>> result = parse_snapshot('{"characterDatabase": {}, "artifactDatabase": {}}')
        >>> result.ok, result.num_char, result.is_actionable
        (True, 0, False)
    """

    snapshot: Optional[Snapshot] = None
    error: Optional[ParseError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def num_char(self) -> Optional[int]:
        return self.snapshot.num_char if self.snapshot else None

    @property
    def num_art(self) -> Optional[int]:
        return self.snapshot.num_art if self.snapshot else None

    @property
    def is_actionable(self) -> bool:
        return self.snapshot is not None and self.snapshot.is_actionable

    def unwrap(self) -> Snapshot:
        """Return the snapshot, or raise the parse error."""
        if self.error is not None:
            raise self.error
        assert self.snapshot is not None
        return self.snapshot


def _reject_constant(name: str) -> NoReturn:
    raise ValueError(f"Invalid JSON constant: {name}")


def _load_json(raw_text: str) -> Any:
    """Parse raw text as JSON.

    Raises:
        SnapshotSyntaxError: If the text is not valid JSON
    """
    try:
        return json.loads(raw_text, parse_constant=_reject_constant)
    except json.JSONDecodeError as e:
        raise SnapshotSyntaxError(str(e), line=e.lineno, column=e.colno) from e
    except (ValueError, TypeError, RecursionError) as e:
        raise SnapshotSyntaxError(str(e) or type(e).__name__) from e


def _validate(data: Any) -> Snapshot:
    """Check a parsed value is a well-formed snapshot.

    Raises:
        SnapshotSchemaError: If either collection is missing or malformed
    """
    try:
        document = SnapshotDocument.model_validate(data, strict=True)
    except PydanticValidationError as e:
        errors = [
            f"{'.'.join(str(part) for part in err['loc']) or '<document>'}: {err['msg']}"
            for err in e.errors()
        ]
        raise SnapshotSchemaError(
            "Unable to parse character & artifact data: " + "; ".join(errors),
            errors=errors,
        ) from e

    return Snapshot(
        character_database=document.character_database,
        artifact_database=document.artifact_database,
    )


def parse_snapshot(raw_text: str) -> ParseResult:
    """Parse and validate untrusted snapshot text.

    Args:
        raw_text: Candidate snapshot text

    Returns:
        ParseResult holding either the Snapshot or the
        SnapshotSyntaxError/SnapshotSchemaError that rejected it
    """
    try:
        snapshot = _validate(_load_json(raw_text))
    except (SnapshotSyntaxError, SnapshotSchemaError) as e:
        logger.info(
            "Snapshot rejected",
            extra={"code": e.code, "size_chars": len(raw_text) if raw_text else 0},
        )
        return ParseResult(error=e)

    logger.debug(
        "Snapshot parsed",
        extra={"num_char": snapshot.num_char, "num_art": snapshot.num_art},
    )
    return ParseResult(snapshot=snapshot)


def dump_snapshot(snapshot: Snapshot) -> str:
    """Encode a snapshot in the wire format (compact JSON)."""
    return json.dumps(snapshot.to_dict(), ensure_ascii=False, separators=(",", ":"))


class SnapshotCodec:
    """Converts between the live store and snapshot text.

    Attributes:
        store: LiveStore to read from

    Example:
        >>> codec = SnapshotCodec(store)
        >>> text = codec.serialize_to_text()
        >>> codec.parse(text).unwrap() == codec.serialize()
        True
    """

    def __init__(self, store: LiveStore) -> None:
        self.store = store

    def serialize(self) -> Snapshot:
        """Capture the full contents of the live store."""
        return Snapshot(
            character_database=self.store.get_all_character_records(),
            artifact_database=self.store.get_all_artifact_records(),
        )

    def serialize_to_text(self, snapshot: Optional[Snapshot] = None) -> str:
        """Encode ``snapshot``, or the current store when omitted."""
        if snapshot is None:
            snapshot = self.serialize()
        return dump_snapshot(snapshot)

    @staticmethod
    def parse(raw_text: str) -> ParseResult:
        return parse_snapshot(raw_text)
