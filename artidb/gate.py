"""
Confirmation gate for destructive store operations.

Every clear or replace must be approved through the gate first. The
prompt mechanism is pluggable: an interactive console prompt, a fixed
answer for headless runs, or a fake in tests.

Invariants:
    - The gate is stateless and never touches the live store
    - Only an explicit True approves; anything else declines
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Callable

logger = logging.getLogger(__name__)

Confirmer = Callable[[str], bool]


class DestroyKind(Enum):
    """Destructive operations that require confirmation."""

    CLEAR = "clear"
    REPLACE = "replace"


WARNINGS = {
    DestroyKind.CLEAR: (
        "Are you sure you want to delete your database? "
        "All existing characters and artifacts will be permanently deleted."
    ),
    DestroyKind.REPLACE: (
        "Are you sure you want to replace your database? "
        "All existing characters and artifacts will be deleted before replacement."
    ),
}


def console_confirm(message: str) -> bool:
    """Ask on the terminal; only 'y' or 'yes' approves."""
    try:
        answer = input(f"{message} [y/N] ")
    except EOFError:
        return False
    return answer.strip().lower() in ("y", "yes")


def static_confirm(answer: bool) -> Confirmer:
    """Confirmer that always gives ``answer`` without prompting."""

    def confirm(message: str) -> bool:
        return answer

    return confirm


class ConfirmationGate:
    """Guards destructive operations behind user confirmation.

    Example:
        >>> gate = ConfirmationGate(static_confirm(False))
        >>> gate.confirm_destroy(DestroyKind.CLEAR)
        False
    """

    def __init__(self, confirm: Confirmer = console_confirm) -> None:
        self._confirm = confirm

    def confirm_destroy(self, kind: DestroyKind) -> bool:
        """Present the warning for ``kind`` and return the user's decision."""
        kind = DestroyKind(kind)
        approved = self._confirm(WARNINGS[kind]) is True
        logger.info(
            "Destructive operation approved" if approved else "Destructive operation declined",
            extra={"operation": kind.value},
        )
        return approved
