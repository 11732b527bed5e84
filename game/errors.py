"""Custom exception types raised by the game session layer."""

from __future__ import annotations

from typing import Any

from rulery.errors import ErrorDetails


class GameError(Exception):
    """Base class for session related exceptions."""

    error_code = "ERR_GAME"

    def __init__(self, message: str, *, details: ErrorDetails | None = None) -> None:
        super().__init__(message)
        self.details = details or ErrorDetails(code=self.error_code, message=message)

    @property
    def code(self) -> str:
        return self.details.code


class NoActivePlayer(GameError):
    """Raised by turn advancement when every player has won or lost."""

    error_code = "ERR_NO_ACTIVE_PLAYER"

    def __init__(self) -> None:
        super().__init__("no active player")


class DuplicatePiece(GameError):
    """Raised when a piece is inserted on an occupied tile."""

    error_code = "ERR_DUPLICATE_PIECE"

    def __init__(self, pos: Any) -> None:
        super().__init__(f"a piece already stands at {pos}")
        self.pos = pos


class IllegalActionError(GameError):
    """Raised when a step is requested that the current phase does not allow."""

    error_code = "ERR_ILLEGAL_ACTION"


class SessionInvariantError(GameError):
    """The session's own bookkeeping is inconsistent. Not recoverable."""

    error_code = "ERR_SESSION_INVARIANT"


__all__ = [
    "DuplicatePiece",
    "ErrorDetails",
    "GameError",
    "IllegalActionError",
    "NoActivePlayer",
    "SessionInvariantError",
]
