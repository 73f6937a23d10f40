"""Typed gameplay errors.

Every engine operation checks its preconditions before touching state and
raises one of these; :class:`~lifesim.game.services.GameService` turns them
into ``{"ok": False, ...}`` outcomes at the storage boundary.
"""

from __future__ import annotations


class GameError(RuntimeError):
    """Base class for rejected operations."""

    default_code = "error"

    def __init__(self, code: str | None = None, message: str | None = None):
        self.code = code or self.default_code
        self.message = message or self.code.replace("_", " ").capitalize()
        super().__init__(self.message)


class ValidationError(GameError):
    """Malformed input (bad save code, missing creation field...)."""

    default_code = "invalid_input"


class NotFoundError(GameError):
    """Referenced character, career, activity or save code does not exist."""

    default_code = "not_found"


class PreconditionError(GameError):
    """Business rule violated: funds, eligibility, employment state, age."""

    default_code = "precondition_failed"


class ConflictError(GameError):
    """Stored snapshot changed since it was loaded."""

    default_code = "conflict"


__all__ = [
    "GameError",
    "ValidationError",
    "NotFoundError",
    "PreconditionError",
    "ConflictError",
]
