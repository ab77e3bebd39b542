"""Gameplay error taxonomy.

Services raise these for client-caused rejections; the Flask error handler in
``parallax/__init__.py`` renders them as JSON with the matching status code.

Categories:
  * ownership  -> NotOwner
  * state      -> TeamLocked, NotYetComplete, AlreadyClaimed, SlotMismatch,
                  InvalidItemKind, InvalidSlot
  * lookup     -> NotFound, InvalidLeaderboardType

Database failures are not wrapped: SQLAlchemy exceptions propagate unchanged
once the transactional scope has rolled back.
"""

from __future__ import annotations

from typing import Any, Dict, Optional


class GameError(Exception):
    """Base class for rejected gameplay operations.

    Carries a human readable ``message``, structured ``details`` for logs and
    API payloads, and a stable ``error_code`` (snake_case class name by default).
    """

    http_status = 400
    default_code = "game_error"

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None, error_code: Optional[str] = None):
        self.message = message
        self.details = details or {}
        self.error_code = error_code or self.default_code
        super().__init__(message)

    def to_dict(self) -> Dict[str, Any]:
        return {"error": self.error_code, "message": self.message, "details": self.details}

    def __str__(self) -> str:
        details_str = f" | Details: {self.details}" if self.details else ""
        return f"[{self.error_code}] {self.message}{details_str}"


class NotFound(GameError):
    http_status = 404
    default_code = "not_found"


class NotOwner(GameError):
    http_status = 403
    default_code = "not_owner"


class StateViolation(GameError):
    """The entity exists and is owned by the caller but is in the wrong state."""

    http_status = 409
    default_code = "state_violation"


class TeamLocked(StateViolation):
    default_code = "team_locked"


class NotYetComplete(StateViolation):
    default_code = "not_yet_complete"


class AlreadyClaimed(StateViolation):
    default_code = "already_claimed"


class SlotMismatch(GameError):
    default_code = "slot_mismatch"


class InvalidItemKind(GameError):
    default_code = "invalid_item_kind"


class InvalidSlot(GameError):
    default_code = "invalid_slot"


class UsernameTaken(StateViolation):
    default_code = "username_taken"


class InvalidLeaderboardType(GameError):
    default_code = "invalid_leaderboard_type"


__all__ = [
    "GameError",
    "NotFound",
    "NotOwner",
    "StateViolation",
    "TeamLocked",
    "NotYetComplete",
    "AlreadyClaimed",
    "SlotMismatch",
    "InvalidItemKind",
    "InvalidSlot",
    "UsernameTaken",
    "InvalidLeaderboardType",
]
