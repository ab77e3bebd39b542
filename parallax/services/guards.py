"""Lookup and ownership guards shared by every service operation."""

from __future__ import annotations

import functools
from typing import Any, Optional, TypeVar

from parallax.errors import GameError, NotFound, NotOwner
from parallax.logging_utils import get_logger

T = TypeVar("T")

log = get_logger(__name__)


def logs_rejections(operation: str):
    """Log any GameError raised by the wrapped operation, then re-raise it."""

    rejected = log.bind(operation=operation)

    def decorator(fn):
        @functools.wraps(fn)
        def wrapper(*args, **kwargs):
            try:
                return fn(*args, **kwargs)
            except GameError as e:
                rejected.info(event="operation_rejected", error=e.error_code, message=e.message)
                raise

        return wrapper

    return decorator


def require_found(entity: Optional[T], what: str, ident: Any) -> T:
    if entity is None:
        raise NotFound(f"{what} not found", {what: ident})
    return entity


def require_owner(entity: Any, user_id: int, what: str) -> Any:
    """Raise NotOwner unless ``entity.user_id`` is the caller."""
    if entity.user_id != user_id:
        raise NotOwner(f"{what} does not belong to user", {f"{what}_id": entity.id, "user_id": user_id})
    return entity


def load_owned(entity: Optional[T], user_id: int, what: str, ident: Any) -> T:
    return require_owner(require_found(entity, what, ident), user_id, what)
