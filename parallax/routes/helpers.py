"""Shared helpers for the JSON API blueprints."""

from __future__ import annotations

from typing import Any, Dict

from flask import request
from flask_login import current_user

from parallax.errors import GameError


class BadRequest(GameError):
    default_code = "bad_request"


def current_user_id() -> int:
    return int(current_user.id)


def json_body() -> Dict[str, Any]:
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise BadRequest("request body must be a JSON object")
    return data


def require_int(data: Dict[str, Any], field: str) -> int:
    value = data.get(field)
    # bool is an int subclass; reject it explicitly
    if isinstance(value, bool) or value is None:
        raise BadRequest(f"{field} is required and must be an integer", {"field": field})
    if isinstance(value, float) and not value.is_integer():
        raise BadRequest(f"{field} must be a whole number", {"field": field})
    try:
        return int(value)
    except (TypeError, ValueError):
        raise BadRequest(f"{field} is required and must be an integer", {"field": field})


def require_str(data: Dict[str, Any], field: str) -> str:
    value = data.get(field)
    if not isinstance(value, str) or not value.strip():
        raise BadRequest(f"{field} is required", {"field": field})
    return value.strip()
