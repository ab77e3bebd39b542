"""Database-backed gameplay tunables.

Each loader reads a GameConfig row, merges it over the code defaults and falls
back to the defaults when the row is missing or malformed.
"""

from __future__ import annotations

import json
from typing import Dict

from parallax.logging_utils import get_logger
from parallax.models.models import GameConfig

log = get_logger(__name__)

DEFAULT_RIFT_UNLOCK_THRESHOLDS: Dict[str, int] = {"medium": 5, "hard": 15, "legendary": 30}
DEFAULT_TEAM_UNLOCK_REQUIREMENTS: Dict[int, int] = {2: 1, 3: 3, 4: 25, 5: 50}
DEFAULT_HISTORY_LIMIT = 10


def _load_json(key: str):
    raw = GameConfig.get(key)
    if raw is None:
        return None
    try:
        return json.loads(raw)
    except ValueError:
        log.warn(event="config_malformed", key=key)
        return None


def _merge_int_map(defaults: dict, data, key_type=str) -> dict:
    merged = dict(defaults)
    if not isinstance(data, dict):
        return merged
    for k, v in data.items():
        try:
            merged[key_type(k)] = max(0, int(v))
        except (TypeError, ValueError):
            continue
    return merged


def rift_unlock_thresholds() -> Dict[str, int]:
    """Completed-expedition count required per rift difficulty."""
    return _merge_int_map(DEFAULT_RIFT_UNLOCK_THRESHOLDS, _load_json("rift_unlock_thresholds"))


def team_unlock_requirements() -> Dict[int, int]:
    """Completed-expedition count advertised for unlocking each team number."""
    return _merge_int_map(DEFAULT_TEAM_UNLOCK_REQUIREMENTS, _load_json("team_unlock_requirements"), key_type=int)


def history_limit_default() -> int:
    data = _load_json("history_limit_default")
    try:
        value = int(data)
    except (TypeError, ValueError):
        return DEFAULT_HISTORY_LIMIT
    return value if value > 0 else DEFAULT_HISTORY_LIMIT


DEFAULTS = {
    "rift_unlock_thresholds": DEFAULT_RIFT_UNLOCK_THRESHOLDS,
    "team_unlock_requirements": {str(k): v for k, v in DEFAULT_TEAM_UNLOCK_REQUIREMENTS.items()},
    "history_limit_default": DEFAULT_HISTORY_LIMIT,
}
