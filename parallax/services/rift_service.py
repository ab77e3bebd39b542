"""Rift catalog listing and unlock rules.

A rift is open to a player when:
  * its difficulty is ``tutorial`` (or it is rift 1, the onboarding rift)
  * its difficulty is ``easy``
  * its difficulty is medium/hard/legendary and the player's completed
    expedition count reaches the configured threshold
Unknown difficulties stay locked.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from parallax.repositories import catalog, expeditions
from parallax.services import settings
from parallax.services.guards import logs_rejections, require_found
from parallax.services.views import serialize_rift

ALWAYS_OPEN = ("tutorial", "easy")


def _unlocked(rift, completed: int, thresholds: Dict[str, int]) -> bool:
    if rift.id == 1 or rift.difficulty in ALWAYS_OPEN:
        return True
    required = thresholds.get(rift.difficulty)
    if required is None:
        return False
    return completed >= required


def is_rift_unlocked(user_id: int, rift_id: int) -> bool:
    rift = require_found(catalog.get_rift(rift_id), "rift", rift_id)
    return _unlocked(rift, expeditions.count_completed(user_id), settings.rift_unlock_thresholds())


def list_rifts(user_id: Optional[int] = None) -> List[Dict[str, Any]]:
    rifts = catalog.list_rifts()
    if user_id is None:
        return [serialize_rift(r) for r in rifts]
    completed = expeditions.count_completed(user_id)
    thresholds = settings.rift_unlock_thresholds()
    return [serialize_rift(r, is_unlocked=_unlocked(r, completed, thresholds)) for r in rifts]


@logs_rejections("get_rift")
def get_rift(rift_id: int, user_id: Optional[int] = None) -> Dict[str, Any]:
    rift = require_found(catalog.get_rift(rift_id), "rift", rift_id)
    if user_id is None:
        return serialize_rift(rift)
    unlocked = _unlocked(rift, expeditions.count_completed(user_id), settings.rift_unlock_thresholds())
    return serialize_rift(rift, is_unlocked=unlocked)
