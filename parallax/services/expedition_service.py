"""Expedition lifecycle: start, list and claim.

States:
  Active    -> completed flag unset, completion time may still be ahead
  Completed -> wall-clock predicate now >= start_time + duration
  Claimed   -> terminal; loot granted, completed and claimed flags set

Claims run in a single transaction and flip ``claimed`` with a conditional
update, so each expedition pays out exactly once. Any failure while granting
rolls back every grant and audit row and leaves the expedition claimable.

Socket.IO ``expedition_update`` pushes are sent only after the commit.
"""

from __future__ import annotations

import random
from datetime import datetime
from typing import Any, Dict, List, Optional

from parallax.errors import AlreadyClaimed, NotYetComplete, TeamLocked
from parallax.logging_utils import get_logger
from parallax.models.models import utcnow
from parallax.repositories import atomic, catalog, expeditions, teams
from parallax.services import settings
from parallax.services.equipment_service import load_equipped_items
from parallax.services.game_core import aggregate_stats, elemental_bonus, expedition_duration
from parallax.services.guards import load_owned, logs_rejections, require_found
from parallax.services.loot_service import generate_loot
from parallax.services.views import serialize_expedition, serialize_loot_item
from parallax.websockets.expeditions import notify_user

log = get_logger(__name__)


@logs_rejections("start_expedition")
def start_expedition(user_id: int, team_id: int, rift_id: int, now: Optional[datetime] = None) -> Dict[str, Any]:
    """Send an unlocked team into a rift.

    Returns the expedition view plus the informational ``team_stats`` (power
    includes any elemental relic bonus) and ``elemental_bonus``.
    """
    now = now or utcnow()
    with atomic():
        team = load_owned(teams.get_team(team_id), user_id, "team", team_id)
        if not team.is_unlocked:
            raise TeamLocked("team is locked", {"team_id": team_id, "team_number": team.team_number})
        rift = require_found(catalog.get_rift(rift_id), "rift", rift_id)

        equipped = load_equipped_items(team)
        stats = aggregate_stats(team, equipped)
        bonus = 0.0
        relic = equipped.get("relic")
        if relic is not None:
            bonus = elemental_bonus(relic.elemental_affinity, rift.weak_to_element)
            stats.power = int(stats.power * (1 + bonus))
        duration = expedition_duration(stats, rift.duration_minutes)
        exp = expeditions.create_expedition(user_id, team.id, rift.id, duration, start_time=now)

    view = serialize_expedition(exp, now=now, team=team, rift=rift)
    view["team_stats"] = stats.to_dict()
    view["elemental_bonus"] = bonus
    log.info(
        event="expedition_started",
        user_id=user_id,
        expedition_id=exp.id,
        team_id=team.id,
        rift_id=rift.id,
        duration_minutes=duration,
        speed=stats.speed,
        elemental_bonus=bonus,
    )
    notify_user(user_id, {"event": "started", "expedition_id": exp.id, "expedition": view})
    return view


@logs_rejections("claim_rewards")
def claim_rewards(user_id: int, expedition_id: int, rng: Optional[random.Random] = None,
                  now: Optional[datetime] = None) -> Dict[str, Any]:
    """Grant loot for a completed expedition, once."""
    now = now or utcnow()
    with atomic():
        exp = load_owned(expeditions.get_expedition(expedition_id), user_id, "expedition", expedition_id)
        if exp.claimed:
            raise AlreadyClaimed("rewards already claimed", {"expedition_id": expedition_id})
        if not exp.is_complete_at(now):
            raise NotYetComplete(
                "expedition not yet complete",
                {"expedition_id": expedition_id, "seconds_remaining": exp.seconds_remaining(now)},
            )
        team = require_found(teams.get_team(exp.team_id), "team", exp.team_id)
        rift = require_found(catalog.get_rift(exp.rift_id), "rift", exp.rift_id)

        outcome = generate_loot(exp, team, rift, rng=rng, equipped=load_equipped_items(team))
        expeditions.mark_completed(exp)
        expeditions.mark_processed(exp)
        if not expeditions.mark_claimed(exp):
            raise AlreadyClaimed("rewards already claimed", {"expedition_id": expedition_id})

    loot = [serialize_loot_item(item) for item in outcome.items]
    log.info(
        event="expedition_claimed",
        user_id=user_id,
        expedition_id=exp.id,
        items=len(loot),
        luck=outcome.luck,
    )
    notify_user(user_id, {"event": "claimed", "expedition_id": exp.id, "loot": loot})
    return {"expedition_id": exp.id, "loot": loot}


def get_active_expeditions(user_id: int, now: Optional[datetime] = None) -> List[Dict[str, Any]]:
    now = now or utcnow()
    return [serialize_expedition(exp, now=now) for exp in expeditions.list_active(user_id)]


def get_expedition_history(user_id: int, limit: Optional[int] = None,
                           now: Optional[datetime] = None) -> List[Dict[str, Any]]:
    """Completed expeditions, newest first; claimed ones carry their audit-trail loot."""
    now = now or utcnow()
    if limit is None or limit <= 0:
        limit = settings.history_limit_default()
    out = []
    for exp in expeditions.list_completed(user_id, limit):
        loot = None
        if exp.claimed:
            loot = [rec.loot_item for rec in expeditions.list_loot_records(exp.id)]
        out.append(serialize_expedition(exp, now=now, loot=loot))
    return out


__all__ = ["claim_rewards", "get_active_expeditions", "get_expedition_history", "start_expedition"]
