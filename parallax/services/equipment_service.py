"""Team equipment, consumables and unlocks.

Exclusivity rule: a grant sits in at most one team/slot across the owner's
teams. Equipping clears every slot currently holding the grant before setting
the target slot, all inside one transaction.

Each public operation returns the refreshed team view (see views.serialize_team).
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, List, Optional

from parallax.errors import InvalidItemKind, InvalidSlot, SlotMismatch
from parallax.logging_utils import get_logger
from parallax.models.models import SLOTS, Consumable, Equipment, utcnow
from parallax.repositories import atomic, expeditions, inventory, teams
from parallax.services import settings
from parallax.services.game_core import aggregate_stats
from parallax.services.guards import load_owned, logs_rejections
from parallax.services.views import serialize_team

log = get_logger(__name__)


def _validate_slot(slot: str) -> str:
    if slot not in SLOTS:
        raise InvalidSlot(f"invalid equipment slot: {slot}", {"slot": slot, "allowed": list(SLOTS)})
    return slot


def load_equipped_grants(team) -> Dict[str, Any]:
    """slot -> InventoryGrant (None for empty slots)."""
    out = {}
    for slot, grant_id in team.equipped_ids().items():
        out[slot] = inventory.get_grant(grant_id) if grant_id is not None else None
    return out


def load_equipped_items(team) -> Dict[str, Any]:
    """slot -> LootItem (None for empty slots)."""
    return {slot: (g.loot_item if g is not None else None) for slot, g in load_equipped_grants(team).items()}


def unlock_requirement_text(team_number: int) -> str:
    required = settings.team_unlock_requirements().get(team_number)
    if required is None:
        return "Locked"
    noun = "expedition" if required == 1 else "expeditions"
    return f"Complete {required} {noun} to unlock"


def build_team_view(team, active=None, now: Optional[datetime] = None) -> Dict[str, Any]:
    grants = load_equipped_grants(team)
    items = {slot: (g.loot_item if g is not None else None) for slot, g in grants.items()}
    requirement = None if team.is_unlocked else unlock_requirement_text(team.team_number)
    return serialize_team(team, grants, aggregate_stats(team, items), active=active,
                          unlock_requirement=requirement, now=now or utcnow())


def _active_by_team(user_id: int) -> Dict[int, Any]:
    active = {}
    # newest first, so the first seen per team wins
    for exp in expeditions.list_active(user_id):
        active.setdefault(exp.team_id, exp)
    return active


def _team_view_for_user(user_id: int, team) -> Dict[str, Any]:
    return build_team_view(team, active=_active_by_team(user_id).get(team.id))


def get_user_teams(user_id: int, now: Optional[datetime] = None) -> List[Dict[str, Any]]:
    active = _active_by_team(user_id)
    return [build_team_view(t, active=active.get(t.id), now=now) for t in teams.list_teams_for_user(user_id)]


@logs_rejections("get_team")
def get_team(user_id: int, team_id: int) -> Dict[str, Any]:
    team = load_owned(teams.get_team(team_id), user_id, "team", team_id)
    return _team_view_for_user(user_id, team)


@logs_rejections("equip_item")
def equip_item(user_id: int, team_id: int, slot: str, inventory_id: int) -> Dict[str, Any]:
    """Equip a grant into ``slot`` of a team, removing it from wherever it sat before."""
    _validate_slot(slot)
    with atomic():
        team = load_owned(teams.get_team(team_id), user_id, "team", team_id)
        grant = load_owned(inventory.get_grant(inventory_id), user_id, "inventory", inventory_id)
        kind = grant.loot_item.kind
        if not isinstance(kind, Equipment):
            raise InvalidItemKind("only equipment can be equipped", {"inventory_id": inventory_id})
        if kind.slot != slot:
            raise SlotMismatch(
                f"item belongs in {kind.slot} slot, not {slot}",
                {"inventory_id": inventory_id, "item_slot": kind.slot, "slot": slot},
            )
        for holder, held_slot in teams.find_teams_holding_grant(user_id, grant.id):
            teams.clear_slot(holder, held_slot)
        teams.set_slot(team, slot, grant.id)
    log.info(event="item_equipped", user_id=user_id, team_id=team.id, slot=slot, inventory_id=grant.id)
    return _team_view_for_user(user_id, team)


@logs_rejections("unequip_item")
def unequip_item(user_id: int, team_id: int, slot: str) -> Dict[str, Any]:
    _validate_slot(slot)
    with atomic():
        team = load_owned(teams.get_team(team_id), user_id, "team", team_id)
        teams.clear_slot(team, slot)
    log.info(event="item_unequipped", user_id=user_id, team_id=team.id, slot=slot)
    return _team_view_for_user(user_id, team)


@logs_rejections("consume_item")
def consume_item(user_id: int, team_id: int, inventory_id: int) -> Dict[str, Any]:
    """Permanently add a consumable's bonuses to the team's base stats and use up one unit."""
    with atomic():
        team = load_owned(teams.get_team(team_id), user_id, "team", team_id)
        grant = load_owned(inventory.get_grant(inventory_id), user_id, "inventory", inventory_id)
        item = grant.loot_item
        if not isinstance(item.kind, Consumable):
            raise InvalidItemKind("only consumables can be consumed", {"inventory_id": inventory_id})
        teams.add_base_stats(team, item.speed_bonus or 0.0, item.luck_bonus or 0.0, item.power_bonus or 0)
        remaining = inventory.consume_grant(grant)
    log.info(
        event="item_consumed",
        user_id=user_id,
        team_id=team.id,
        loot_item_id=item.id,
        remaining=remaining,
    )
    return _team_view_for_user(user_id, team)


@logs_rejections("unlock_team")
def unlock_team(user_id: int, team_id: int) -> Dict[str, Any]:
    with atomic():
        team = load_owned(teams.get_team(team_id), user_id, "team", team_id)
        teams.set_unlocked(team)
    log.info(event="team_unlocked", user_id=user_id, team_id=team.id, team_number=team.team_number)
    return _team_view_for_user(user_id, team)


__all__ = [
    "build_team_view",
    "consume_item",
    "equip_item",
    "get_team",
    "get_user_teams",
    "load_equipped_grants",
    "load_equipped_items",
    "unequip_item",
    "unlock_requirement_text",
    "unlock_team",
]
