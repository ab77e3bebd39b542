"""JSON-ready views of teams, items, rifts and expeditions.

Routes and Socket.IO payloads share these so every surface reports the same
shapes. Timestamps are naive UTC rendered as ``YYYY-MM-DDTHH:MM:SSZ``.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, Iterable, List, Mapping, Optional

from parallax.models.models import SLOTS

ISO_FORMAT = "%Y-%m-%dT%H:%M:%SZ"


def iso(ts: Optional[datetime]) -> Optional[str]:
    return ts.strftime(ISO_FORMAT) if ts else None


def serialize_loot_item(item) -> Dict[str, Any]:
    return {
        "id": item.id,
        "name": item.name,
        "description": item.description,
        "rarity": item.rarity,
        "world_type": item.world_type,
        "item_type": item.item_type,
        "equipment_slot": item.equipment_slot,
        "speed_bonus": item.speed_bonus,
        "luck_bonus": item.luck_bonus,
        "power_bonus": item.power_bonus,
        "elemental_affinity": item.elemental_affinity,
        "power_value": item.power_value,
        "icon": item.icon,
    }


def _equipped_entry(grant) -> Dict[str, Any]:
    if grant is None:
        return {
            "inventory_id": None,
            "loot_item_id": None,
            "name": None,
            "icon": None,
            "rarity": None,
            "speed_bonus": None,
            "luck_bonus": None,
            "power_bonus": None,
            "elemental_affinity": None,
        }
    item = grant.loot_item
    return {
        "inventory_id": grant.id,
        "loot_item_id": item.id,
        "name": item.name,
        "icon": item.icon,
        "rarity": item.rarity,
        "speed_bonus": item.speed_bonus,
        "luck_bonus": item.luck_bonus,
        "power_bonus": item.power_bonus,
        "elemental_affinity": item.elemental_affinity,
    }


def serialize_team(team, grants: Mapping[str, Any], total_stats, active=None,
                   unlock_requirement: Optional[str] = None, now: Optional[datetime] = None) -> Dict[str, Any]:
    """Team view.

    Args:
        grants: slot -> InventoryGrant (or None) currently equipped.
        total_stats: TeamStats from aggregate_stats.
        active: the team's active Expedition, if any.
        unlock_requirement: advisory text shown for locked teams.
    """
    data = {
        "id": team.id,
        "team_number": team.team_number,
        "is_unlocked": bool(team.is_unlocked),
        "base_stats": {
            "speed": team.speed_bonus or 0.0,
            "luck": team.luck_bonus or 0.0,
            "power": team.power_bonus or 0,
        },
        "total_stats": total_stats.to_dict(),
        "equipped": {slot: _equipped_entry(grants.get(slot)) for slot in SLOTS},
        "on_expedition": active is not None,
    }
    if active is not None:
        data["expedition"] = serialize_expedition(active, now=now)
    if not team.is_unlocked:
        data["unlock_requirement"] = unlock_requirement
    return data


def serialize_expedition(exp, now: datetime, team=None, rift=None,
                         loot: Optional[Iterable[Any]] = None) -> Dict[str, Any]:
    team = team if team is not None else getattr(exp, "team", None)
    rift = rift if rift is not None else getattr(exp, "rift", None)
    data = {
        "id": exp.id,
        "team_id": exp.team_id,
        "team_number": team.team_number if team is not None else None,
        "rift_id": exp.rift_id,
        "rift_name": rift.name if rift is not None else None,
        "start_time": iso(exp.start_time),
        "completion_time": iso(exp.completion_time),
        "duration_minutes": exp.duration_minutes,
        "time_remaining": None if exp.completed else exp.seconds_remaining(now),
        "is_completed": bool(exp.completed) or exp.is_complete_at(now),
        "is_claimed": bool(exp.claimed),
    }
    if loot is not None:
        data["loot"] = [serialize_loot_item(item) for item in loot]
    return data


def serialize_rift(rift, is_unlocked: Optional[bool] = None) -> Dict[str, Any]:
    data = {
        "id": rift.id,
        "name": rift.name,
        "description": rift.description,
        "world_type": rift.world_type,
        "duration_minutes": rift.duration_minutes,
        "difficulty": rift.difficulty,
        "weak_to_element": rift.weak_to_element,
        "unlock_requirement_text": rift.unlock_requirement_text,
        "icon": rift.icon,
        "drop_table": [
            {
                "rarity": row.rarity,
                "drop_rate_percent": row.drop_rate_percent,
                "min_quantity": row.min_quantity,
                "max_quantity": row.max_quantity,
            }
            for row in rift.drop_table
        ],
    }
    if is_unlocked is not None:
        data["is_unlocked"] = is_unlocked
    return data


def serialize_grant(grant, equipped_by: Optional[int] = None) -> Dict[str, Any]:
    data = {
        "inventory_id": grant.id,
        "quantity": grant.quantity,
        "acquired_at": iso(grant.acquired_at),
        "item": serialize_loot_item(grant.loot_item),
    }
    if grant.loot_item.item_type == "equipment":
        data["is_equipped"] = equipped_by is not None
        data["equipped_by_team_number"] = equipped_by
    else:
        data["is_equipped"] = False
    return data


def serialize_grants(grants: Iterable[Any], equipped_by: Mapping[int, int]) -> List[Dict[str, Any]]:
    return [serialize_grant(g, equipped_by.get(g.id)) for g in grants]
