"""Player inventory listing, split into equipment and consumables."""

from __future__ import annotations

from typing import Any, Dict, List

from parallax.repositories import inventory, teams
from parallax.services.views import serialize_grants


def equipped_team_numbers(user_id: int) -> Dict[int, int]:
    """grant id -> team number currently holding it."""
    out = {}
    for team in teams.list_teams_for_user(user_id):
        for grant_id in team.equipped_ids().values():
            if grant_id is not None:
                out.setdefault(grant_id, team.team_number)
    return out


def get_inventory(user_id: int) -> Dict[str, List[Dict[str, Any]]]:
    equipped_by = equipped_team_numbers(user_id)
    return {
        "equipment": serialize_grants(inventory.list_equipment_for_user(user_id), equipped_by),
        "consumables": serialize_grants(inventory.list_consumables_for_user(user_id), {}),
    }
