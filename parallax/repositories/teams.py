"""Team persistence helpers."""

from __future__ import annotations

from typing import List, Optional

from sqlalchemy import or_

from parallax import db
from parallax.errors import InvalidSlot
from parallax.models.models import SLOT_COLUMNS, SLOTS, Team

TEAM_COUNT = 5


def get_team(team_id: int) -> Optional[Team]:
    return db.session.get(Team, team_id)


def list_teams_for_user(user_id: int) -> List[Team]:
    return Team.query.filter_by(user_id=user_id).order_by(Team.team_number).all()


def create_default_teams(user_id: int) -> List[Team]:
    """Create teams 1..5 for a user (team 1 unlocked). Existing numbers are kept."""
    existing = {t.team_number for t in list_teams_for_user(user_id)}
    for number in range(1, TEAM_COUNT + 1):
        if number in existing:
            continue
        db.session.add(Team(user_id=user_id, team_number=number, is_unlocked=(number == 1)))
    db.session.flush()
    return list_teams_for_user(user_id)


def add_base_stats(team: Team, speed: float, luck: float, power: int) -> Team:
    """Permanently raise a team's base stats (consumables only)."""
    team.speed_bonus = (team.speed_bonus or 0.0) + speed
    team.luck_bonus = (team.luck_bonus or 0.0) + luck
    team.power_bonus = (team.power_bonus or 0) + power
    db.session.flush()
    return team


def _column_for(slot: str) -> str:
    try:
        return SLOT_COLUMNS[slot]
    except KeyError:
        raise InvalidSlot(f"invalid equipment slot: {slot}", {"slot": slot, "allowed": list(SLOTS)})


def set_slot(team: Team, slot: str, grant_id: Optional[int]) -> Team:
    setattr(team, _column_for(slot), grant_id)
    db.session.flush()
    return team


def clear_slot(team: Team, slot: str) -> Team:
    return set_slot(team, slot, None)


def set_unlocked(team: Team, unlocked: bool = True) -> Team:
    team.is_unlocked = unlocked
    db.session.flush()
    return team


def find_teams_holding_grant(user_id: int, grant_id: int) -> List[tuple]:
    """Return ``[(team, slot), ...]`` for every slot of the user's teams holding grant_id."""
    columns = [getattr(Team, SLOT_COLUMNS[s]) for s in SLOTS]
    rows = (
        Team.query.filter(Team.user_id == user_id)
        .filter(or_(*[c == grant_id for c in columns]))
        .order_by(Team.team_number)
        .all()
    )
    out = []
    for team in rows:
        for slot in SLOTS:
            if team.equipped_id(slot) == grant_id:
                out.append((team, slot))
    return out
