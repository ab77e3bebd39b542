"""Core progression formulas.

Pure functions shared by the team, expedition and loot services:

  * aggregate_stats     -> base team bonuses + every equipped item's bonuses
  * elemental_bonus     -> flat +20% power when a relic matches the rift weakness
  * expedition_duration -> base duration shortened by speed, floored at 5 minutes

Nothing here touches the database; callers load the team and equipped items.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Mapping, Optional

MIN_EXPEDITION_MINUTES = 5
ELEMENTAL_MATCH_BONUS = 0.20
NO_ELEMENT = "none"


@dataclass
class TeamStats:
    speed: float = 0.0
    luck: float = 0.0
    power: int = 0

    def to_dict(self) -> dict:
        return {"speed": self.speed, "luck": self.luck, "power": self.power}


def aggregate_stats(base: Any, equipped: Optional[Mapping[str, Any]] = None) -> TeamStats:
    """Return total stats for a team.

    Args:
        base: object exposing ``speed_bonus``, ``luck_bonus`` and ``power_bonus``
            (normally a Team row).
        equipped: mapping slot -> LootItem; ``None`` values are empty slots.

    Returns:
        TeamStats where each stat is base + sum of the equipped item bonuses.
    """
    stats = TeamStats(
        speed=float(base.speed_bonus or 0.0),
        luck=float(base.luck_bonus or 0.0),
        power=int(base.power_bonus or 0),
    )
    for item in (equipped or {}).values():
        if item is None:
            continue
        stats.speed += item.speed_bonus or 0.0
        stats.luck += item.luck_bonus or 0.0
        stats.power += item.power_bonus or 0
    return stats


def elemental_bonus(relic_affinity: Optional[str], rift_weakness: Optional[str]) -> float:
    """Flat power multiplier bonus for a relic whose element the rift is weak to.

    Not scaled by rarity: any matching relic gives the same 0.20.
    """
    if relic_affinity and relic_affinity != NO_ELEMENT and relic_affinity == rift_weakness:
        return ELEMENTAL_MATCH_BONUS
    return 0.0


def expedition_duration(stats: TeamStats, base_minutes: int) -> int:
    """Actual expedition length in whole minutes.

    Each point of speed shaves 1% off the base duration. Negative speed is
    accepted and lengthens the trip.
    """
    speed_modifier = stats.speed / 100.0
    adjusted = base_minutes * (1.0 - speed_modifier)
    return max(MIN_EXPEDITION_MINUTES, math.floor(adjusted))


__all__ = [
    "ELEMENTAL_MATCH_BONUS",
    "MIN_EXPEDITION_MINUTES",
    "TeamStats",
    "aggregate_stats",
    "elemental_bonus",
    "expedition_duration",
]
