"""Player rankings.

Boards:
  * expeditions -> number of completed expeditions
  * power       -> inventory value, each unit weighted by rarity
                   (common 1, uncommon 5, rare 25, epic 125, legendary 1000)
  * legendary   -> units of legendary items held

Players with a zero score are not ranked. Ordering is score descending, then
user id ascending; tied scores share a rank and the next distinct score takes
its 1-based position (1, 1, 3). The top of the board is returned together with
the caller's own entry when the caller ranks below it.

Scores are computed on each request from the live tables.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, Iterable, List, Optional

from parallax.errors import InvalidLeaderboardType
from parallax.models.models import utcnow
from parallax.repositories import leaderboard
from parallax.services.guards import logs_rejections
from parallax.services.views import iso

TOP_PLAYERS_LIMIT = 20

POWER_WEIGHTS = {"common": 1, "uncommon": 5, "rare": 25, "epic": 125, "legendary": 1000}

BOARD_EXPEDITIONS = "expeditions"
BOARD_POWER = "power"
BOARD_LEGENDARY = "legendary"

_SCORERS = {
    BOARD_EXPEDITIONS: leaderboard.completed_expedition_counts,
    BOARD_POWER: lambda: leaderboard.weighted_inventory_scores(POWER_WEIGHTS),
    BOARD_LEGENDARY: lambda: leaderboard.rarity_quantities("legendary"),
}

BOARD_TYPES = tuple(_SCORERS)


def assign_ranks(rows: Iterable[tuple]) -> List[Dict[str, Any]]:
    """Sort ``(user_id, username, score)`` rows and attach competition ranks."""
    ordered = sorted(rows, key=lambda r: (-r[2], r[0]))
    ranked = []
    rank = 0
    for position, (user_id, username, score) in enumerate(ordered, start=1):
        if position == 1 or score != ranked[-1]["score"]:
            rank = position
        ranked.append({"rank": rank, "user_id": user_id, "username": username, "score": score})
    return ranked


def _entry(row: Dict[str, Any], user_id: int) -> Dict[str, Any]:
    return {**row, "is_current_user": row["user_id"] == user_id}


@logs_rejections("get_leaderboard")
def get_leaderboard(board: str, user_id: int, now: Optional[datetime] = None) -> Dict[str, Any]:
    scorer = _SCORERS.get(board)
    if scorer is None:
        raise InvalidLeaderboardType(
            f"unknown leaderboard type {board!r}", {"leaderboard_type": board, "valid": list(BOARD_TYPES)}
        )
    ranked = assign_ranks(scorer())
    top = [_entry(row, user_id) for row in ranked[:TOP_PLAYERS_LIMIT]]
    current = None
    if not any(e["is_current_user"] for e in top):
        mine = next((row for row in ranked if row["user_id"] == user_id), None)
        if mine is not None:
            current = _entry(mine, user_id)
    return {
        "leaderboard_type": board,
        "last_synced": iso(now or utcnow()),
        "top_players": top,
        "current_user_rank": current,
    }
