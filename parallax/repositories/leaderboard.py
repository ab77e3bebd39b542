"""Per-player score aggregates for the leaderboards.

Each query returns ``(user_id, username, score)`` rows for players with a
positive score only; ordering and ranks are applied by the service.
"""

from __future__ import annotations

from typing import List, Mapping, Tuple

from sqlalchemy import case, func

from parallax import db
from parallax.models.expedition import Expedition
from parallax.models.models import InventoryGrant, LootItem, User

ScoreRow = Tuple[int, str, int]


def _rows(query) -> List[ScoreRow]:
    return [(user_id, username, int(score)) for user_id, username, score in query.all()]


def completed_expedition_counts() -> List[ScoreRow]:
    score = func.count(Expedition.id)
    query = (
        db.session.query(User.id, User.username, score)
        .join(Expedition, Expedition.user_id == User.id)
        .filter(Expedition.completed.is_(True))
        .group_by(User.id, User.username)
        .having(score > 0)
    )
    return _rows(query)


def weighted_inventory_scores(weights: Mapping[str, int]) -> List[ScoreRow]:
    """Sum of grant quantity times the weight of the item's rarity."""
    weight = case(dict(weights), value=LootItem.rarity, else_=0)
    score = func.sum(InventoryGrant.quantity * weight)
    query = (
        db.session.query(User.id, User.username, score)
        .join(InventoryGrant, InventoryGrant.user_id == User.id)
        .join(LootItem, LootItem.id == InventoryGrant.loot_item_id)
        .group_by(User.id, User.username)
        .having(score > 0)
    )
    return _rows(query)


def rarity_quantities(rarity: str) -> List[ScoreRow]:
    score = func.sum(InventoryGrant.quantity)
    query = (
        db.session.query(User.id, User.username, score)
        .join(InventoryGrant, InventoryGrant.user_id == User.id)
        .join(LootItem, LootItem.id == InventoryGrant.loot_item_id)
        .filter(LootItem.rarity == rarity)
        .group_by(User.id, User.username)
        .having(score > 0)
    )
    return _rows(query)
