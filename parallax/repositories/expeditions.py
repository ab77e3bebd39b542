"""Expedition and expedition-loot audit persistence."""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from parallax import db
from parallax.models.expedition import Expedition, ExpeditionLoot
from parallax.models.models import utcnow


def create_expedition(user_id: int, team_id: int, rift_id: int, duration_minutes: int,
                      start_time: Optional[datetime] = None) -> Expedition:
    exp = Expedition(
        user_id=user_id,
        team_id=team_id,
        rift_id=rift_id,
        start_time=start_time or utcnow(),
        duration_minutes=duration_minutes,
        completed=False,
        processed=False,
        claimed=False,
    )
    db.session.add(exp)
    db.session.flush()
    return exp


def get_expedition(expedition_id: int) -> Optional[Expedition]:
    return db.session.get(Expedition, expedition_id)


def list_active(user_id: int) -> List[Expedition]:
    """Expeditions whose completed flag is still unset, newest first."""
    return (
        Expedition.query.filter_by(user_id=user_id, completed=False)
        .order_by(Expedition.start_time.desc(), Expedition.id.desc())
        .all()
    )


def list_completed(user_id: int, limit: int) -> List[Expedition]:
    return (
        Expedition.query.filter_by(user_id=user_id, completed=True)
        .order_by(Expedition.start_time.desc(), Expedition.id.desc())
        .limit(limit)
        .all()
    )


def count_completed(user_id: int) -> int:
    return Expedition.query.filter_by(user_id=user_id, completed=True).count()


def mark_completed(expedition: Expedition) -> Expedition:
    expedition.completed = True
    db.session.flush()
    return expedition


def mark_processed(expedition: Expedition) -> Expedition:
    expedition.processed = True
    db.session.flush()
    return expedition


def mark_claimed(expedition: Expedition) -> bool:
    """Flip claimed only if it is still unset. Returns False when another claim got there first."""
    updated = Expedition.query.filter_by(id=expedition.id, claimed=False).update({"claimed": True})
    db.session.flush()
    if updated:
        expedition.claimed = True
    return bool(updated)


def append_loot_record(expedition_id: int, loot_item_id: int, quantity: int = 1) -> ExpeditionLoot:
    row = ExpeditionLoot(expedition_id=expedition_id, loot_item_id=loot_item_id, quantity=quantity)
    db.session.add(row)
    db.session.flush()
    return row


def list_loot_records(expedition_id: int) -> List[ExpeditionLoot]:
    return ExpeditionLoot.query.filter_by(expedition_id=expedition_id).order_by(ExpeditionLoot.id).all()
