"""Inventory grant persistence.

Quantity rules:
  * equipment  -> always a fresh row with quantity 1
  * consumable -> one row per (user, item); later grants increment quantity
"""

from __future__ import annotations

from typing import List, Optional

from parallax import db
from parallax.models.models import Equipment, InventoryGrant, LootItem, utcnow


def get_grant(grant_id: int) -> Optional[InventoryGrant]:
    return db.session.get(InventoryGrant, grant_id)


def get_grant_for_user_and_item(user_id: int, loot_item_id: int) -> Optional[InventoryGrant]:
    return InventoryGrant.query.filter_by(user_id=user_id, loot_item_id=loot_item_id).order_by(InventoryGrant.id).first()


def grant_item(user_id: int, item: LootItem) -> InventoryGrant:
    """Give one unit of ``item`` to ``user_id`` and return the touched grant row."""
    if isinstance(item.kind, Equipment):
        grant = InventoryGrant(user_id=user_id, loot_item_id=item.id, quantity=1, acquired_at=utcnow())
        db.session.add(grant)
        db.session.flush()
        return grant
    grant = get_grant_for_user_and_item(user_id, item.id)
    if grant is None:
        grant = InventoryGrant(user_id=user_id, loot_item_id=item.id, quantity=1, acquired_at=utcnow())
        db.session.add(grant)
    else:
        grant.quantity = (grant.quantity or 0) + 1
    db.session.flush()
    return grant


def consume_grant(grant: InventoryGrant) -> int:
    """Use up one unit; the row is deleted when nothing remains. Returns the remaining quantity."""
    remaining = (grant.quantity or 1) - 1
    if remaining <= 0:
        db.session.delete(grant)
        remaining = 0
    else:
        grant.quantity = remaining
    db.session.flush()
    return remaining


def list_equipment_for_user(user_id: int) -> List[InventoryGrant]:
    return (
        InventoryGrant.query.join(LootItem, LootItem.id == InventoryGrant.loot_item_id)
        .filter(InventoryGrant.user_id == user_id, LootItem.item_type == "equipment")
        .order_by(InventoryGrant.acquired_at.desc(), InventoryGrant.id.desc())
        .all()
    )


def list_consumables_for_user(user_id: int) -> List[InventoryGrant]:
    return (
        InventoryGrant.query.join(LootItem, LootItem.id == InventoryGrant.loot_item_id)
        .filter(InventoryGrant.user_id == user_id, LootItem.item_type == "consumable")
        .order_by(LootItem.name, InventoryGrant.id)
        .all()
    )
