"""Read-only catalog lookups: rifts, drop tables and loot items."""

from __future__ import annotations

from typing import List, Optional

from parallax import db
from parallax.models.models import LootItem
from parallax.models.rift import LootDropTable, Rift


def get_rift(rift_id: int) -> Optional[Rift]:
    return db.session.get(Rift, rift_id)


def list_rifts() -> List[Rift]:
    return Rift.query.order_by(Rift.id).all()


def list_drop_table(rift_id: int) -> List[LootDropTable]:
    return LootDropTable.query.filter_by(rift_id=rift_id).order_by(LootDropTable.id).all()


def get_loot_item(item_id: int) -> Optional[LootItem]:
    return db.session.get(LootItem, item_id)


def list_loot_items_by_rarity_and_world(rarity: str, world_type: str) -> List[LootItem]:
    return LootItem.query.filter_by(rarity=rarity, world_type=world_type).order_by(LootItem.name, LootItem.id).all()
