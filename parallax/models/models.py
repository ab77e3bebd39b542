"""
project: Parallax
module: models.py
License: MIT

Core database models: player accounts, teams, the loot catalog and inventory
grants, plus key/value game configuration.

Notes:
- Teams reference equipped gear through five nullable inventory grant foreign
  keys, one per slot category. Which grant sits where is governed by
  services/equipment_service.py; the schema itself does not prevent a grant
  from appearing in two slots.
- LootItem exposes its equipment/consumable duality through ``kind`` (a
  tagged union) so callers never branch on the nullable ``equipment_slot``.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional, Union

from flask_login import UserMixin

from parallax import db

SLOTS = ("weapon", "armor", "accessory", "artifact", "relic")
RARITIES = ("common", "uncommon", "rare", "epic", "legendary")
ITEM_TYPES = ("equipment", "consumable")

# slot name -> Team column holding the equipped grant id
SLOT_COLUMNS = {slot: f"equipped_{slot}_id" for slot in SLOTS}


def utcnow() -> datetime:
    """Naive UTC timestamp (SQLite DateTime columns are stored without tz)."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


class User(UserMixin, db.Model):
    """Player account. Identity only; credentials live outside this service."""

    id = db.Column(db.Integer, primary_key=True)
    username = db.Column(db.String(80), unique=True, nullable=False)
    email = db.Column(db.String(120), nullable=True)
    created_at = db.Column(db.DateTime, nullable=False, default=utcnow)

    def __repr__(self):
        return f"<User {self.id} {self.username}>"


class GameConfig(db.Model):
    """Key/value style game configuration storage.

    Stores tunable gameplay constants (rift unlock thresholds, team unlock
    requirements, history page size) so they can be adjusted without code
    changes. Values are persisted as JSON-serializable text.

    Example rows:
        key='rift_unlock_thresholds', value='{"medium":5,"hard":15,"legendary":30}'
        key='history_limit_default', value='10'
    """

    id = db.Column(db.Integer, primary_key=True)
    key = db.Column(db.String(80), unique=True, nullable=False)
    value = db.Column(db.Text, nullable=False)

    @staticmethod
    def get(key: str):
        row = GameConfig.query.filter_by(key=key).first()
        return row.value if row else None

    @staticmethod
    def set(key: str, value: str):
        row = GameConfig.query.filter_by(key=key).first()
        if not row:
            row = GameConfig(key=key, value=value)
            db.session.add(row)
        else:
            row.value = value
        db.session.commit()


class Team(db.Model):
    """One of a player's five expedition teams.

    Attributes:
        team_number: 1-5, unique per user. Team 1 starts unlocked.
        speed_bonus / luck_bonus / power_bonus: permanent base stats, raised
            only by consuming items.
        equipped_<slot>_id: InventoryGrant currently equipped in that slot.
    """

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey("user.id"), nullable=False, index=True)
    team_number = db.Column(db.Integer, nullable=False)
    is_unlocked = db.Column(db.Boolean, nullable=False, default=False)
    speed_bonus = db.Column(db.Float, nullable=False, default=0.0)
    luck_bonus = db.Column(db.Float, nullable=False, default=0.0)
    power_bonus = db.Column(db.Integer, nullable=False, default=0)
    equipped_weapon_id = db.Column(db.Integer, db.ForeignKey("inventory_grant.id"), nullable=True)
    equipped_armor_id = db.Column(db.Integer, db.ForeignKey("inventory_grant.id"), nullable=True)
    equipped_accessory_id = db.Column(db.Integer, db.ForeignKey("inventory_grant.id"), nullable=True)
    equipped_artifact_id = db.Column(db.Integer, db.ForeignKey("inventory_grant.id"), nullable=True)
    equipped_relic_id = db.Column(db.Integer, db.ForeignKey("inventory_grant.id"), nullable=True)
    created_at = db.Column(db.DateTime, nullable=False, default=utcnow)
    updated_at = db.Column(db.DateTime, nullable=False, default=utcnow, onupdate=utcnow)
    __table_args__ = (db.UniqueConstraint("user_id", "team_number", name="uq_team_user_number"),)

    def equipped_id(self, slot: str) -> Optional[int]:
        return getattr(self, SLOT_COLUMNS[slot])

    def equipped_ids(self) -> dict:
        """Mapping slot -> grant id (or None) for every slot."""
        return {slot: self.equipped_id(slot) for slot in SLOTS}

    def __repr__(self):
        return f"<Team {self.id} user={self.user_id} #{self.team_number}>"


@dataclass(frozen=True)
class Equipment:
    slot: str


@dataclass(frozen=True)
class Consumable:
    pass


ItemKind = Union[Equipment, Consumable]


class LootItem(db.Model):
    """Catalog of items that can drop from rifts (read-only at runtime).

    Attributes:
        rarity: common < uncommon < rare < epic < legendary
        world_type: world affinity; drop rolls only pick items matching the rift's world
        item_type: 'equipment' or 'consumable'
        equipment_slot: slot category for equipment, NULL for consumables
        elemental_affinity: element tag matched against a rift weakness ('none' = no element)
    """

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(120), nullable=False)
    description = db.Column(db.Text, nullable=False, default="")
    rarity = db.Column(db.String(20), nullable=False, default="common", index=True)
    world_type = db.Column(db.String(20), nullable=False, index=True)
    item_type = db.Column(db.String(20), nullable=False)
    equipment_slot = db.Column(db.String(20), nullable=True)
    speed_bonus = db.Column(db.Float, nullable=False, default=0.0)
    luck_bonus = db.Column(db.Float, nullable=False, default=0.0)
    power_bonus = db.Column(db.Integer, nullable=False, default=0)
    elemental_affinity = db.Column(db.String(20), nullable=False, default="none")
    power_value = db.Column(db.Integer, nullable=False, default=0)
    icon = db.Column(db.String(120), nullable=False, default="")

    @property
    def kind(self) -> ItemKind:
        if self.item_type == "equipment":
            return Equipment(slot=self.equipment_slot or "")
        return Consumable()

    def __repr__(self):
        return f"<LootItem {self.id} {self.name} {self.rarity}/{self.world_type}>"


class InventoryGrant(db.Model):
    """A user's ownership record of one catalog item.

    Equipment grants always have quantity 1 (one row per acquisition).
    Consumable grants are one row per (user, item) and accumulate quantity.
    """

    __tablename__ = "inventory_grant"
    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey("user.id"), nullable=False, index=True)
    loot_item_id = db.Column(db.Integer, db.ForeignKey("loot_item.id"), nullable=False)
    quantity = db.Column(db.Integer, nullable=False, default=1)
    acquired_at = db.Column(db.DateTime, nullable=False, default=utcnow)

    loot_item = db.relationship("LootItem", lazy="joined")

    def __repr__(self):
        return f"<InventoryGrant {self.id} user={self.user_id} item={self.loot_item_id} x{self.quantity}>"
