"""Default catalog seeding: rifts, loot items and drop tables.

Seeding is idempotent. Rows are matched by name (rifts, loot items) or by
(rift, rarity) for drop table rows; existing rows are left untouched so
hand-tuned values survive a reseed.

Usage (programmatic):
    from parallax.seed_catalog import seed_catalog
    seed_catalog()

CLI:
    python run.py seed
"""

from __future__ import annotations

import json
from typing import Dict

from parallax import db
from parallax.logging_utils import get_logger
from parallax.models.models import ITEM_TYPES, RARITIES, SLOTS, GameConfig, LootItem
from parallax.models.rift import DIFFICULTIES, LootDropTable, Rift
from parallax.repositories import atomic
from parallax.services.settings import DEFAULTS

log = get_logger(__name__)

# name, world_type, difficulty, duration_minutes, weak_to_element, unlock text, icon, description
RIFTS = [
    ("Training Grounds", "tutorial", "tutorial", 5, "none", None, "rift-training.png",
     "A quiet pocket world where new teams learn the ropes."),
    ("Ember Wastes", "fire", "easy", 30, "water", None, "rift-ember.png",
     "Cinder plains under a sky that never stops burning."),
    ("Frostveil Expanse", "ice", "medium", 60, "fire", "Complete 5 expeditions", "rift-frost.png",
     "Glacial canyons where sound freezes mid-air."),
    ("Verdant Maw", "nature", "medium", 90, "fire", "Complete 5 expeditions", "rift-verdant.png",
     "An overgrown jungle that slowly rearranges itself."),
    ("Clockwork Spire", "tech", "hard", 120, "water", "Complete 15 expeditions", "rift-clockwork.png",
     "A tower of gears still executing orders from a dead empire."),
    ("Hollow Abyss", "void", "legendary", 240, "light", "Complete 30 expeditions", "rift-abyss.png",
     "The space between worlds. Few teams return unchanged."),
]

# rarity -> (drop_rate_percent, min_quantity, max_quantity) per difficulty
DROP_TABLES: Dict[str, Dict[str, tuple]] = {
    "tutorial": {"common": (100.0, 1, 2), "uncommon": (25.0, 1, 1)},
    "easy": {"common": (90.0, 1, 3), "uncommon": (35.0, 1, 2), "rare": (8.0, 1, 1)},
    "medium": {"common": (80.0, 2, 3), "uncommon": (50.0, 1, 2), "rare": (15.0, 1, 1), "epic": (3.0, 1, 1)},
    "hard": {"common": (70.0, 2, 4), "uncommon": (55.0, 1, 3), "rare": (25.0, 1, 2), "epic": (7.0, 1, 1),
             "legendary": (1.0, 1, 1)},
    "legendary": {"uncommon": (70.0, 2, 4), "rare": (40.0, 1, 2), "epic": (15.0, 1, 2), "legendary": (4.0, 1, 1)},
}

# name, rarity, world_type, item_type, slot, speed, luck, power, element, power_value, icon
LOOT_ITEMS = [
    ("Practice Blade", "common", "tutorial", "equipment", "weapon", 0.0, 0.0, 2, "none", 5, "practice-blade.png"),
    ("Padded Vest", "common", "tutorial", "equipment", "armor", 0.0, 0.0, 1, "none", 4, "padded-vest.png"),
    ("Trail Ration", "common", "tutorial", "consumable", None, 0.5, 0.0, 0, "none", 1, "trail-ration.png"),
    ("Lucky Pebble", "uncommon", "tutorial", "equipment", "accessory", 0.0, 2.0, 0, "none", 6, "lucky-pebble.png"),
    ("Cinder Axe", "common", "fire", "equipment", "weapon", 0.0, 0.0, 4, "fire", 8, "cinder-axe.png"),
    ("Ashcloth Wrap", "common", "fire", "equipment", "armor", 1.0, 0.0, 2, "none", 6, "ashcloth-wrap.png"),
    ("Ember Draught", "common", "fire", "consumable", None, 0.0, 0.0, 1, "none", 2, "ember-draught.png"),
    ("Salamander Boots", "uncommon", "fire", "equipment", "accessory", 5.0, 0.0, 0, "fire", 12, "salamander-boots.png"),
    ("Phoenix Feather", "rare", "fire", "equipment", "relic", 0.0, 3.0, 5, "fire", 25, "phoenix-feather.png"),
    ("Glacier Spear", "common", "ice", "equipment", "weapon", 0.0, 0.0, 5, "water", 9, "glacier-spear.png"),
    ("Rime Plate", "uncommon", "ice", "equipment", "armor", -2.0, 0.0, 6, "none", 14, "rime-plate.png"),
    ("Frost Tonic", "common", "ice", "consumable", None, 1.0, 0.0, 0, "none", 2, "frost-tonic.png"),
    ("Tidecaller Shell", "rare", "ice", "equipment", "relic", 0.0, 2.0, 4, "water", 24, "tidecaller-shell.png"),
    ("Aurora Lens", "epic", "ice", "equipment", "artifact", 4.0, 4.0, 4, "light", 40, "aurora-lens.png"),
    ("Thornwhip", "common", "nature", "equipment", "weapon", 1.0, 0.0, 3, "earth", 7, "thornwhip.png"),
    ("Barkskin Mantle", "uncommon", "nature", "equipment", "armor", 0.0, 1.0, 4, "earth", 12, "barkskin-mantle.png"),
    ("Sap of Vigor", "common", "nature", "consumable", None, 0.0, 0.5, 1, "none", 2, "sap-of-vigor.png"),
    ("Seed of Ages", "rare", "nature", "consumable", None, 2.0, 2.0, 2, "none", 18, "seed-of-ages.png"),
    ("Galeleaf Charm", "epic", "nature", "equipment", "relic", 6.0, 2.0, 3, "wind", 42, "galeleaf-charm.png"),
    ("Rivet Pistol", "common", "tech", "equipment", "weapon", 0.0, 0.0, 5, "none", 9, "rivet-pistol.png"),
    ("Servo Harness", "uncommon", "tech", "equipment", "armor", 3.0, 0.0, 3, "none", 13, "servo-harness.png"),
    ("Overclock Cell", "uncommon", "tech", "consumable", None, 2.0, 0.0, 0, "none", 8, "overclock-cell.png"),
    ("Chrono Gear", "rare", "tech", "equipment", "artifact", 8.0, 0.0, 0, "none", 28, "chrono-gear.png"),
    ("Stormcore", "epic", "tech", "equipment", "relic", 2.0, 0.0, 8, "wind", 44, "stormcore.png"),
    ("Singularity Engine", "legendary", "tech", "equipment", "artifact", 10.0, 5.0, 10, "none", 90,
     "singularity-engine.png"),
    ("Null Shard", "uncommon", "void", "consumable", None, 0.0, 1.0, 2, "none", 9, "null-shard.png"),
    ("Voidglass Dagger", "rare", "void", "equipment", "weapon", 3.0, 0.0, 9, "void", 30, "voidglass-dagger.png"),
    ("Umbral Shroud", "epic", "void", "equipment", "armor", 5.0, 3.0, 8, "void", 48, "umbral-shroud.png"),
    ("Dawnstar Relic", "legendary", "void", "equipment", "relic", 5.0, 8.0, 12, "light", 100, "dawnstar-relic.png"),
]


def validate_catalog(rifts=None, items=None, drop_tables=None) -> None:
    """Raise ValueError on a catalog row the models would not make sense of."""
    rifts = RIFTS if rifts is None else rifts
    items = LOOT_ITEMS if items is None else items
    drop_tables = DROP_TABLES if drop_tables is None else drop_tables
    for name, _world, difficulty, minutes, *_ in rifts:
        if difficulty not in DIFFICULTIES:
            raise ValueError(f"rift {name!r}: unknown difficulty {difficulty!r}")
        if minutes <= 0:
            raise ValueError(f"rift {name!r}: duration must be positive")
    for difficulty, table in drop_tables.items():
        for rarity, (rate, lo, hi) in table.items():
            if rarity not in RARITIES or not 0.0 <= rate <= 100.0 or not 1 <= lo <= hi:
                raise ValueError(f"drop table {difficulty}/{rarity}: bad row {(rate, lo, hi)!r}")
    for name, rarity, _world, item_type, slot, *_ in items:
        if rarity not in RARITIES:
            raise ValueError(f"item {name!r}: unknown rarity {rarity!r}")
        if item_type not in ITEM_TYPES:
            raise ValueError(f"item {name!r}: unknown item type {item_type!r}")
        if (item_type == "equipment") != (slot in SLOTS):
            raise ValueError(f"item {name!r}: slot {slot!r} does not fit {item_type}")


def _seed_rifts() -> int:
    created = 0
    for name, world, difficulty, minutes, weakness, unlock_text, icon, description in RIFTS:
        rift = Rift.query.filter_by(name=name).first()
        if rift is None:
            rift = Rift(
                name=name,
                description=description,
                world_type=world,
                duration_minutes=minutes,
                difficulty=difficulty,
                weak_to_element=weakness,
                unlock_requirement_text=unlock_text,
                icon=icon,
            )
            db.session.add(rift)
            db.session.flush()
            created += 1
        existing = {row.rarity for row in LootDropTable.query.filter_by(rift_id=rift.id)}
        for rarity, (rate, lo, hi) in DROP_TABLES.get(difficulty, {}).items():
            if rarity in existing:
                continue
            db.session.add(
                LootDropTable(rift_id=rift.id, rarity=rarity, drop_rate_percent=rate, min_quantity=lo, max_quantity=hi)
            )
    return created


def _seed_items() -> int:
    created = 0
    known = {name for (name,) in LootItem.query.with_entities(LootItem.name)}
    for name, rarity, world, item_type, slot, speed, luck, power, element, value, icon in LOOT_ITEMS:
        if name in known:
            continue
        db.session.add(
            LootItem(
                name=name,
                description="",
                rarity=rarity,
                world_type=world,
                item_type=item_type,
                equipment_slot=slot,
                speed_bonus=speed,
                luck_bonus=luck,
                power_bonus=power,
                elemental_affinity=element,
                power_value=value,
                icon=icon,
            )
        )
        created += 1
    return created


def seed_catalog() -> Dict[str, int]:
    """Insert any missing default rifts, drop table rows and loot items."""
    validate_catalog()
    with atomic():
        rifts = _seed_rifts()
        items = _seed_items()
    if rifts or items:
        log.info(event="catalog_seeded", rifts=rifts, items=items)
    return {"rifts": rifts, "items": items}


def seed_game_config() -> int:
    """Write default tunables for keys that have no row yet."""
    written = 0
    for key, value in DEFAULTS.items():
        if GameConfig.get(key) is None:
            GameConfig.set(key, json.dumps(value))
            written += 1
    return written
