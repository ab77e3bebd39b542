"""Expedition loot generation.

For every drop table row of the rift:

  1. roll = rng.random() * 100; the tier drops only when roll < drop_rate_percent
  2. quantity = rng.randint(min, max) when max > min, otherwise min
  3. per unit: pick uniformly among catalog items of that rarity in the rift's
     world, grant it and append a one-unit ExpeditionLoot audit row

Tiers with no matching catalog item are skipped silently. The team's luck is
aggregated and reported in the outcome; it does not shift any roll.

Randomness comes from a module-level ``random.Random`` seeded once per process
(``PARALLAX_RNG_SEED`` when set, system entropy otherwise). Every roll accepts
an injected ``rng`` so tests can script outcomes.

Returned structure (LootOutcome):
  items  -> granted LootItems in grant order
  grants -> InventoryGrant rows touched (one per unit)
  rolls  -> [{"rarity", "rate", "roll", "dropped", "quantity", "granted"}, ...]
  luck   -> aggregated team luck at claim time
"""

from __future__ import annotations

import os
import random
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from parallax.logging_utils import get_logger
from parallax.repositories import catalog, expeditions, inventory
from parallax.services.game_core import aggregate_stats

log = get_logger(__name__)


def _initial_seed():
    raw = os.getenv("PARALLAX_RNG_SEED")
    if raw is None or not raw.strip():
        return None
    try:
        return int(raw)
    except ValueError:
        return raw


_rng = random.Random(_initial_seed())


def reseed(seed=None) -> random.Random:
    """Reseed the shared generator (None -> system entropy)."""
    _rng.seed(seed)
    return _rng


def get_rng() -> random.Random:
    return _rng


@dataclass
class LootOutcome:
    items: List[Any] = field(default_factory=list)
    grants: List[Any] = field(default_factory=list)
    rolls: List[Dict[str, Any]] = field(default_factory=list)
    luck: float = 0.0


def roll_quantity(min_quantity: int, max_quantity: int, rng) -> int:
    if max_quantity > min_quantity:
        return rng.randint(min_quantity, max_quantity)
    return min_quantity


def generate_loot(expedition, team, rift, rng: Optional[random.Random] = None,
                  equipped: Optional[Dict[str, Any]] = None) -> LootOutcome:
    """Roll the rift's drop table and grant the results to the expedition owner.

    Must run inside the caller's transaction; nothing is committed here.
    """
    rng = rng or _rng
    outcome = LootOutcome(luck=aggregate_stats(team, equipped).luck)
    for row in catalog.list_drop_table(rift.id):
        roll = rng.random() * 100.0
        dropped = roll < row.drop_rate_percent
        record = {
            "rarity": row.rarity,
            "rate": row.drop_rate_percent,
            "roll": round(roll, 4),
            "dropped": dropped,
            "quantity": 0,
            "granted": 0,
        }
        outcome.rolls.append(record)
        if not dropped:
            continue
        quantity = roll_quantity(row.min_quantity, row.max_quantity, rng)
        record["quantity"] = quantity
        for _ in range(quantity):
            candidates = catalog.list_loot_items_by_rarity_and_world(row.rarity, rift.world_type)
            if not candidates:
                continue
            item = rng.choice(candidates)
            grant = inventory.grant_item(expedition.user_id, item)
            expeditions.append_loot_record(expedition.id, item.id, 1)
            outcome.items.append(item)
            outcome.grants.append(grant)
            record["granted"] += 1
    log.info(
        event="loot_rolled",
        expedition_id=expedition.id,
        rift_id=rift.id,
        tiers=len(outcome.rolls),
        items=len(outcome.items),
        luck=outcome.luck,
    )
    return outcome


__all__ = ["LootOutcome", "generate_loot", "get_rng", "reseed", "roll_quantity"]
