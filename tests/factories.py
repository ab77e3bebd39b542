"""Test data factories to reduce boilerplate in tests.

Usage examples:
    from tests.factories import create_player, create_rift, create_item, give_item

    def test_something():
        user = create_player('alice')
        rift = create_rift(world_type='fire', drops=[('common', 100.0, 1, 1)])
        sword = create_item('Sword', slot='weapon', power=3, world_type='fire')
        grant = give_item(user, sword)
"""

from __future__ import annotations

from datetime import datetime, timedelta
from typing import Iterable, Optional, Tuple

from parallax import db
from parallax.models.expedition import Expedition
from parallax.models.models import InventoryGrant, LootItem, Team, User, utcnow
from parallax.models.rift import LootDropTable, Rift
from parallax.services.player_service import register_player


def create_player(username: str, email: Optional[str] = None) -> User:
    user = User.query.filter_by(username=username).first()
    if user:
        return user
    return register_player(username, email=email)


def team(user: User, number: int = 1) -> Team:
    return Team.query.filter_by(user_id=user.id, team_number=number).one()


def create_rift(
    name: str = "Test Rift",
    world_type: str = "fire",
    duration_minutes: int = 60,
    difficulty: str = "easy",
    weak_to_element: str = "none",
    drops: Iterable[Tuple[str, float, int, int]] = (),
) -> Rift:
    rift = Rift(
        name=name,
        description="",
        world_type=world_type,
        duration_minutes=duration_minutes,
        difficulty=difficulty,
        weak_to_element=weak_to_element,
        icon="",
    )
    db.session.add(rift)
    db.session.flush()
    for rarity, rate, lo, hi in drops:
        db.session.add(
            LootDropTable(rift_id=rift.id, rarity=rarity, drop_rate_percent=rate, min_quantity=lo, max_quantity=hi)
        )
    db.session.commit()
    return rift


def create_item(
    name: str,
    slot: Optional[str] = None,
    rarity: str = "common",
    world_type: str = "fire",
    speed: float = 0.0,
    luck: float = 0.0,
    power: int = 0,
    element: str = "none",
) -> LootItem:
    """Equipment when ``slot`` is given, otherwise a consumable."""
    item = LootItem(
        name=name,
        description="",
        rarity=rarity,
        world_type=world_type,
        item_type="equipment" if slot else "consumable",
        equipment_slot=slot,
        speed_bonus=speed,
        luck_bonus=luck,
        power_bonus=power,
        elemental_affinity=element,
        power_value=0,
        icon="",
    )
    db.session.add(item)
    db.session.commit()
    return item


def give_item(user: User, item: LootItem, quantity: int = 1) -> InventoryGrant:
    grant = InventoryGrant(user_id=user.id, loot_item_id=item.id, quantity=quantity, acquired_at=utcnow())
    db.session.add(grant)
    db.session.commit()
    return grant


def create_expedition(user: User, team_row: Team, rift: Rift, duration_minutes: int = 60,
                      started_minutes_ago: int = 0, completed: bool = False, claimed: bool = False,
                      start_time: Optional[datetime] = None) -> Expedition:
    exp = Expedition(
        user_id=user.id,
        team_id=team_row.id,
        rift_id=rift.id,
        start_time=start_time or (utcnow() - timedelta(minutes=started_minutes_ago)),
        duration_minutes=duration_minutes,
        completed=completed,
        processed=completed,
        claimed=claimed,
    )
    db.session.add(exp)
    db.session.commit()
    return exp


class ScriptedRng:
    """Deterministic stand-in for random.Random.

    ``rolls`` feed random(); ``ints`` feed randint(); choice() picks ``pick``
    index (clamped) from the candidates.
    """

    def __init__(self, rolls=(), ints=(), pick: int = 0):
        self.rolls = list(rolls)
        self.ints = list(ints)
        self.pick = pick
        self.randint_calls = []

    def random(self):
        return self.rolls.pop(0) if self.rolls else 0.0

    def randint(self, a, b):
        self.randint_calls.append((a, b))
        return self.ints.pop(0) if self.ints else a

    def choice(self, seq):
        return seq[min(self.pick, len(seq) - 1)]


def login(client, user: User):
    """Populate the session key Flask-Login reads; `_user_id` is the canonical key."""
    with client.session_transaction() as sess:
        sess["_user_id"] = str(user.id)
    return client
