# Model package init
from .expedition import Expedition, ExpeditionLoot  # noqa: F401 re-export
from .models import (  # noqa: F401 re-export
    RARITIES,
    SLOTS,
    Consumable,
    Equipment,
    GameConfig,
    InventoryGrant,
    LootItem,
    Team,
    User,
)
from .rift import LootDropTable, Rift  # noqa: F401 re-export

__all__ = [
    "Consumable",
    "Equipment",
    "Expedition",
    "ExpeditionLoot",
    "GameConfig",
    "InventoryGrant",
    "LootDropTable",
    "LootItem",
    "RARITIES",
    "Rift",
    "SLOTS",
    "Team",
    "User",
]
