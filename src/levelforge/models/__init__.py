"""Pydantic models for game content.

Hierarchy: a Game owns a graph of Worlds, a World owns a LevelStore of
GameLevels, and each GameLevel carries one InventoryInfo per InventoryKind.
Inventory documentation lives separately and is referenced by ItemKey.
"""

from levelforge.models.game import Game
from levelforge.models.ids import (
    InventoryKind,
    ItemKey,
    LevelRef,
    format_level_id,
    parse_level_id,
    validate_identifier,
)
from levelforge.models.inventory import InventoryDocEntry, InventoryInfo, InventoryTile
from levelforge.models.level import GameLevel, Hint
from levelforge.models.world import LevelStore, World

__all__ = [
    "Game",
    "GameLevel",
    "Hint",
    "InventoryDocEntry",
    "InventoryInfo",
    "InventoryKind",
    "InventoryTile",
    "ItemKey",
    "LevelRef",
    "LevelStore",
    "World",
    "format_level_id",
    "parse_level_id",
    "validate_identifier",
]
