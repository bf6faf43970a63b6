"""Stable identifiers for games, worlds, levels and inventory items.

Games and worlds are named by plain string identifiers. Levels are named by
their position, and scoped level IDs join the three parts with ``::``
(e.g. ``TestGame::Proposition::11``) for diagnostics and CLI arguments.
Inventory items are keyed by ``(name, kind)``: the same name may exist as
both a tactic and a lemma.
"""

from __future__ import annotations

from enum import StrEnum
from typing import NamedTuple

SCOPE_SEPARATOR = "::"


class InventoryKind(StrEnum):
    """Kind of capability a player can unlock."""

    TACTIC = "tactic"
    LEMMA = "lemma"
    DEFINITION = "definition"


class ItemKey(NamedTuple):
    """Map key of an inventory item."""

    name: str
    kind: InventoryKind


class LevelRef(NamedTuple):
    """Position of a level inside a game."""

    world_id: str
    index: int

    def __str__(self) -> str:
        return f"{self.world_id}{SCOPE_SEPARATOR}{self.index}"


def validate_identifier(raw: str, what: str = "identifier") -> str:
    """Check that *raw* can be used as a game, world or item identifier.

    Identifiers are non-empty, contain no whitespace and no ``::`` separator.
    Dotted names such as ``Nat.add_comm`` are allowed.

    Returns:
        The identifier unchanged.

    Raises:
        ValueError: If the identifier is malformed.
    """
    if not raw:
        raise ValueError(f"{what} must not be empty")
    if any(ch.isspace() for ch in raw):
        raise ValueError(f"{what} must not contain whitespace, got {raw!r}")
    if SCOPE_SEPARATOR in raw:
        raise ValueError(f"{what} must not contain '{SCOPE_SEPARATOR}', got {raw!r}")
    return raw


def format_level_id(game_id: str, world_id: str, index: int) -> str:
    """Format a fully scoped level ID.

    Examples:
        >>> format_level_id("TestGame", "Proposition", 11)
        'TestGame::Proposition::11'
    """
    return SCOPE_SEPARATOR.join((game_id, world_id, str(index)))


def parse_level_id(scoped_id: str) -> tuple[str, str, int]:
    """Parse ``game::world::index`` into its parts.

    Raises:
        ValueError: If the ID does not have three parts or the index is not
            a non-negative integer.

    Examples:
        >>> parse_level_id("TestGame::Proposition::11")
        ('TestGame', 'Proposition', 11)
    """
    parts = scoped_id.split(SCOPE_SEPARATOR)
    if len(parts) != 3:
        raise ValueError(f"Expected 'game::world::index', got {scoped_id!r}")
    game_id, world_id, raw_index = parts
    try:
        index = int(raw_index)
    except ValueError:
        raise ValueError(f"Level index must be an integer, got {raw_index!r}") from None
    if index < 0:
        raise ValueError(f"Level index must be >= 0, got {index}")
    return game_id, world_id, index
