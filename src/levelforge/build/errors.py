"""Error types raised while building and querying game content.

Three families, none of them retried or recovered locally:

- Context errors: the authoring cursor is missing a required layer, or
  its layers form an impossible combination.
- Lookup misses: a referenced game, world or level is not registered.
  These subclass ``LookupError`` and carry the missing identifier.
- Build-unit errors: documentation collisions, failed validation and
  unreadable manifests or config files.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from levelforge.graph.errors import NodeNotFoundError

if TYPE_CHECKING:
    from pathlib import Path

    from levelforge.graph.validation import ValidationReport
    from levelforge.models.ids import InventoryKind


class ContextError(RuntimeError):
    """Base class for authoring-cursor errors."""


@dataclass
class ContextNotSetError(ContextError):
    """Raised when a getter needs a cursor layer that is not set.

    Attributes:
        layer: The missing layer ("game", "world" or "level").
    """

    layer: str

    def __post_init__(self) -> None:
        super().__init__(f"Current {self.layer} is not set")


@dataclass
class InvalidLayerError(ContextError):
    """Raised when the cursor's layers form an impossible combination.

    A level without a world, or a world without a game, means setters were
    called out of order. This is a programming error.
    """

    game_id: str | None
    world_id: str | None
    level_index: int | None

    def __post_init__(self) -> None:
        super().__init__(
            "Invalid layer: "
            f"game={self.game_id!r}, world={self.world_id!r}, level={self.level_index!r}"
        )


@dataclass
class GameNotFoundError(LookupError):
    """Raised when a game is not registered."""

    game_id: str
    available: list[str] = field(default_factory=list)

    def __post_init__(self) -> None:
        super().__init__(f"Game '{self.game_id}' not found")


@dataclass
class WorldNotFoundError(NodeNotFoundError):
    """Raised when a world is not part of a game's world graph."""

    game_id: str = ""

    def _format_message(self) -> str:
        return f"World '{self.node_id}' not found in game '{self.game_id}'"

    @property
    def world_id(self) -> str:
        return self.node_id


@dataclass
class LevelNotFoundError(LookupError):
    """Raised when a world has no level at the requested index."""

    game_id: str
    world_id: str
    index: int
    available: list[int] = field(default_factory=list)

    def __post_init__(self) -> None:
        super().__init__(self._message())

    def _message(self) -> str:
        return f"Level {self.index} not found in world '{self.world_id}' of game '{self.game_id}'"


@dataclass
class DocumentationExistsError(Exception):
    """Raised when documenting an inventory item twice."""

    name: str
    kind: InventoryKind

    def __post_init__(self) -> None:
        super().__init__(f"{self.kind} '{self.name}' is already documented")


@dataclass
class GameValidationError(Exception):
    """Raised by ``BuildContext.finalize`` when a game fails validation."""

    game_id: str
    report: ValidationReport

    def __post_init__(self) -> None:
        super().__init__(f"Game '{self.game_id}' failed validation: {self.report.summary}")

    def __str__(self) -> str:
        lines = [f"Game '{self.game_id}' failed validation:"]
        for check in self.report.failures[:5]:
            lines.append(f"  - {check.name}: {check.message}")
        return "\n".join(lines)


class ContentLoadError(Exception):
    """Raised when a content manifest cannot be loaded."""

    def __init__(self, path: Path, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Failed to load content manifest at {path}: {reason}")
