"""Pydantic models for levels and hints."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field

from levelforge.models.ids import InventoryKind
from levelforge.models.inventory import InventoryInfo


class Hint(BaseModel):
    """Hint bound to an abstract goal-state pattern.

    Both the pattern and the message template are opaque: the store keeps
    them and forwards them to the proof checker and UI, never interprets them.
    """

    goal: str = Field(description="Goal-state pattern the hint is shown for")
    text: str = Field(description="Message template")
    args: dict[str, Any] = Field(default_factory=dict, description="Template substitutions")
    hidden: bool = False
    strict: bool = False


class GameLevel(BaseModel):
    """One exercise of a world.

    Attributes:
        index: Position within the world, starting at 0.
        statement_name: Name of the exercise proven here. Once proven it is
            available as a lemma in every later level.
        tactics, lemmas, definitions: Inventory delta per kind.
    """

    index: int = Field(ge=0)
    title: str = ""
    introduction: str = ""
    conclusion: str = ""
    goal: str = ""
    statement_name: str | None = None
    hints: list[Hint] = Field(default_factory=list)
    tactics: InventoryInfo = Field(default_factory=InventoryInfo)
    lemmas: InventoryInfo = Field(default_factory=InventoryInfo)
    definitions: InventoryInfo = Field(default_factory=InventoryInfo)

    def inventory(self, kind: InventoryKind) -> InventoryInfo:
        """Inventory delta for *kind*."""
        info: InventoryInfo = getattr(self, _INVENTORY_FIELDS[InventoryKind(kind)])
        return info

    def with_inventory(self, kind: InventoryKind, info: InventoryInfo) -> GameLevel:
        """Copy of this level with the delta for *kind* replaced."""
        return self.model_copy(update={_INVENTORY_FIELDS[InventoryKind(kind)]: info})


_INVENTORY_FIELDS = {
    InventoryKind.TACTIC: "tactics",
    InventoryKind.LEMMA: "lemmas",
    InventoryKind.DEFINITION: "definitions",
}
