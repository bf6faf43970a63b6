"""Pydantic models for inventory items and per-level inventory deltas."""

from __future__ import annotations

from typing import Annotated, Any

from pydantic import BaseModel, ConfigDict, Field, StringConstraints, model_validator

from levelforge.models.ids import InventoryKind, ItemKey, LevelRef

Identifier = Annotated[str, StringConstraints(min_length=1, strip_whitespace=True)]


class InventoryDocEntry(BaseModel):
    """Documentation of one inventory item. Immutable once registered."""

    model_config = ConfigDict(frozen=True)

    name: Identifier
    kind: InventoryKind
    display_name: str = Field(default="", description="Defaults to the item name")
    category: str = ""
    content: str = Field(default="", description="Markdown description")
    statement: str | None = Field(default=None, description="Formal statement, for lemmas")

    @model_validator(mode="before")
    @classmethod
    def _default_display_name(cls, data: Any) -> Any:
        if isinstance(data, dict) and not data.get("display_name"):
            data = {**data, "display_name": data.get("name", "")}
        return data

    @property
    def key(self) -> ItemKey:
        return ItemKey(self.name, self.kind)


class InventoryTile(BaseModel):
    """Resolved availability of one item at one level."""

    name: str
    kind: InventoryKind
    display_name: str
    category: str = ""
    locked: bool = True
    disabled: bool = False
    new: bool = False
    introduced_at: LevelRef | None = None


class InventoryInfo(BaseModel):
    """Inventory delta of one kind at one level.

    Attributes:
        new: Identifiers introduced at this level.
        disabled: Identifiers hidden at this level only.
        only: If non-empty, the exclusive allow-list at this level.
        computed: Resolver output; empty until the level is resolved.
    """

    new: list[Identifier] = Field(default_factory=list)
    disabled: list[Identifier] = Field(default_factory=list)
    only: list[Identifier] = Field(default_factory=list)
    computed: list[InventoryTile] = Field(default_factory=list)

    def referenced(self) -> set[str]:
        """All identifiers this delta mentions."""
        return set(self.new) | set(self.disabled) | set(self.only)
