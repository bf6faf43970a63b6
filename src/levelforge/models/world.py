"""Pydantic models for worlds and their level stores."""

from __future__ import annotations

from pydantic import BaseModel, Field, RootModel

from levelforge.models.level import GameLevel


class LevelStore(RootModel[dict[int, GameLevel]]):
    """Levels of one world keyed by index.

    Gaps are allowed. Storage order is irrelevant; ``in_order()`` is the
    only order levels are presented in.
    """

    root: dict[int, GameLevel] = Field(default_factory=dict)

    def insert(self, index: int, level: GameLevel) -> None:
        """Store *level* at *index*, replacing any earlier level there."""
        self.root[index] = level

    def get(self, index: int) -> GameLevel | None:
        return self.root.get(index)

    def indices(self) -> list[int]:
        """Level indices in ascending order."""
        return sorted(self.root)

    def in_order(self) -> list[GameLevel]:
        """Levels in ascending index order."""
        return [self.root[i] for i in sorted(self.root)]

    def up_to(self, index: int) -> list[GameLevel]:
        """Levels with index <= *index*, ascending."""
        return [self.root[i] for i in sorted(self.root) if i <= index]

    def merge(self, incoming: LevelStore) -> LevelStore:
        """New store where incoming levels replace existing ones by index."""
        return LevelStore({**self.root, **incoming.root})

    def __contains__(self, index: object) -> bool:
        return index in self.root

    def __len__(self) -> int:
        return len(self.root)


class World(BaseModel):
    """A named collection of levels; one node of a game's world graph."""

    id: str = Field(min_length=1)
    title: str = ""
    introduction: str = ""
    levels: LevelStore = Field(default_factory=LevelStore)

    @property
    def level_count(self) -> int:
        return len(self.levels)

    def merge(self, incoming: World) -> World:
        """Merge a world built by another unit into this one.

        Scalar fields take the incoming value. Levels merge by index with
        whole-level replacement.
        """
        return incoming.model_copy(update={"levels": self.levels.merge(incoming.levels)})
