"""Pydantic model for games: a directed acyclic graph of worlds."""

from __future__ import annotations

from typing import TYPE_CHECKING

from pydantic import BaseModel, Field

from levelforge.graph.graph import ContentGraph
from levelforge.models.world import World

if TYPE_CHECKING:
    from levelforge.models.level import GameLevel


class Game(BaseModel):
    """Top-level content unit.

    Attributes:
        worlds: World graph. An edge ``A -> B`` means world B is unlocked
            after world A. The graph must be acyclic; a world may have any
            number of prerequisite worlds.
    """

    id: str = Field(min_length=1)
    title: str = ""
    introduction: str = ""
    info: str = ""
    conclusion: str = ""
    worlds: ContentGraph[World] = Field(default_factory=ContentGraph)

    def find_world(self, world_id: str) -> World | None:
        return self.worlds.find_node(world_id)

    def find_level(self, world_id: str, index: int) -> GameLevel | None:
        world = self.worlds.find_node(world_id)
        if world is None:
            return None
        return world.levels.get(index)

    def world_size(self) -> dict[str, int]:
        """Number of levels per world, in world insertion order."""
        return {world_id: world.level_count for world_id, world in self.worlds.nodes()}

    def merge(self, incoming: Game) -> Game:
        """Merge a game built by another unit into this one.

        Scalar fields take the incoming value (incoming wins). World graphs
        merge structurally: colliding worlds merge with ``World.merge``,
        existing edges keep their order and new edges are appended.

        Returns:
            New merged game; neither input is modified.
        """
        merged_worlds = self.worlds.merge(incoming.worlds, World.merge)
        return incoming.model_copy(update={"worlds": merged_worlds})
