"""Inventory resolution: what can the player use at a given level?

Availability of a capability at a level is the fold of the inventory deltas
of every level that leads there:

1. The level sequence is every level of every ancestor world of the
   target's world (worlds in topological order, insertion order breaking
   ties; levels by ascending index), then the target world's levels up to
   and including the target. Converging paths contribute each ancestor
   world once.
2. ``new`` identifiers accumulate into the unlocked set, remembering the
   level that introduced each one first. A level's ``statement_name``
   becomes an unlocked lemma for every later level.
3. ``disabled`` and ``only`` apply to the target level alone. A non-empty
   ``only`` list makes the visible set exactly ``unlocked & only``;
   otherwise the visible set is ``unlocked - disabled``. Neither affects
   what later levels see.

Resolution reads a finished game and never modifies it.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from typing import TYPE_CHECKING, Literal

from levelforge.build.errors import LevelNotFoundError, WorldNotFoundError
from levelforge.graph.algorithms import ancestors, topological_order
from levelforge.models.ids import InventoryKind, ItemKey, LevelRef, format_level_id
from levelforge.models.inventory import InventoryTile
from levelforge.observability.logging import get_logger

if TYPE_CHECKING:
    from levelforge.build.docs import InventoryDocRegistry
    from levelforge.models.game import Game
    from levelforge.models.level import GameLevel

log = get_logger(__name__)


@dataclass(frozen=True)
class UsageViolation:
    """An item a submitted proof used but may not use at its level.

    Attributes:
        reason: "locked" (introduced later), "disabled" (unlocked but not
            allowed here) or "unknown" (never introduced in this game).
    """

    name: str
    kind: InventoryKind
    reason: Literal["locked", "disabled", "unknown"]


class InventoryResolver:
    """Resolves per-level inventories of one finished game.

    The world order is computed once; the game must not change while a
    resolver is in use.

    Raises:
        CycleError: On construction, if the world graph has a cycle.
    """

    def __init__(
        self,
        game: Game,
        docs: InventoryDocRegistry | None = None,
        *,
        include_locked: bool = False,
    ) -> None:
        self.game = game
        self.docs = docs
        self.include_locked = include_locked
        self._world_order = topological_order(game.worlds)

    # -------------------------------------------------------------------------
    # Level sequence
    # -------------------------------------------------------------------------

    def _require_level(self, world_id: str, index: int) -> GameLevel:
        world = self.game.worlds.find_node(world_id)
        if world is None:
            raise WorldNotFoundError(
                world_id,
                available=self.game.worlds.node_ids(),
                context="inventory resolution",
                game_id=self.game.id,
            )
        level = world.levels.get(index)
        if level is None:
            raise LevelNotFoundError(self.game.id, world_id, index, world.levels.indices())
        return level

    def level_sequence(self, world_id: str, index: int) -> list[tuple[LevelRef, GameLevel]]:
        """Levels whose deltas reach level *index* of *world_id*, in fold order.

        Raises:
            WorldNotFoundError: If the world is not in the game.
            LevelNotFoundError: If the world has no level at *index*.
        """
        self._require_level(world_id, index)
        upstream = ancestors(self.game.worlds, world_id)

        sequence: list[tuple[LevelRef, GameLevel]] = []
        for wid in self._world_order:
            if wid not in upstream:
                continue
            store = self.game.worlds.get_node(wid).levels
            sequence.extend((LevelRef(wid, i), store.root[i]) for i in store.indices())

        store = self.game.worlds.get_node(world_id).levels
        sequence.extend(
            (LevelRef(world_id, i), store.root[i]) for i in store.indices() if i <= index
        )
        return sequence

    # -------------------------------------------------------------------------
    # Folding
    # -------------------------------------------------------------------------

    @staticmethod
    def _fold(
        sequence: list[tuple[LevelRef, GameLevel]],
        kind: InventoryKind,
    ) -> dict[str, LevelRef]:
        """Unlocked identifiers mapped to the level introducing them first."""
        unlocked: dict[str, LevelRef] = {}
        last = len(sequence) - 1
        for position, (ref, level) in enumerate(sequence):
            for name in level.inventory(kind).new:
                unlocked.setdefault(name, ref)
            # A proven exercise is usable from the next level on
            if kind is InventoryKind.LEMMA and level.statement_name and position < last:
                unlocked.setdefault(level.statement_name, ref)
        return unlocked

    def _introduced_anywhere(self, kind: InventoryKind) -> dict[str, LevelRef]:
        """Every identifier the game introduces, in game traversal order."""
        introduced: dict[str, LevelRef] = {}
        for wid in self._world_order:
            store = self.game.worlds.get_node(wid).levels
            for i in store.indices():
                level = store.root[i]
                for name in level.inventory(kind).new:
                    introduced.setdefault(name, LevelRef(wid, i))
                if kind is InventoryKind.LEMMA and level.statement_name:
                    introduced.setdefault(level.statement_name, LevelRef(wid, i))
        return introduced

    def _tile(self, name: str, kind: InventoryKind, **flags: object) -> InventoryTile:
        doc = self.docs.get(name, kind) if self.docs is not None else None
        return InventoryTile(
            name=name,
            kind=kind,
            display_name=doc.display_name if doc else name,
            category=doc.category if doc else "",
            **flags,  # type: ignore[arg-type]
        )

    def _resolve_sequence(
        self,
        sequence: list[tuple[LevelRef, GameLevel]],
        kind: InventoryKind,
        include_locked: bool,
    ) -> list[InventoryTile]:
        target_ref, target = sequence[-1]
        unlocked = self._fold(sequence, kind)

        info = target.inventory(kind)
        if info.only:
            allowed = set(info.only)
            disabled = {name for name in unlocked if name not in allowed}
        else:
            # Disabling an item that is not unlocked yet is a no-op
            disabled = set(info.disabled) & unlocked.keys()

        tiles = [
            self._tile(
                name,
                kind,
                locked=False,
                disabled=name in disabled,
                new=ref == target_ref,
                introduced_at=ref,
            )
            for name, ref in unlocked.items()
        ]

        if include_locked:
            for name, ref in self._introduced_anywhere(kind).items():
                if name not in unlocked:
                    tiles.append(self._tile(name, kind, locked=True, introduced_at=ref))

        log.debug(
            "inventory_resolved",
            level_id=format_level_id(self.game.id, target_ref.world_id, target_ref.index),
            kind=str(kind),
            unlocked=len(unlocked),
            disabled=len(disabled),
        )
        return tiles

    # -------------------------------------------------------------------------
    # Public API
    # -------------------------------------------------------------------------

    def resolve(
        self,
        world_id: str,
        index: int,
        kind: InventoryKind,
        *,
        include_locked: bool | None = None,
    ) -> list[InventoryTile]:
        """Resolve the inventory of one kind at one level.

        Returns:
            One tile per unlocked item in unlock order (``locked=False``),
            followed by locked tiles for items introduced later when
            *include_locked* is on.
        """
        if include_locked is None:
            include_locked = self.include_locked
        sequence = self.level_sequence(world_id, index)
        return self._resolve_sequence(sequence, InventoryKind(kind), include_locked)

    def resolve_level(self, world_id: str, index: int) -> GameLevel:
        """Copy of the level with ``computed`` filled for every kind."""
        sequence = self.level_sequence(world_id, index)
        level = sequence[-1][1]
        for kind in InventoryKind:
            info = level.inventory(kind).model_copy(
                update={"computed": self._resolve_sequence(sequence, kind, self.include_locked)}
            )
            level = level.with_inventory(kind, info)
        return level

    def resolve_game(self) -> Game:
        """Copy of the game with every level resolved."""
        resolved = self.game.model_copy(deep=True)
        for world_id, world in resolved.worlds.nodes():
            for index in world.levels.indices():
                world.levels.insert(index, self.resolve_level(world_id, index))
        log.info("game_resolved", game=self.game.id, worlds=len(resolved.worlds))
        return resolved

    def available(self, world_id: str, index: int) -> set[ItemKey]:
        """Items visible at a level across all kinds."""
        sequence = self.level_sequence(world_id, index)
        return {
            ItemKey(tile.name, tile.kind)
            for kind in InventoryKind
            for tile in self._resolve_sequence(sequence, kind, include_locked=False)
            if not tile.disabled
        }

    def check_usage(
        self,
        world_id: str,
        index: int,
        used: Iterable[ItemKey | tuple[str, InventoryKind]],
    ) -> list[UsageViolation]:
        """Report used items that are not available at a level.

        Consumed alongside proof checking to reject proofs relying on
        capabilities the player has not unlocked or may not use here.
        """
        sequence = self.level_sequence(world_id, index)
        tiles: dict[ItemKey, InventoryTile] = {}
        for kind in InventoryKind:
            for tile in self._resolve_sequence(sequence, kind, include_locked=True):
                tiles[ItemKey(tile.name, tile.kind)] = tile

        violations: list[UsageViolation] = []
        for name, kind in used:
            key = ItemKey(name, InventoryKind(kind))
            tile = tiles.get(key)
            if tile is None:
                violations.append(UsageViolation(key.name, key.kind, "unknown"))
            elif tile.locked:
                violations.append(UsageViolation(key.name, key.kind, "locked"))
            elif tile.disabled:
                violations.append(UsageViolation(key.name, key.kind, "disabled"))
        return violations


def resolve_inventory(
    game: Game,
    world_id: str,
    index: int,
    kind: InventoryKind,
    *,
    docs: InventoryDocRegistry | None = None,
    include_locked: bool = False,
) -> list[InventoryTile]:
    """Resolve one level's inventory of one kind (see InventoryResolver)."""
    return InventoryResolver(game, docs, include_locked=include_locked).resolve(
        world_id, index, kind
    )
