"""Authoring cursor and the build context that owns all build state.

Content is registered bottom-up while a cursor tracks where new entities
attach: the current game, world inside it, and level inside that world.
The cursor is a strict three-layer stack set in order game -> world -> level.

``BuildContext`` owns the GameRegistry, the cursor, the inventory
documentation registry and the build configuration. It is passed
explicitly to authoring code; there is no process-wide instance.

The ``modify_cur_*`` methods are the only way to change an entity after it
is registered. Each one fetches the addressed entity (or fails), applies
the mutation to a copy, and writes the result back through the owning
collection so parents always hold the latest child.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from enum import StrEnum

from levelforge.build.docs import InventoryDocRegistry
from levelforge.build.errors import (
    ContextNotSetError,
    GameValidationError,
    InvalidLayerError,
    LevelNotFoundError,
    WorldNotFoundError,
)
from levelforge.build.registry import GameRegistry
from levelforge.config import BuildConfig
from levelforge.graph.validation import ValidationReport, validate_game
from levelforge.models.game import Game
from levelforge.models.ids import InventoryKind, format_level_id
from levelforge.models.inventory import InventoryDocEntry
from levelforge.models.level import GameLevel
from levelforge.models.world import LevelStore, World
from levelforge.observability.logging import get_logger

log = get_logger(__name__)


class Layer(StrEnum):
    """Deepest layer the cursor currently addresses."""

    GAME = "game"
    WORLD = "world"
    LEVEL = "level"


@dataclass
class CurrentContext:
    """Cursor over the content being authored.

    Setters simply assign. Getters fail with ContextNotSetError when the
    requested layer, or a layer above it, is missing.
    """

    game_id: str | None = None
    world_id: str | None = None
    level_index: int | None = None

    def set_game(self, game_id: str) -> None:
        self.game_id = game_id

    def set_world(self, world_id: str) -> None:
        self.world_id = world_id

    def set_level(self, index: int) -> None:
        self.level_index = index

    def get_game(self) -> str:
        if self.game_id is None:
            raise ContextNotSetError("game")
        return self.game_id

    def get_world(self) -> str:
        self.get_game()
        if self.world_id is None:
            raise ContextNotSetError("world")
        return self.world_id

    def get_level(self) -> int:
        self.get_world()
        if self.level_index is None:
            raise ContextNotSetError("level")
        return self.level_index

    def get_layer(self) -> Layer:
        """Return the deepest fully-set layer.

        Raises:
            InvalidLayerError: If nothing is set, or a layer is set without
                the layers above it.
        """
        match (self.game_id, self.world_id, self.level_index):
            case (str(), str(), int()):
                return Layer.LEVEL
            case (str(), str(), None):
                return Layer.WORLD
            case (str(), None, None):
                return Layer.GAME
            case _:
                raise InvalidLayerError(self.game_id, self.world_id, self.level_index)

    def clear(self) -> None:
        self.game_id = None
        self.world_id = None
        self.level_index = None


class BuildContext:
    """All state of one build unit.

    Attributes:
        games: Registered games.
        cursor: Where newly authored content attaches.
        docs: Inventory documentation shared by all levels.
        config: Build configuration.
    """

    def __init__(
        self,
        config: BuildConfig | None = None,
        *,
        games: GameRegistry | None = None,
        docs: InventoryDocRegistry | None = None,
    ) -> None:
        self.config = config or BuildConfig()
        self.games = games if games is not None else GameRegistry()
        self.docs = docs if docs is not None else InventoryDocRegistry()
        self.cursor = CurrentContext()

    # -------------------------------------------------------------------------
    # Cursor
    # -------------------------------------------------------------------------

    def set_cur_game_id(self, game_id: str) -> None:
        self.cursor.set_game(game_id)

    def set_cur_world_id(self, world_id: str) -> None:
        self.cursor.set_world(world_id)

    def set_cur_level_idx(self, index: int) -> None:
        self.cursor.set_level(index)

    def get_cur_game_id(self) -> str:
        return self.cursor.get_game()

    def get_cur_world_id(self) -> str:
        return self.cursor.get_world()

    def get_cur_level_idx(self) -> int:
        return self.cursor.get_level()

    def get_cur_layer(self) -> Layer:
        return self.cursor.get_layer()

    # -------------------------------------------------------------------------
    # Current entities
    # -------------------------------------------------------------------------

    def get_cur_game(self) -> Game:
        """Get the game the cursor addresses.

        A game that is addressed but not registered yet reads as an empty
        ``Game``. It is registered by the first write through the cursor,
        so worlds can be added before the game's own metadata.
        """
        game_id = self.cursor.get_game()
        game = self.games.get(game_id)
        return game if game is not None else Game(id=game_id)

    def get_cur_world(self) -> World:
        """Get the world the cursor addresses.

        Raises:
            ContextNotSetError: If no game or world is set.
            WorldNotFoundError: If the world was never added to the game.
        """
        world_id = self.cursor.get_world()
        game = self.get_cur_game()
        world = game.worlds.find_node(world_id)
        if world is None:
            raise WorldNotFoundError(
                world_id,
                available=game.worlds.node_ids(),
                context="current world",
                game_id=game.id,
            )
        return world

    def get_cur_level(self) -> GameLevel:
        """Get the level the cursor addresses.

        Raises:
            ContextNotSetError: If game, world or level is not set.
            WorldNotFoundError: If the world was never added to the game.
            LevelNotFoundError: If the world has no level at the index.
        """
        index = self.cursor.get_level()
        world = self.get_cur_world()
        level = world.levels.get(index)
        if level is None:
            raise LevelNotFoundError(
                self.cursor.get_game(),
                world.id,
                index,
                available=world.levels.indices(),
            )
        return level

    def modify_cur_game(self, fn: Callable[[Game], Game]) -> Game:
        """Apply *fn* to a copy of the current game and re-register it."""
        game = fn(self.get_cur_game().model_copy(deep=True))
        self._store_game(game)
        return game

    def modify_cur_world(self, fn: Callable[[World], World]) -> World:
        """Apply *fn* to a copy of the current world and store it in its game."""
        world_id = self.cursor.get_world()
        world = fn(self.get_cur_world().model_copy(deep=True))
        self._store_world(world_id, world)
        return world

    def modify_cur_level(self, fn: Callable[[GameLevel], GameLevel]) -> GameLevel:
        """Apply *fn* to a copy of the current level and store it in its world."""
        index = self.cursor.get_level()
        level = fn(self.get_cur_level().model_copy(deep=True))
        self._store_level(index, level)
        return level

    def _game_shell(self) -> Game:
        """Copy of the current game with its own world graph and shared worlds."""
        game = self.get_cur_game()
        return game.model_copy(update={"worlds": game.worlds.copy(deep=False)})

    def _store_game(self, game: Game) -> None:
        self.games.register(game, self.cursor.get_game())

    def _store_world(self, world_id: str, world: World) -> None:
        game = self._game_shell()
        game.worlds.insert_node(world_id, world)
        self._store_game(game)

    def _store_level(self, index: int, level: GameLevel) -> None:
        world = self.get_cur_world()
        levels = world.levels.merge(LevelStore({index: level}))
        self._store_world(self.cursor.get_world(), world.model_copy(update={"levels": levels}))

    # -------------------------------------------------------------------------
    # Authoring
    # -------------------------------------------------------------------------

    def add_game(self, game: Game) -> None:
        """Register a finished game, replacing any game with the same ID."""
        self.games.register(game)
        log.debug("game_added", game=game.id, worlds=len(game.worlds))

    def add_world(self, world: World) -> None:
        """Insert *world* into the current game (replacing a same-ID world)."""
        self._store_world(world.id, world)
        log.debug(
            "world_added",
            game=self.cursor.get_game(),
            world=world.id,
            levels=world.level_count,
        )

    def add_world_edge(self, source: str, target: str) -> None:
        """Declare that world *target* is unlocked after world *source*.

        Endpoints are not checked here; they may be added later and are
        validated when the game is finalized.
        """
        game = self._game_shell()
        game.worlds.add_edge(source, target)
        self._store_game(game)

    def add_level(self, level: GameLevel) -> None:
        """Insert *level* into the current world at ``level.index``.

        A level already stored at that index is replaced.

        Raises:
            WorldNotFoundError: If the current world was never added.
        """
        self._store_level(level.index, level)
        level_id = format_level_id(self.cursor.get_game(), self.cursor.get_world(), level.index)
        log.debug("level_added", level_id=level_id)

    def document(self, entry: InventoryDocEntry) -> None:
        """Register documentation for an inventory item."""
        self.docs.register(entry)

    # -------------------------------------------------------------------------
    # Lookups
    # -------------------------------------------------------------------------

    def get_game(self, game_id: str) -> Game | None:
        return self.games.get(game_id)

    def get_level(self, game_id: str, world_id: str, index: int) -> GameLevel | None:
        game = self.games.get(game_id)
        if game is None:
            return None
        return game.find_level(world_id, index)

    def get_inventory_doc(self, name: str, kind: InventoryKind) -> InventoryDocEntry | None:
        return self.docs.get(name, kind)

    # -------------------------------------------------------------------------
    # Join points
    # -------------------------------------------------------------------------

    def merge_from(self, other: BuildContext) -> None:
        """Merge the games and documentation of another build unit into this one.

        Raises:
            DocumentationExistsError: If both units document an item
                differently. Nothing is merged in that case.
        """
        docs = self.docs.merge(other.docs)
        self.games = self.games.merge(other.games)
        self.docs = docs

    def finalize(self, game_id: str | None = None) -> dict[str, ValidationReport]:
        """Validate one game (or all games) before content is shipped.

        Returns:
            Validation report per game ID. Empty when validation is disabled.

        Raises:
            GameNotFoundError: If *game_id* is given but not registered.
            GameValidationError: If a game fails validation in strict mode.
        """
        if not self.config.validate_on_finalize:
            return {}

        games = [self.games.require(game_id)] if game_id else self.games.games()
        reports: dict[str, ValidationReport] = {}
        for game in games:
            report = validate_game(
                game,
                self.docs,
                require_documented=self.config.require_documented_items,
            )
            reports[game.id] = report
            for check in report.with_severity("warn"):
                log.warning(
                    "validation_warning",
                    game=game.id,
                    check=check.name,
                    detail=check.message,
                )
            if report.has_failures:
                if self.config.strict:
                    raise GameValidationError(game.id, report)
                log.warning("game_validation_failed", game=game.id, summary=report.summary)
            else:
                log.info("game_finalized", game=game.id, summary=report.summary)
        return reports
