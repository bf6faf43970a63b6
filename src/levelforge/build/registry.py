"""Game registry and the link step that combines build units.

Content authored in separate build units (independently elaborated files)
produces separate registries. ``link`` folds them into one, merging games
that share an identifier with ``Game.merge``: disjoint content converges to
the same result in any order, colliding keys are last-imported-wins.
"""

from __future__ import annotations

from collections.abc import Iterator, Sequence

from levelforge.build.errors import GameNotFoundError
from levelforge.models.game import Game
from levelforge.observability.logging import get_logger

log = get_logger(__name__)


class GameRegistry:
    """Games keyed by identifier.

    Append/merge only while content is built; read-only afterwards.
    """

    def __init__(self, games: dict[str, Game] | None = None) -> None:
        self._games: dict[str, Game] = dict(games or {})

    def register(self, game: Game, game_id: str | None = None) -> None:
        """Insert *game*, replacing any game registered under the same ID."""
        self._games[game_id or game.id] = game

    def get(self, game_id: str) -> Game | None:
        return self._games.get(game_id)

    def require(self, game_id: str) -> Game:
        """Get a registered game.

        Raises:
            GameNotFoundError: If no game is registered under *game_id*.
        """
        game = self._games.get(game_id)
        if game is None:
            raise GameNotFoundError(game_id, available=sorted(self._games))
        return game

    def merge_game(self, game: Game) -> Game:
        """Merge *game* into the registered game with the same ID (if any).

        Returns:
            The game now registered.
        """
        existing = self._games.get(game.id)
        merged = game if existing is None else existing.merge(game)
        self._games[game.id] = merged
        return merged

    def merge(self, incoming: GameRegistry) -> GameRegistry:
        """New registry combining this one with *incoming* (incoming wins)."""
        merged = GameRegistry(self._games)
        for game in incoming._games.values():
            merged.merge_game(game)
        log.debug(
            "registries_merged",
            existing=len(self._games),
            incoming=len(incoming._games),
            result=len(merged._games),
        )
        return merged

    def game_ids(self) -> list[str]:
        return list(self._games)

    def games(self) -> list[Game]:
        return list(self._games.values())

    def __contains__(self, game_id: object) -> bool:
        return game_id in self._games

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._games))

    def __len__(self) -> int:
        return len(self._games)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, GameRegistry):
            return NotImplemented
        return self._games == other._games

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"GameRegistry(games={self.game_ids()})"


def link(units: Sequence[GameRegistry]) -> GameRegistry:
    """Fold the registries of several build units into one.

    Units are merged left to right, so later units win on collisions.
    """
    result = GameRegistry()
    for unit in units:
        result = result.merge(unit)
    log.info("build_units_linked", units=len(units), games=len(result))
    return result
