"""Content manifest loading.

A manifest is a YAML file describing inventory documentation and one or
more games. Loading drives the regular authoring API of a BuildContext
(cursor setters, ``add_world``, ``add_level``, ``add_world_edge``) so that
manifest content is registered exactly like content from any other
authoring front end.

Example::

    inventory:
      - {name: rfl, kind: tactic, category: basics}
    games:
      - id: TestGame
        title: Test Game
        worlds:
          - id: Proposition
            levels:
              - index: 0
                goal: "A -> A"
                tactics: {new: [rfl]}
        edges:
          - [Proposition, Implication]
"""

from __future__ import annotations

from pathlib import Path  # noqa: TC003 - used at runtime
from typing import Any

from pydantic import ValidationError
from ruamel.yaml import YAML

from levelforge.build.context import BuildContext
from levelforge.build.errors import ContentLoadError, DocumentationExistsError
from levelforge.models.ids import validate_identifier
from levelforge.models.inventory import InventoryDocEntry
from levelforge.models.level import GameLevel
from levelforge.models.world import World
from levelforge.observability.logging import get_logger

log = get_logger(__name__)

_GAME_SCALARS = ("title", "introduction", "info", "conclusion")


def _parse_edge(raw: Any) -> tuple[str, str]:
    if isinstance(raw, dict):
        return str(raw["from"]), str(raw["to"])
    source, target = raw
    return str(source), str(target)


def _load_game(ctx: BuildContext, data: dict[str, Any]) -> None:
    game_id = validate_identifier(str(data["id"]), "game id")
    ctx.set_cur_game_id(game_id)

    scalars = {key: str(data[key]) for key in _GAME_SCALARS if key in data}
    ctx.modify_cur_game(lambda game: game.model_copy(update=scalars))

    for world_data in data.get("worlds", []) or []:
        world_data = dict(world_data)
        levels = world_data.pop("levels", []) or []
        world = World.model_validate(world_data)
        validate_identifier(world.id, "world id")
        ctx.set_cur_world_id(world.id)
        if ctx.get_cur_game().find_world(world.id) is None:
            ctx.add_world(world)
        else:
            # Redeclared world: keep its levels, take the new metadata
            ctx.modify_cur_world(
                lambda existing, new=world: existing.model_copy(
                    update={"title": new.title, "introduction": new.introduction}
                )
            )

        for level_data in levels:
            level = GameLevel.model_validate(dict(level_data))
            ctx.set_cur_level_idx(level.index)
            ctx.add_level(level)
        ctx.cursor.level_index = None

    for raw_edge in data.get("edges", []) or []:
        source, target = _parse_edge(raw_edge)
        ctx.add_world_edge(source, target)

    ctx.cursor.clear()


def load_content(path: Path, ctx: BuildContext | None = None) -> BuildContext:
    """Load a content manifest into a build context.

    The manifest is authored into a fresh build unit first and merged into
    *ctx* only once the whole file has loaded, so a failed load leaves *ctx*
    as it was.

    Args:
        path: Manifest file.
        ctx: Context to load into; a fresh one is created if omitted.

    Returns:
        The context holding the loaded content. It is not finalized.

    Raises:
        ContentLoadError: If the file is missing or malformed, or documents
            an item differently from *ctx*.
    """
    if not path.exists():
        raise ContentLoadError(path, "File not found")

    yaml = YAML(typ="safe")
    try:
        with path.open("r", encoding="utf-8") as f:
            data = yaml.load(f)
    except Exception as e:
        raise ContentLoadError(path, str(e)) from e

    if data is None:
        raise ContentLoadError(path, "Empty file")
    if not isinstance(data, dict):
        raise ContentLoadError(path, "Top level must be a mapping")

    target = ctx if ctx is not None else BuildContext()
    unit = BuildContext(target.config)
    try:
        for entry in data.get("inventory", []) or []:
            unit.document(InventoryDocEntry.model_validate(dict(entry)))
        for game_data in data.get("games", []) or []:
            _load_game(unit, dict(game_data))
        target.merge_from(unit)
    except (ValidationError, ValueError, KeyError, TypeError, DocumentationExistsError) as e:
        raise ContentLoadError(path, str(e)) from e

    log.info(
        "content_loaded",
        path=str(path),
        games=len(unit.games),
        documented_items=len(unit.docs),
    )
    return target
