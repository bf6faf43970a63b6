"""levelforge CLI - typer application entry point."""

from __future__ import annotations

import atexit
from pathlib import Path
from typing import Annotated

import typer
from dotenv import load_dotenv
from rich.console import Console
from rich.table import Table

from levelforge.build import BuildContext, ContentLoadError, GameValidationError, load_content
from levelforge.config import ConfigError, load_build_config
from levelforge.graph.errors import GraphIntegrityError
from levelforge.graph.validation import validate_game
from levelforge.inventory import InventoryResolver
from levelforge.models import InventoryKind, parse_level_id
from levelforge.observability import close_file_logging, configure_logging, get_logger

# Load environment variables from .env file
load_dotenv()

app = typer.Typer(
    name="levelforge",
    help="levelforge: build, validate and inspect level-based game content.",
    no_args_is_help=True,
)
console = Console()
log = get_logger(__name__)

# Global state for config lookup (set by callback, used by commands)
_config_path: Path = Path()

ManifestArg = Annotated[
    Path,
    typer.Argument(help="Content manifest (YAML).", dir_okay=False),
]


@app.callback()
def main(
    verbose: Annotated[
        int,
        typer.Option(
            "-v",
            "--verbose",
            count=True,
            help="Increase verbosity: -v for INFO, -vv for DEBUG.",
        ),
    ] = 0,
    log_dir: Annotated[
        Path | None,
        typer.Option(
            "--log",
            help="Enable file logging to the given directory (debug.jsonl).",
        ),
    ] = None,
    config: Annotated[
        Path,
        typer.Option(
            "--config",
            "-c",
            help="Build config file or directory holding levelforge.yaml.",
            envvar="LEVELFORGE_CONFIG",
        ),
    ] = Path(),
) -> None:
    """levelforge: build, validate and inspect level-based game content."""
    global _config_path
    _config_path = config

    if log_dir is not None:
        configure_logging(verbosity=verbose, log_to_file=True, log_dir=log_dir)
        atexit.register(close_file_logging)
    else:
        configure_logging(verbosity=verbose)


def _load(manifest: Path) -> BuildContext:
    """Load config and manifest, exiting with an error message on failure."""
    try:
        config = load_build_config(_config_path)
        return load_content(manifest, BuildContext(config))
    except (ConfigError, ContentLoadError) as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1) from e


def _resolve_game_id(ctx: BuildContext, game_id: str | None) -> str:
    """Pick the requested game, or the only game of the manifest."""
    if game_id is not None:
        if game_id not in ctx.games:
            console.print(f"[red]Error:[/red] Game '{game_id}' not found.")
            raise typer.Exit(1)
        return game_id
    ids = ctx.games.game_ids()
    if len(ids) != 1:
        console.print(
            f"[red]Error:[/red] Manifest holds {len(ids)} games; choose one with --game."
        )
        raise typer.Exit(1)
    return ids[0]


# =============================================================================
# Commands
# =============================================================================


@app.command()
def version() -> None:
    """Show version information."""
    from levelforge import __version__

    console.print(f"levelforge v{__version__}")


@app.command()
def worlds(
    manifest: ManifestArg,
    game: Annotated[str | None, typer.Option("--game", "-g", help="Game ID.")] = None,
) -> None:
    """List the worlds of a game in unlock order."""
    from levelforge.graph.algorithms import roots, topological_order

    ctx = _load(manifest)
    game_obj = ctx.games.require(_resolve_game_id(ctx, game))

    try:
        order = topological_order(game_obj.worlds)
    except GraphIntegrityError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1) from e

    table = Table(title=f"Worlds: {game_obj.title or game_obj.id}")
    table.add_column("World", style="cyan")
    table.add_column("Title")
    table.add_column("Levels", justify="right")
    table.add_column("Unlocked after", style="dim")

    entry_worlds = set(roots(game_obj.worlds))
    for world_id in order:
        world = game_obj.worlds.get_node(world_id)
        if world_id in entry_worlds:
            after = "[green]start[/green]"
        else:
            after = ", ".join(game_obj.worlds.predecessors(world_id))
        table.add_row(world_id, world.title, str(world.level_count), after)

    console.print()
    console.print(table)
    console.print()


@app.command()
def inventory(
    manifest: ManifestArg,
    world: Annotated[str | None, typer.Option("--world", "-w", help="World ID.")] = None,
    level: Annotated[int | None, typer.Option("--level", "-l", help="Level index.", min=0)] = None,
    at: Annotated[
        str | None,
        typer.Option("--at", help="Scoped level ID 'game::world::index' (replaces -g/-w/-l)."),
    ] = None,
    game: Annotated[str | None, typer.Option("--game", "-g", help="Game ID.")] = None,
    kind: Annotated[
        InventoryKind,
        typer.Option("--kind", "-k", help="Inventory kind to show."),
    ] = InventoryKind.TACTIC,
    locked: Annotated[
        bool,
        typer.Option("--locked", help="Include items not unlocked yet."),
    ] = False,
) -> None:
    """Show the resolved inventory of one level."""
    if at is not None:
        try:
            game, world, level = parse_level_id(at)
        except ValueError as e:
            console.print(f"[red]Error:[/red] {e}")
            raise typer.Exit(1) from e
    if world is None or level is None:
        console.print("[red]Error:[/red] Give the level with --world and --level, or with --at.")
        raise typer.Exit(1)

    ctx = _load(manifest)
    game_obj = ctx.games.require(_resolve_game_id(ctx, game))
    include_locked = locked or ctx.config.include_locked

    try:
        resolver = InventoryResolver(game_obj, ctx.docs, include_locked=include_locked)
        tiles = resolver.resolve(world, level, kind)
    except (GraphIntegrityError, LookupError) as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1) from e

    table = Table(title=f"{kind.value.capitalize()}s at {world} level {level}")
    table.add_column("Name", style="cyan")
    table.add_column("Display name")
    table.add_column("Category", style="dim")
    table.add_column("State", style="bold")
    table.add_column("Introduced", style="dim")

    for tile in tiles:
        if tile.locked:
            state = "[dim]locked[/dim]"
        elif tile.disabled:
            state = "[yellow]disabled[/yellow]"
        elif tile.new:
            state = "[green]new[/green]"
        else:
            state = "available"
        introduced = str(tile.introduced_at) if tile.introduced_at else "-"
        table.add_row(tile.name, tile.display_name, tile.category, state, introduced)

    console.print()
    console.print(table)
    console.print()


@app.command()
def validate(
    manifest: ManifestArg,
    game: Annotated[str | None, typer.Option("--game", "-g", help="Game ID.")] = None,
) -> None:
    """Run authoring-boundary checks on a manifest's games."""
    ctx = _load(manifest)
    game_ids = [_resolve_game_id(ctx, game)] if game else ctx.games.game_ids()

    severity_icons = {
        "pass": "[green]✓[/green] pass",
        "warn": "[yellow]![/yellow] warn",
        "fail": "[red]✗[/red] fail",
    }

    failed = False
    for game_id in game_ids:
        report = validate_game(
            ctx.games.require(game_id),
            ctx.docs,
            require_documented=ctx.config.require_documented_items,
        )
        table = Table(title=f"Validation: {game_id}")
        table.add_column("Check", style="cyan")
        table.add_column("Result", style="bold")
        table.add_column("Details", style="dim")
        for check in report.checks:
            table.add_row(check.name, severity_icons[check.severity], check.message)
        console.print()
        console.print(table)
        console.print(f"{game_id}: {report.summary}")
        failed |= report.has_failures

    if failed:
        log.warning("validation_failed", manifest=str(manifest))
        raise typer.Exit(1)


@app.command()
def finalize(manifest: ManifestArg) -> None:
    """Load a manifest and finalize it with the configured strictness."""
    ctx = _load(manifest)
    try:
        reports = ctx.finalize()
    except GameValidationError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1) from e

    for game_id, report in reports.items():
        console.print(f"[green]Finalized[/green] {game_id}: {report.summary}")
