"""Authoring-boundary validation for finished games.

The world graph and level stores accept anything; these checks run before
content is shipped and report what the store itself does not enforce:
acyclic world order, resolvable edges, consistent level indices and
documented inventory items.
"""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Literal

from levelforge.graph.algorithms import find_cycle
from levelforge.models.ids import InventoryKind, LevelRef

if TYPE_CHECKING:
    from levelforge.build.docs import InventoryDocRegistry
    from levelforge.models.game import Game

Severity = Literal["pass", "warn", "fail"]

_SUMMARY_LABELS: tuple[tuple[Severity, str], ...] = (
    ("fail", "failed"),
    ("warn", "warnings"),
    ("pass", "passed"),
)


@dataclass
class ValidationCheck:
    """Outcome of one check on one game.

    Attributes:
        name: Check identifier, e.g. ``world_graph_acyclic``.
        severity: "fail" blocks shipping in strict mode; "warn" is logged.
        message: What was checked, or the first offending items.
    """

    name: str
    severity: Severity
    message: str = ""


@dataclass
class ValidationReport:
    """Checks run on one game, in run order."""

    checks: list[ValidationCheck] = field(default_factory=list)

    def with_severity(self, severity: Severity) -> list[ValidationCheck]:
        return [c for c in self.checks if c.severity == severity]

    @property
    def has_failures(self) -> bool:
        return bool(self.with_severity("fail"))

    @property
    def has_warnings(self) -> bool:
        return bool(self.with_severity("warn"))

    @property
    def failures(self) -> list[ValidationCheck]:
        return self.with_severity("fail")

    @property
    def summary(self) -> str:
        """Counts per severity, e.g. ``"1 failed, 3 passed"``."""
        counts = Counter(c.severity for c in self.checks)
        return ", ".join(
            f"{counts[severity]} {label}" for severity, label in _SUMMARY_LABELS if counts[severity]
        )


def check_world_graph_acyclic(game: Game) -> ValidationCheck:
    """Verify the world graph is a DAG."""
    cycle_nodes = find_cycle(game.worlds)
    if not cycle_nodes:
        return ValidationCheck(
            name="world_graph_acyclic",
            severity="pass",
            message=f"World graph is acyclic ({len(game.worlds)} worlds)",
        )
    return ValidationCheck(
        name="world_graph_acyclic",
        severity="fail",
        message=(
            f"Cycle detected involving {len(cycle_nodes)} worlds: "
            f"{', '.join(cycle_nodes[:5])}"
        ),
    )


def check_world_edges_resolve(game: Game) -> ValidationCheck:
    """Verify every world edge connects two existing worlds."""
    violations = game.worlds.validate_invariants()
    if not violations:
        return ValidationCheck(
            name="world_edges_resolve",
            severity="pass",
            message=f"All {len(game.worlds.edges)} world edges resolve",
        )
    return ValidationCheck(
        name="world_edges_resolve",
        severity="fail",
        message="; ".join(violations[:5]),
    )


def check_level_indices(game: Game) -> ValidationCheck:
    """Verify each level is stored under its own index."""
    mismatched: list[str] = []
    for world_id, world in game.worlds.nodes():
        for key, level in world.levels.root.items():
            if key != level.index or key < 0:
                mismatched.append(f"{LevelRef(world_id, key)} holds level {level.index}")
    if not mismatched:
        return ValidationCheck(
            name="level_indices",
            severity="pass",
            message="All levels are stored under their own index",
        )
    return ValidationCheck(
        name="level_indices",
        severity="fail",
        message="; ".join(mismatched[:5]),
    )


def check_inventory_documented(
    game: Game,
    docs: InventoryDocRegistry,
    *,
    required: bool = False,
) -> ValidationCheck:
    """Verify every item a level mentions has a documentation entry.

    Args:
        required: Report missing documentation as a failure instead of a
            warning.
    """
    missing: set[str] = set()
    for _world_id, world in game.worlds.nodes():
        for level in world.levels.in_order():
            for kind in InventoryKind:
                for name in level.inventory(kind).referenced():
                    if docs.get(name, kind) is None:
                        missing.add(f"{kind}:{name}")

    if not missing:
        return ValidationCheck(
            name="inventory_documented",
            severity="pass",
            message="All referenced inventory items are documented",
        )
    shown = sorted(missing)
    return ValidationCheck(
        name="inventory_documented",
        severity="fail" if required else "warn",
        message=f"{len(shown)} undocumented items: {', '.join(shown[:5])}",
    )


def validate_game(
    game: Game,
    docs: InventoryDocRegistry | None = None,
    *,
    require_documented: bool = False,
) -> ValidationReport:
    """Run all authoring-boundary checks on *game*.

    The documentation check is skipped when no registry is supplied.
    """
    checks = [
        check_world_graph_acyclic(game),
        check_world_edges_resolve(game),
        check_level_indices(game),
    ]
    if docs is not None:
        checks.append(check_inventory_documented(game, docs, required=require_documented))
    return ValidationReport(checks=checks)
