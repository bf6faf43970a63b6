"""Tests for authoring-boundary validation checks."""

from __future__ import annotations

from levelforge.build import InventoryDocRegistry
from levelforge.graph.validation import (
    ValidationCheck,
    ValidationReport,
    check_inventory_documented,
    check_level_indices,
    check_world_edges_resolve,
    check_world_graph_acyclic,
    validate_game,
)
from levelforge.models import (
    Game,
    GameLevel,
    InventoryDocEntry,
    InventoryInfo,
    InventoryKind,
    LevelStore,
    World,
)


def _game_with_levels(levels: dict[int, GameLevel]) -> Game:
    game = Game(id="G")
    game.worlds.insert_node("W", World(id="W", levels=LevelStore(levels)))
    return game


class TestValidationReport:
    """Tests for ValidationReport aggregation."""

    def test_empty_report(self) -> None:
        report = ValidationReport()

        assert not report.has_failures
        assert not report.has_warnings
        assert report.summary == ""

    def test_summary_counts(self) -> None:
        report = ValidationReport(
            checks=[
                ValidationCheck("a", "pass"),
                ValidationCheck("b", "warn", "careful"),
                ValidationCheck("c", "fail", "broken"),
                ValidationCheck("d", "pass"),
            ]
        )

        assert report.has_failures
        assert report.has_warnings
        assert [c.name for c in report.failures] == ["c"]
        assert report.summary == "1 failed, 1 warnings, 2 passed"


class TestGraphChecks:
    """Tests for world graph checks."""

    def test_acyclic_passes(self, sample_game: Game) -> None:
        check = check_world_graph_acyclic(sample_game)

        assert check.severity == "pass"
        assert "4 worlds" in check.message

    def test_cycle_fails(self) -> None:
        game = Game(id="G")
        for wid in ("A", "B", "C"):
            game.worlds.insert_node(wid, World(id=wid))
        game.worlds.add_edge("A", "B")
        game.worlds.add_edge("B", "C")
        game.worlds.add_edge("C", "B")

        check = check_world_graph_acyclic(game)

        assert check.severity == "fail"
        assert "B, C" in check.message

    def test_edges_resolve(self, sample_game: Game) -> None:
        assert check_world_edges_resolve(sample_game).severity == "pass"

    def test_dangling_edge_fails(self) -> None:
        game = Game(id="G")
        game.worlds.insert_node("A", World(id="A"))
        game.worlds.add_edge("Ghost", "A")

        check = check_world_edges_resolve(game)

        assert check.severity == "fail"
        assert "source 'Ghost'" in check.message


class TestLevelChecks:
    """Tests for level store checks."""

    def test_matching_indices_pass(self) -> None:
        game = _game_with_levels({0: GameLevel(index=0), 3: GameLevel(index=3)})

        assert check_level_indices(game).severity == "pass"

    def test_mismatched_index_fails(self) -> None:
        game = _game_with_levels({0: GameLevel(index=0), 2: GameLevel(index=5)})

        check = check_level_indices(game)

        assert check.severity == "fail"
        assert "W::2 holds level 5" in check.message


class TestDocumentationCheck:
    """Tests for check_inventory_documented."""

    def _docs(self) -> InventoryDocRegistry:
        docs = InventoryDocRegistry()
        docs.register(InventoryDocEntry(name="rfl", kind=InventoryKind.TACTIC))
        return docs

    def test_all_documented(self) -> None:
        game = _game_with_levels({0: GameLevel(index=0, tactics=InventoryInfo(new=["rfl"]))})

        assert check_inventory_documented(game, self._docs()).severity == "pass"

    def test_undocumented_warns(self) -> None:
        game = _game_with_levels(
            {0: GameLevel(index=0, tactics=InventoryInfo(new=["rfl"], disabled=["simp"]))}
        )

        check = check_inventory_documented(game, self._docs())

        assert check.severity == "warn"
        assert "tactic:simp" in check.message

    def test_kind_is_part_of_the_key(self) -> None:
        """A documented tactic does not document a lemma of the same name."""
        game = _game_with_levels({0: GameLevel(index=0, lemmas=InventoryInfo(new=["rfl"]))})

        check = check_inventory_documented(game, self._docs(), required=True)

        assert check.severity == "fail"
        assert "lemma:rfl" in check.message


class TestValidateGame:
    """Tests for validate_game."""

    def test_runs_all_checks(self, sample_game: Game) -> None:
        report = validate_game(sample_game, InventoryDocRegistry())

        assert [c.name for c in report.checks] == [
            "world_graph_acyclic",
            "world_edges_resolve",
            "level_indices",
            "inventory_documented",
        ]

    def test_docs_check_skipped_without_registry(self, sample_game: Game) -> None:
        report = validate_game(sample_game)

        assert "inventory_documented" not in [c.name for c in report.checks]
        assert not report.has_failures
