"""Tests for error types and their feedback formatting."""

from __future__ import annotations

from levelforge.build import (
    ContextError,
    ContextNotSetError,
    DocumentationExistsError,
    GameNotFoundError,
    GameValidationError,
    InvalidLayerError,
    LevelNotFoundError,
    WorldNotFoundError,
)
from levelforge.graph import CycleError, EdgeEndpointError, NodeNotFoundError
from levelforge.graph.validation import ValidationCheck, ValidationReport
from levelforge.models import InventoryKind


class TestGraphErrorFeedback:
    """Tests for to_feedback() on graph integrity errors."""

    def test_node_not_found_feedback(self) -> None:
        error = NodeNotFoundError(
            "Implicaton", available=["Proposition", "Implication"], context="edge target"
        )

        feedback = error.to_feedback()

        assert "`Implicaton`" in feedback
        assert "**Context**: edge target" in feedback
        assert "Did you mean" in feedback
        assert "`Implication`" in feedback

    def test_node_not_found_truncates_available(self) -> None:
        error = NodeNotFoundError("x", available=[f"w{i:02d}" for i in range(25)])

        assert "... and 5 more" in error.to_feedback()

    def test_node_not_found_without_matches(self) -> None:
        error = NodeNotFoundError("zzz", available=["Proposition"])

        assert error.suggestions() == []
        assert "Did you mean" not in error.to_feedback()

    def test_edge_endpoint_messages(self) -> None:
        both = EdgeEndpointError("a", "b", "both")
        target = EdgeEndpointError("a", "b", "target", available=["a"])

        assert str(both) == "Edge endpoints not found: 'a' and 'b'"
        assert str(target) == "Edge target not found: 'b'"
        assert "Target node `b` does not exist" in target.to_feedback()
        assert "Source node" not in target.to_feedback()

    def test_cycle_message_truncates(self) -> None:
        error = CycleError([f"w{i}" for i in range(7)])

        assert str(error) == "Cycle detected involving 7 node(s): w0, w1, w2, w3, w4, ..."


class TestBuildErrors:
    """Tests for build error messages and hierarchy."""

    def test_context_errors_share_base(self) -> None:
        assert isinstance(ContextNotSetError("world"), ContextError)
        assert isinstance(InvalidLayerError(None, "w", None), ContextError)
        assert str(ContextNotSetError("world")) == "Current world is not set"

    def test_invalid_layer_message(self) -> None:
        error = InvalidLayerError(None, "Proposition", 3)

        assert str(error) == "Invalid layer: game=None, world='Proposition', level=3"

    def test_lookup_errors(self) -> None:
        """Lookup misses are LookupErrors carrying the missing identifier."""
        game_error = GameNotFoundError("G")
        world_error = WorldNotFoundError("W", game_id="G")
        level_error = LevelNotFoundError("G", "W", 4)

        for error in (game_error, world_error, level_error):
            assert isinstance(error, LookupError)
        assert str(game_error) == "Game 'G' not found"
        assert world_error.world_id == "W"
        assert str(level_error) == "Level 4 not found in world 'W' of game 'G'"

    def test_documentation_exists_message(self) -> None:
        error = DocumentationExistsError("rfl", InventoryKind.TACTIC)

        assert str(error) == "tactic 'rfl' is already documented"

    def test_game_validation_error_lists_failures(self) -> None:
        report = ValidationReport(
            checks=[
                ValidationCheck("world_graph_acyclic", "fail", "Cycle detected"),
                ValidationCheck("level_indices", "pass"),
            ]
        )

        error = GameValidationError("G", report)

        assert str(error).splitlines() == [
            "Game 'G' failed validation:",
            "  - world_graph_acyclic: Cycle detected",
        ]
