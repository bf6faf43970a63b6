"""Tests for content models and identifiers."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from levelforge.graph import Edge
from levelforge.models import (
    Game,
    GameLevel,
    Hint,
    InventoryDocEntry,
    InventoryInfo,
    InventoryKind,
    ItemKey,
    LevelRef,
    LevelStore,
    World,
    format_level_id,
    parse_level_id,
    validate_identifier,
)


class TestIdentifiers:
    """Tests for identifier helpers."""

    def test_format_level_id(self) -> None:
        assert format_level_id("TestGame", "Proposition", 11) == "TestGame::Proposition::11"

    def test_parse_level_id(self) -> None:
        assert parse_level_id("TestGame::Proposition::11") == ("TestGame", "Proposition", 11)

    @pytest.mark.parametrize(
        "raw",
        ["TestGame::Proposition", "a::b::c::d", "g::w::x", "g::w::-1"],
    )
    def test_parse_level_id_rejects_malformed(self, raw: str) -> None:
        """Wrong part counts and bad indices are rejected."""
        with pytest.raises(ValueError):
            parse_level_id(raw)

    def test_level_ref_str(self) -> None:
        assert str(LevelRef("Proposition", 3)) == "Proposition::3"

    def test_validate_identifier_accepts_dotted_names(self) -> None:
        assert validate_identifier("Nat.add_comm") == "Nat.add_comm"

    @pytest.mark.parametrize("raw", ["", "two words", "a::b"])
    def test_validate_identifier_rejects(self, raw: str) -> None:
        with pytest.raises(ValueError, match="world id"):
            validate_identifier(raw, "world id")

    def test_item_key_distinguishes_kinds(self) -> None:
        """The same name as tactic and lemma gives two keys."""
        assert ItemKey("rfl", InventoryKind.TACTIC) != ItemKey("rfl", InventoryKind.LEMMA)


class TestInventoryModels:
    """Tests for inventory documentation and deltas."""

    def test_display_name_defaults_to_name(self) -> None:
        entry = InventoryDocEntry(name="rfl", kind=InventoryKind.TACTIC)

        assert entry.display_name == "rfl"
        assert entry.key == ItemKey("rfl", InventoryKind.TACTIC)

    def test_explicit_display_name_kept(self) -> None:
        entry = InventoryDocEntry(name="intro", kind="tactic", display_name="intro x")

        assert entry.display_name == "intro x"
        assert entry.kind is InventoryKind.TACTIC

    def test_doc_entry_is_frozen(self) -> None:
        entry = InventoryDocEntry(name="rfl", kind=InventoryKind.TACTIC)

        with pytest.raises(ValidationError):
            entry.category = "Basics"  # type: ignore[misc]

    def test_empty_name_rejected(self) -> None:
        with pytest.raises(ValidationError):
            InventoryDocEntry(name="  ", kind=InventoryKind.TACTIC)

    def test_unknown_kind_rejected(self) -> None:
        with pytest.raises(ValidationError):
            InventoryDocEntry(name="x", kind="axiom")  # type: ignore[arg-type]

    def test_inventory_info_referenced(self) -> None:
        info = InventoryInfo(new=["a"], disabled=["b"], only=["a", "c"])

        assert info.referenced() == {"a", "b", "c"}


class TestGameLevel:
    """Tests for GameLevel."""

    def test_negative_index_rejected(self) -> None:
        with pytest.raises(ValidationError):
            GameLevel(index=-1)

    def test_inventory_by_kind(self) -> None:
        level = GameLevel(
            index=0,
            tactics=InventoryInfo(new=["rfl"]),
            lemmas=InventoryInfo(new=["and_comm"]),
        )

        assert level.inventory(InventoryKind.TACTIC).new == ["rfl"]
        assert level.inventory(InventoryKind.LEMMA).new == ["and_comm"]
        assert level.inventory(InventoryKind.DEFINITION).new == []

    def test_with_inventory_returns_copy(self) -> None:
        level = GameLevel(index=0)

        updated = level.with_inventory(InventoryKind.DEFINITION, InventoryInfo(new=["Not"]))

        assert updated.definitions.new == ["Not"]
        assert level.definitions.new == []

    def test_hints_are_opaque(self) -> None:
        """Hint patterns and templates are stored untouched."""
        hint = Hint(goal="h : A ⊢ A", text="Use {h}.", args={"h": "h"}, hidden=True)
        level = GameLevel(index=4, hints=[hint])

        assert level.hints[0].goal == "h : A ⊢ A"
        assert level.hints[0].text == "Use {h}."
        assert not level.hints[0].strict


class TestLevelStore:
    """Tests for LevelStore."""

    def test_insert_is_last_write_wins(self) -> None:
        store = LevelStore()
        store.insert(0, GameLevel(index=0, title="first"))
        store.insert(0, GameLevel(index=0, title="second"))

        assert len(store) == 1
        assert store.get(0) is not None
        assert store.get(0).title == "second"  # type: ignore[union-attr]

    def test_gaps_and_ordering(self) -> None:
        """Sparse indices are allowed and presented in ascending order."""
        store = LevelStore()
        for index in (5, 0, 2):
            store.insert(index, GameLevel(index=index))

        assert store.indices() == [0, 2, 5]
        assert [lvl.index for lvl in store.in_order()] == [0, 2, 5]
        assert [lvl.index for lvl in store.up_to(2)] == [0, 2]
        assert 2 in store
        assert 1 not in store
        assert store.get(1) is None

    def test_merge_replaces_whole_levels(self) -> None:
        """Incoming levels replace existing ones with the same index."""
        left = LevelStore({0: GameLevel(index=0, title="old", goal="g"), 1: GameLevel(index=1)})
        right = LevelStore({0: GameLevel(index=0, title="new"), 2: GameLevel(index=2)})

        merged = left.merge(right)

        assert merged.indices() == [0, 1, 2]
        assert merged.get(0).title == "new"  # type: ignore[union-attr]
        assert merged.get(0).goal == ""  # type: ignore[union-attr]
        assert left.get(0).title == "old"  # type: ignore[union-attr]


class TestWorldAndGameMerge:
    """Tests for World.merge and Game.merge."""

    def test_world_merge(self) -> None:
        existing = World(id="w", title="Old", levels=LevelStore({0: GameLevel(index=0)}))
        incoming = World(id="w", title="New", levels=LevelStore({1: GameLevel(index=1)}))

        merged = existing.merge(incoming)

        assert merged.title == "New"
        assert merged.levels.indices() == [0, 1]
        assert existing.levels.indices() == [0]

    def test_game_merge_merges_world_graphs(self) -> None:
        left = Game(id="G", title="Left")
        left.worlds.insert_node("A", World(id="A", levels=LevelStore({0: GameLevel(index=0)})))
        left.worlds.insert_node("B", World(id="B"))
        left.worlds.add_edge("A", "B")

        right = Game(id="G", title="Right")
        right.worlds.insert_node("A", World(id="A", levels=LevelStore({1: GameLevel(index=1)})))
        right.worlds.insert_node("C", World(id="C"))
        right.worlds.add_edge("A", "C")
        right.worlds.add_edge("A", "B")

        merged = left.merge(right)

        assert merged.title == "Right"
        assert merged.worlds.node_ids() == ["A", "B", "C"]
        assert merged.find_world("A").levels.indices() == [0, 1]  # type: ignore[union-attr]
        assert merged.worlds.edges == [Edge("A", "B"), Edge("A", "C")]
        assert len(left.worlds) == 2

    def test_game_merge_self_is_idempotent(self) -> None:
        game = Game(id="G", title="T")
        game.worlds.insert_node("A", World(id="A", levels=LevelStore({0: GameLevel(index=0)})))

        assert game.merge(game) == game

    def test_writes_to_merged_game_stay_local(self) -> None:
        """Inserting a level into a merged world does not reach the inputs."""
        left = Game(id="G")
        left.worlds.insert_node("W", World(id="W"))
        right = Game(id="G")
        right.worlds.insert_node("X", World(id="X"))

        merged = left.merge(right)
        merged.find_world("W").levels.insert(0, GameLevel(index=0))  # type: ignore[union-attr]
        merged.find_world("X").levels.insert(0, GameLevel(index=0))  # type: ignore[union-attr]

        assert left.find_world("W").level_count == 0  # type: ignore[union-attr]
        assert right.find_world("X").level_count == 0  # type: ignore[union-attr]

    def test_find_level_and_world_size(self) -> None:
        game = Game(id="G")
        game.worlds.insert_node("A", World(id="A", levels=LevelStore({0: GameLevel(index=0)})))
        game.worlds.insert_node("B", World(id="B"))

        assert game.find_level("A", 0) is not None
        assert game.find_level("A", 1) is None
        assert game.find_level("missing", 0) is None
        assert game.world_size() == {"A": 1, "B": 0}

    def test_model_dump_serializes_world_graph(self) -> None:
        game = Game(id="G")
        game.worlds.insert_node("A", World(id="A"))

        data = game.model_dump()

        assert data["worlds"]["nodes"]["A"]["id"] == "A"
        assert data["worlds"]["edges"] == []
