"""Pytest configuration and shared fixtures."""

from pathlib import Path

import pytest

from levelforge.build import BuildContext
from levelforge.models import Game
from tests.fixtures.game_fixtures import GAME_ID, build_test_game


@pytest.fixture(autouse=True)
def isolate_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep LEVELFORGE_* variables from the developer's shell out of tests."""
    for name in ("LEVELFORGE_STRICT", "LEVELFORGE_INCLUDE_LOCKED", "LEVELFORGE_CONFIG"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def project_root() -> Path:
    """Return the project root directory."""
    return Path(__file__).parent.parent


@pytest.fixture
def fixtures_path() -> Path:
    """Return the directory holding fixture files."""
    return Path(__file__).parent / "fixtures"


@pytest.fixture
def sample_ctx() -> BuildContext:
    """Build context holding TestGame and its inventory docs."""
    return build_test_game()


@pytest.fixture
def sample_game(sample_ctx: BuildContext) -> Game:
    """The TestGame game."""
    return sample_ctx.games.require(GAME_ID)
