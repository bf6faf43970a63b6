"""Build package - registering, merging and validating game content.

Authoring code works through a BuildContext: it sets the cursor, adds
games, worlds and levels, and finalizes. Separately built units are
combined with ``link`` (or ``BuildContext.merge_from``).
"""

from levelforge.build.context import BuildContext, CurrentContext, Layer
from levelforge.build.docs import InventoryDocRegistry
from levelforge.build.errors import (
    ContentLoadError,
    ContextError,
    ContextNotSetError,
    DocumentationExistsError,
    GameNotFoundError,
    GameValidationError,
    InvalidLayerError,
    LevelNotFoundError,
    WorldNotFoundError,
)
from levelforge.build.loader import load_content
from levelforge.build.registry import GameRegistry, link

__all__ = [
    "BuildContext",
    "ContentLoadError",
    "ContextError",
    "ContextNotSetError",
    "CurrentContext",
    "DocumentationExistsError",
    "GameNotFoundError",
    "GameRegistry",
    "GameValidationError",
    "InvalidLayerError",
    "InventoryDocRegistry",
    "Layer",
    "LevelNotFoundError",
    "WorldNotFoundError",
    "link",
    "load_content",
]
