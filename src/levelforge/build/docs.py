"""Append-only registry of inventory documentation.

Levels reference items by ``(name, kind)`` only; the registry is shared by
every level and game of a build and never owned by any of them.
"""

from __future__ import annotations

from levelforge.build.errors import DocumentationExistsError
from levelforge.models.ids import InventoryKind, ItemKey
from levelforge.models.inventory import InventoryDocEntry
from levelforge.observability.logging import get_logger

log = get_logger(__name__)


class InventoryDocRegistry:
    """Documentation entries keyed by ItemKey."""

    def __init__(self) -> None:
        self._entries: dict[ItemKey, InventoryDocEntry] = {}

    def register(self, entry: InventoryDocEntry) -> None:
        """Document an item.

        Raises:
            DocumentationExistsError: If the item is already documented with
                different content. Re-registering an identical entry is a no-op.
        """
        existing = self._entries.get(entry.key)
        if existing is not None:
            if existing == entry:
                return
            raise DocumentationExistsError(entry.name, entry.kind)
        self._entries[entry.key] = entry
        log.debug("inventory_documented", name=entry.name, kind=str(entry.kind))

    def get(self, name: str, kind: InventoryKind) -> InventoryDocEntry | None:
        return self._entries.get(ItemKey(name, InventoryKind(kind)))

    def entries(self, kind: InventoryKind | None = None) -> list[InventoryDocEntry]:
        """Entries in registration order, optionally filtered by kind."""
        return [e for e in self._entries.values() if kind is None or e.kind == kind]

    def merge(self, incoming: InventoryDocRegistry) -> InventoryDocRegistry:
        """New registry holding this registry's entries plus *incoming*'s.

        Raises:
            DocumentationExistsError: If both document an item differently.
        """
        merged = InventoryDocRegistry()
        for entry in [*self._entries.values(), *incoming._entries.values()]:
            merged.register(entry)
        return merged

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    def __len__(self) -> int:
        return len(self._entries)
