"""Inventory resolution over finished games."""

from levelforge.inventory.resolver import InventoryResolver, UsageViolation, resolve_inventory

__all__ = ["InventoryResolver", "UsageViolation", "resolve_inventory"]
