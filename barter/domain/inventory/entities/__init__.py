"""Entities for the Inventory bounded context."""

from .inventory_record import InventoryRecord

__all__ = ["InventoryRecord"]
