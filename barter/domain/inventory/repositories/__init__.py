"""Repository ports (interfaces) for the Inventory bounded context."""

from .inventory_repository import InventoryRepository

__all__ = ["InventoryRepository"]
