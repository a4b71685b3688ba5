"""Application services for the trading flow."""

from .inventory_materializer import InventoryMaterializer

__all__ = ["InventoryMaterializer"]
