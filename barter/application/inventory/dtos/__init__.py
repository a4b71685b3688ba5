"""Data Transfer Objects for the inventory application layer."""

from .inventory_dto import InventoryRecordDTO

__all__ = ["InventoryRecordDTO"]
