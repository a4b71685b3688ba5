"""Inventory Bounded Context - Domain Layer.

Exports:
    Entities: InventoryRecord (Aggregate Root)
    Value Objects: Provenance
    Exceptions: InsufficientStockError, NotProductOwnerError
    Repositories: InventoryRepository (interface)
"""

from .entities import InventoryRecord
from .exceptions import InsufficientStockError, NotProductOwnerError
from .repositories import InventoryRepository
from .value_objects import Provenance

__all__ = [
    "InventoryRecord",
    "Provenance",
    "InsufficientStockError",
    "NotProductOwnerError",
    "InventoryRepository",
]
