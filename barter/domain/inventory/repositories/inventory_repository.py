"""InventoryRepository Port - interface for inventory persistence."""

from abc import ABC, abstractmethod
from typing import Optional, Sequence

from ..entities import InventoryRecord
from ..value_objects import Provenance


class InventoryRepository(ABC):
    """Abstract interface for inventory persistence.

    Stock never goes through ``save()``. Counts only change through
    ``decrement_stock`` / ``increment_stock``, which are single conditional
    UPDATE statements.

    Example:
        >>> if not await uow.inventory.decrement_stock(product_id=10, quantity=2):
        ...     raise InsufficientStockError("Not enough stock", product_id=10)
    """

    @abstractmethod
    async def add(self, record: InventoryRecord) -> None:
        """Insert a new record (stock included) and assign its ID."""
        pass

    @abstractmethod
    async def save(self, record: InventoryRecord) -> None:
        """Persist descriptive fields and the trade flag. Stock is not written."""
        pass

    @abstractmethod
    async def get_by_id(self, product_id: int) -> Optional[InventoryRecord]:
        pass

    @abstractmethod
    async def get_many(self, product_ids: Sequence[int]) -> dict[int, InventoryRecord]:
        """Records by ID; missing IDs are absent from the result."""
        pass

    @abstractmethod
    async def decrement_stock(self, product_id: int, quantity: int) -> bool:
        """``stock = stock - quantity`` guarded by ``stock >= quantity``.

        Returns:
            False when the guard failed (not enough stock, or no such product).
        """
        pass

    @abstractmethod
    async def increment_stock(
        self,
        product_id: int,
        quantity: int,
        origin: Optional[Provenance] = None,
    ) -> None:
        """Add to stock; with ``origin`` also re-tags the record's provenance."""
        pass

    @abstractmethod
    async def find_derived(
        self, owner_id: int, source_product_id: int
    ) -> Optional[InventoryRecord]:
        """The owner's record derived from ``source_product_id``, if any."""
        pass

    @abstractmethod
    async def list_by_owner(
        self, owner_id: int, available_only: bool = False
    ) -> list[InventoryRecord]:
        pass

    @abstractmethod
    async def list_available_for_trade(
        self, exclude_owner_id: Optional[int] = None
    ) -> list[InventoryRecord]:
        """Products flagged for trade with stock left, excluding one owner's."""
        pass

    @abstractmethod
    async def list_received(self, owner_id: int) -> list[InventoryRecord]:
        """The owner's records that came from completed trades."""
        pass

    @abstractmethod
    async def lineage_ids(self, product_id: int) -> list[int]:
        """``product_id`` plus every record transitively derived from it."""
        pass
