"""OrderRepository Port - interface for order persistence."""

from abc import ABC, abstractmethod
from typing import Optional

from ..entities import Order
from ..value_objects import OrderStatus


class OrderRepository(ABC):
    """Abstract interface for order persistence.

    ``save`` is a compare-and-set on ``(order_id, expected_status, version)``
    so two sellers' sessions can never both apply a decision.
    """

    @abstractmethod
    async def add(self, order: Order) -> None:
        """Insert a new order and assign its ID."""
        pass

    @abstractmethod
    async def save(self, order: Order, expected_status: OrderStatus) -> None:
        """Persist the order.

        Raises:
            ConflictError: Stored status or version moved since the read.
        """
        pass

    @abstractmethod
    async def get_by_id(self, order_id: int) -> Optional[Order]:
        pass

    @abstractmethod
    async def list_pending_for_seller(self, seller_id: int) -> list[Order]:
        """Orders waiting for the seller's decision, oldest first."""
        pass
