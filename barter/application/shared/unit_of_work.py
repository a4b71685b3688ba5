"""Unit of Work pattern - manages transactions.

UnitOfWork provides:
- Atomic operations (all or nothing)
- A transaction boundary
- A single commit per use case
"""

from abc import ABC, abstractmethod
from types import TracebackType
from typing import Optional, Type

from barter.domain.inventory import InventoryRepository
from barter.domain.orders import OrderRepository
from barter.domain.trading import TradeRepository


class UnitOfWork(ABC):
    """Abstract Unit of Work interface.

    - **Atomic**: every change of a use case in one transaction
    - **Consistent**: commit only if everything succeeded
    - **Context Manager**: leaving the block without commit rolls back

    Example (Use case uses):
        >>> async with uow:
        ...     trade = await uow.trades.get_by_id(42)
        ...     trade.complete()
        ...     await uow.trades.save(trade, TradeStatus.ACCEPTED)
        ...     await uow.inventory.decrement_stock(10, 2)
        ...     await uow.commit()  # Single commit for the whole materialization
    """

    trades: TradeRepository
    inventory: InventoryRepository
    orders: OrderRepository

    @abstractmethod
    async def __aenter__(self) -> "UnitOfWork":
        """Enter async context manager (opens a session)."""
        pass

    @abstractmethod
    async def __aexit__(
        self,
        exc_type: Optional[Type[BaseException]],
        exc_val: Optional[BaseException],
        exc_tb: Optional[TracebackType],
    ) -> None:
        """Exit async context manager.

        Note:
            If exc_type is not None, must call rollback().
        """
        pass

    @abstractmethod
    async def commit(self) -> None:
        pass

    @abstractmethod
    async def rollback(self) -> None:
        pass
