"""SQLAlchemy Unit of Work implementation."""

import logging
from types import TracebackType
from typing import Optional, Type

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from barter.application.shared import UnitOfWork
from barter.domain.inventory import InventoryRepository
from barter.domain.orders import OrderRepository
from barter.domain.trading import TradeRepository
from barter.infrastructure.persistence.sqlalchemy.repositories import (
    SQLAlchemyInventoryRepository,
    SQLAlchemyOrderRepository,
    SQLAlchemyTradeRepository,
)

logger = logging.getLogger(__name__)


class SQLAlchemyUnitOfWork(UnitOfWork):
    """SQLAlchemy implementation of Unit of Work pattern.

    Responsibilities:
    - Manage the SQLAlchemy async session
    - Transaction management (commit/rollback)
    - Automatic rollback on exceptions
    - Lazy initialization of repositories

    A UnitOfWork instance can be entered again after it exited; every
    ``async with`` gets a fresh session and fresh repositories.

    Example:
        >>> session_factory = async_sessionmaker(engine, expire_on_commit=False)
        >>> uow = SQLAlchemyUnitOfWork(session_factory)
        >>>
        >>> async with uow:
        ...     trade = await uow.trades.get_by_id(42)
        ...     trade.complete()
        ...     await uow.trades.save(trade, expected_status=TradeStatus.ACCEPTED)
        ...     await uow.inventory.decrement_stock(10, 2)
        ...     await uow.commit()  # Single commit!
    """

    def __init__(
        self, session_factory: async_sessionmaker[AsyncSession]
    ) -> None:
        """Initialize Unit of Work.

        Args:
            session_factory: SQLAlchemy async session factory.
        """
        self._session_factory = session_factory
        self._session: Optional[AsyncSession] = None

        # Repository instances (lazy initialized)
        self._trades: Optional[TradeRepository] = None
        self._inventory: Optional[InventoryRepository] = None
        self._orders: Optional[OrderRepository] = None

    async def __aenter__(self) -> "SQLAlchemyUnitOfWork":
        """Enter async context manager.

        Creates a new SQLAlchemy session (SQLAlchemy 2.0 auto-begins).

        Returns:
            Self (UnitOfWork instance).
        """
        if self._session is not None:
            raise RuntimeError("Unit of Work is already in use")

        self._session = self._session_factory()
        logger.debug("unit_of_work.started")

        return self

    async def __aexit__(
        self,
        exc_type: Optional[Type[BaseException]],
        exc_val: Optional[BaseException],
        exc_tb: Optional[TracebackType],
    ) -> None:
        """Exit async context manager.

        Note:
            - exc_type not None → rollback
            - Session is always closed; uncommitted work is discarded
        """
        try:
            if exc_type is not None:
                await self.rollback()
                logger.warning(
                    "unit_of_work.rolled_back",
                    extra={"exception_type": exc_type.__name__},
                )
        finally:
            if self._session:
                await self._session.close()
                self._session = None
                self._trades = None  # Clear repository references
                self._inventory = None
                self._orders = None

            logger.debug("unit_of_work.closed")

    async def commit(self) -> None:
        """Commit transaction.

        Raises:
            Exception: If commit failed (DB error, constraint violation, etc.).
        """
        session = self._require_session()

        try:
            await session.commit()
            logger.debug("unit_of_work.committed")
        except Exception as e:
            logger.error("unit_of_work.commit_failed", extra={"error": str(e)})
            await self.rollback()
            raise

    async def rollback(self) -> None:
        """Rollback transaction (discard every change of all repositories)."""
        await self._require_session().rollback()
        logger.debug("unit_of_work.rollback")

    @property
    def trades(self) -> TradeRepository:
        """Get TradeRepository instance (lazy)."""
        if self._trades is None:
            self._trades = SQLAlchemyTradeRepository(self._require_session())
        return self._trades

    @property
    def inventory(self) -> InventoryRepository:
        """Get InventoryRepository instance (lazy)."""
        if self._inventory is None:
            self._inventory = SQLAlchemyInventoryRepository(self._require_session())
        return self._inventory

    @property
    def orders(self) -> OrderRepository:
        """Get OrderRepository instance (lazy)."""
        if self._orders is None:
            self._orders = SQLAlchemyOrderRepository(self._require_session())
        return self._orders

    def _require_session(self) -> AsyncSession:
        if self._session is None:
            raise RuntimeError("Unit of Work not started (use async with)")
        return self._session


# Factory function for dependency injection
def create_unit_of_work(
    session_factory: async_sessionmaker[AsyncSession],
) -> SQLAlchemyUnitOfWork:
    """Factory for creating a Unit of Work.

    Example:
        >>> from sqlalchemy.ext.asyncio import create_async_engine
        >>> engine = create_async_engine("postgresql+asyncpg://...")
        >>> session_factory = async_sessionmaker(engine, expire_on_commit=False)
        >>> uow = create_unit_of_work(session_factory)
    """
    return SQLAlchemyUnitOfWork(session_factory)
