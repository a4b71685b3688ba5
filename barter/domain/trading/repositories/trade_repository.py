"""TradeRepository Port - interface for trade persistence.

This is a PORT in Hexagonal Architecture (the domain defines the interface).
The infrastructure layer implements it.
"""

from abc import ABC, abstractmethod
from typing import Optional, Sequence

from ..entities import Trade
from ..value_objects import PartyRole, TradeStatus


class TradeRepository(ABC):
    """Abstract interface for trade persistence.

    Every state change is written as a compare-and-set on
    ``(trade_id, expected_status, version)``. Losers of a race get
    ``ConflictError`` and must re-fetch the trade.

    Example (Infrastructure implements):
        >>> class SQLAlchemyTradeRepository(TradeRepository):
        ...     async def save(self, trade, expected_status):
        ...         result = await self.session.execute(
        ...             update(TradeModel)
        ...             .where(TradeModel.id == trade.id)
        ...             .where(TradeModel.status == expected_status.value)
        ...             .where(TradeModel.version == trade.version)
        ...             .values(...)
        ...         )
        ...         if result.rowcount == 0:
        ...             raise ConflictError(...)

    Example (Domain uses):
        >>> trade = await trade_repo.get_by_id(123)
        >>> trade.accept(by_user_id=7)
        >>> await trade_repo.save(trade, expected_status=TradeStatus.PENDING)
    """

    @abstractmethod
    async def add(self, trade: Trade) -> None:
        """Insert a new trade and assign its ID.

        Args:
            trade: New trade (``trade.id is None``).
        """
        pass

    @abstractmethod
    async def save(self, trade: Trade, expected_status: TradeStatus) -> None:
        """Persist the whole trade as a compare-and-set.

        Args:
            trade: Trade carrying the version it was loaded with.
            expected_status: Status the stored row must still have.

        Raises:
            ConflictError: Stored status or version moved since the read.
        """
        pass

    @abstractmethod
    async def get_by_id(self, trade_id: int) -> Optional[Trade]:
        """Get trade by ID.

        Returns:
            Trade entity or None if not found.
        """
        pass

    @abstractmethod
    async def mark_confirmed(self, trade_id: int, role: PartyRole) -> bool:
        """Set one party's delivery flag with a single-column update.

        Only touches the row while the trade is ACCEPTED and shipping is
        SHIPPED or DELIVERED, so a concurrent confirmation by the other party
        is never overwritten.

        Returns:
            True if a row matched the guard.
        """
        pass

    @abstractmethod
    async def list_for_user(
        self,
        user_id: int,
        status: Optional[TradeStatus] = None,
        role: Optional[PartyRole] = None,
    ) -> list[Trade]:
        """Trades where the user is a party, newest first.

        Args:
            user_id: Proposer or counterpart.
            status: Optional status filter.
            role: Optional filter on the user's side of the trade.
        """
        pass

    @abstractmethod
    async def list_logistics_for_user(self, user_id: int) -> list[Trade]:
        """Accepted trades of the user, i.e. the ones with an open shipping workflow."""
        pass

    @abstractmethod
    async def list_awaiting_materialization(self, limit: int) -> list[Trade]:
        """Accepted trades where both parties confirmed but completion never committed.

        Note:
            Used by the materialization retry worker.
        """
        pass

    @abstractmethod
    async def list_completed_involving_products(
        self, product_ids: Sequence[int]
    ) -> list[Trade]:
        """Completed trades where any of ``product_ids`` was offered or requested."""
        pass
