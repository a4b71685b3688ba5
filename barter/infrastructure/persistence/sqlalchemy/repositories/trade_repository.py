"""SQLAlchemy implementation of TradeRepository."""

from typing import Optional, Sequence

from sqlalchemy import or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from barter.domain.shared import ConflictError
from barter.domain.trading.entities import Trade
from barter.domain.trading.repositories import TradeRepository as TradeRepositoryPort
from barter.domain.trading.value_objects import PartyRole, ShippingStatus, TradeStatus
from barter.infrastructure.persistence.sqlalchemy.mappers import TradeMapper
from barter.infrastructure.persistence.sqlalchemy.models import TradeModel

_CONFIRMATION_COLUMNS = {
    PartyRole.PROPOSER: "proposer_confirmed",
    PartyRole.COUNTERPART: "counterpart_confirmed",
}


class SQLAlchemyTradeRepository(TradeRepositoryPort):
    """SQLAlchemy implementation of TradeRepository port.

    Uses:
    - AsyncSession for async DB operations
    - TradeMapper for Domain ↔ ORM conversion
    - Core UPDATE statements for every state change, guarded by
      ``(id, version, status)`` so a lost race shows up as rowcount 0

    Example:
        >>> async with AsyncSession(engine) as session:
        ...     repo = SQLAlchemyTradeRepository(session)
        ...     trade = await repo.get_by_id(123)
        ...     trade.accept(by_user_id=7)
        ...     await repo.save(trade, expected_status=TradeStatus.PENDING)
        ...     await session.commit()
    """

    def __init__(self, session: AsyncSession) -> None:
        """Initialize repository.

        Args:
            session: SQLAlchemy async session.
        """
        self._session = session
        self._mapper = TradeMapper()

    async def add(self, trade: Trade) -> None:
        """INSERT a new trade.

        Args:
            trade: Trade entity without ID; receives ID and version 1.
        """
        model = self._mapper.to_model(trade)
        self._session.add(model)
        await self._session.flush()  # Get generated ID

        trade.id = model.id
        trade.version = model.version

    async def save(self, trade: Trade, expected_status: TradeStatus) -> None:
        """UPDATE trade as a compare-and-set.

        Args:
            trade: Trade entity carrying the version it was read with.
            expected_status: Status the stored row must still have.

        Raises:
            ConflictError: Another transaction changed the trade first.
        """
        stmt = (
            update(TradeModel)
            .where(TradeModel.id == trade.id)
            .where(TradeModel.version == trade.version)
            .where(TradeModel.status == expected_status.value)
            .values(**self._mapper.to_values(trade), version=TradeModel.version + 1)
            .execution_options(synchronize_session=False)
        )
        result = await self._session.execute(stmt)

        if result.rowcount != 1:
            raise ConflictError(
                "Trade was modified concurrently, re-fetch and retry",
                trade_id=trade.id,
                expected_status=expected_status.value,
                expected_version=trade.version,
            )

        trade.version += 1

    async def get_by_id(self, trade_id: int) -> Optional[Trade]:
        """Get trade by ID.

        Args:
            trade_id: Trade ID.

        Returns:
            Trade entity or None.
        """
        stmt = (
            select(TradeModel)
            .where(TradeModel.id == trade_id)
            .execution_options(populate_existing=True)
        )
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()
        if model is None:
            return None

        return self._mapper.to_entity(model)

    async def mark_confirmed(self, trade_id: int, role: PartyRole) -> bool:
        """Set one delivery flag; the other party's flag is never written.

        Args:
            trade_id: Trade ID.
            role: Side of the trade that received its goods.

        Returns:
            True if the trade was still ACCEPTED and SHIPPED / DELIVERED.
        """
        stmt = (
            update(TradeModel)
            .where(TradeModel.id == trade_id)
            .where(TradeModel.status == TradeStatus.ACCEPTED.value)
            .where(
                TradeModel.shipping_status.in_(
                    [ShippingStatus.SHIPPED.value, ShippingStatus.DELIVERED.value]
                )
            )
            .values({_CONFIRMATION_COLUMNS[role]: True, "version": TradeModel.version + 1})
            .execution_options(synchronize_session=False)
        )
        result = await self._session.execute(stmt)
        return result.rowcount == 1

    async def list_for_user(
        self,
        user_id: int,
        status: Optional[TradeStatus] = None,
        role: Optional[PartyRole] = None,
    ) -> list[Trade]:
        """Get trades where the user is a party, newest first.

        Args:
            user_id: User ID.
            status: Optional status filter.
            role: Optional side filter (proposer / counterpart).

        Returns:
            List of trades.
        """
        if role == PartyRole.PROPOSER:
            party = TradeModel.proposer_id == user_id
        elif role == PartyRole.COUNTERPART:
            party = TradeModel.counterpart_id == user_id
        else:
            party = or_(
                TradeModel.proposer_id == user_id,
                TradeModel.counterpart_id == user_id,
            )

        stmt = select(TradeModel).where(party)
        if status is not None:
            stmt = stmt.where(TradeModel.status == status.value)
        stmt = stmt.order_by(TradeModel.created_at.desc(), TradeModel.id.desc())

        return await self._fetch(stmt)

    async def list_logistics_for_user(self, user_id: int) -> list[Trade]:
        """Get ACCEPTED trades of the user (open shipping workflow)."""
        return await self.list_for_user(user_id, status=TradeStatus.ACCEPTED)

    async def list_awaiting_materialization(self, limit: int) -> list[Trade]:
        """Get ACCEPTED trades with both deliveries confirmed, oldest first.

        Args:
            limit: Max trades per batch.
        """
        stmt = (
            select(TradeModel)
            .where(TradeModel.status == TradeStatus.ACCEPTED.value)
            .where(TradeModel.proposer_confirmed.is_(True))
            .where(TradeModel.counterpart_confirmed.is_(True))
            .order_by(TradeModel.id.asc())
            .limit(limit)
        )
        return await self._fetch(stmt)

    async def list_completed_involving_products(
        self, product_ids: Sequence[int]
    ) -> list[Trade]:
        """Get COMPLETED trades where any of the products changed hands."""
        if not product_ids:
            return []

        stmt = (
            select(TradeModel)
            .where(TradeModel.status == TradeStatus.COMPLETED.value)
            .where(
                or_(
                    TradeModel.offered_product_id.in_(product_ids),
                    TradeModel.requested_product_id.in_(product_ids),
                )
            )
            .order_by(TradeModel.completed_at.desc(), TradeModel.id.desc())
        )
        return await self._fetch(stmt)

    async def _fetch(self, stmt) -> list[Trade]:
        result = await self._session.execute(
            stmt.execution_options(populate_existing=True)
        )
        models = result.scalars().all()

        return [self._mapper.to_entity(model) for model in models]
