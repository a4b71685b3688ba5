"""SQLAlchemy implementation of InventoryRepository."""

from typing import Optional, Sequence

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import aliased

from barter.domain.inventory import InventoryRecord, Provenance
from barter.domain.inventory import InventoryRepository as InventoryRepositoryPort
from barter.domain.shared import AggregateNotFound
from barter.infrastructure.persistence.sqlalchemy.mappers import InventoryRecordMapper
from barter.infrastructure.persistence.sqlalchemy.models import InventoryRecordModel


class SQLAlchemyInventoryRepository(InventoryRepositoryPort):
    """SQLAlchemy implementation of InventoryRepository port.

    Stock only changes through single UPDATE statements whose WHERE clause
    carries the guard (``stock >= quantity``), so concurrent transactions
    can never drive a product below zero or lose each other's updates.

    Example:
        >>> repo = SQLAlchemyInventoryRepository(session)
        >>> await repo.decrement_stock(product_id=10, quantity=2)
        True
    """

    def __init__(self, session: AsyncSession) -> None:
        self._session = session
        self._mapper = InventoryRecordMapper()

    async def add(self, record: InventoryRecord) -> None:
        model = self._mapper.to_model(record)
        self._session.add(model)
        await self._session.flush()

        record.id = model.id
        record.version = model.version

    async def save(self, record: InventoryRecord) -> None:
        """UPDATE descriptive fields and the trade flag.

        Raises:
            AggregateNotFound: Record was deleted.
        """
        model = await self._session.get(
            InventoryRecordModel, record.id, populate_existing=True
        )
        if model is None:
            raise AggregateNotFound("Product not found", product_id=record.id)

        self._mapper.update_model_from_entity(model, record)
        await self._session.flush()

        record.version = model.version

    async def get_by_id(self, product_id: int) -> Optional[InventoryRecord]:
        stmt = (
            select(InventoryRecordModel)
            .where(InventoryRecordModel.id == product_id)
            .execution_options(populate_existing=True)
        )
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()
        if model is None:
            return None

        return self._mapper.to_entity(model)

    async def get_many(self, product_ids: Sequence[int]) -> dict[int, InventoryRecord]:
        if not product_ids:
            return {}

        stmt = select(InventoryRecordModel).where(
            InventoryRecordModel.id.in_(set(product_ids))
        )
        records = await self._fetch(stmt)
        return {record.id: record for record in records}

    async def decrement_stock(self, product_id: int, quantity: int) -> bool:
        stmt = (
            update(InventoryRecordModel)
            .where(InventoryRecordModel.id == product_id)
            .where(InventoryRecordModel.stock >= quantity)
            .values(
                stock=InventoryRecordModel.stock - quantity,
                version=InventoryRecordModel.version + 1,
            )
            .execution_options(synchronize_session=False)
        )
        result = await self._session.execute(stmt)
        return result.rowcount == 1

    async def increment_stock(
        self,
        product_id: int,
        quantity: int,
        origin: Optional[Provenance] = None,
    ) -> None:
        """Add ``quantity`` to stock.

        Raises:
            AggregateNotFound: No such record.
        """
        values = {
            "stock": InventoryRecordModel.stock + quantity,
            "version": InventoryRecordModel.version + 1,
        }
        if origin is not None:
            values["origin_trade_id"] = origin.trade_id
            values["acquired_date"] = origin.acquired_date

        stmt = (
            update(InventoryRecordModel)
            .where(InventoryRecordModel.id == product_id)
            .values(**values)
            .execution_options(synchronize_session=False)
        )
        result = await self._session.execute(stmt)
        if result.rowcount != 1:
            raise AggregateNotFound("Product not found", product_id=product_id)

    async def find_derived(
        self, owner_id: int, source_product_id: int
    ) -> Optional[InventoryRecord]:
        stmt = (
            select(InventoryRecordModel)
            .where(InventoryRecordModel.owner_id == owner_id)
            .where(InventoryRecordModel.source_product_id == source_product_id)
            .execution_options(populate_existing=True)
        )
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()
        if model is None:
            return None

        return self._mapper.to_entity(model)

    async def list_by_owner(
        self, owner_id: int, available_only: bool = False
    ) -> list[InventoryRecord]:
        stmt = select(InventoryRecordModel).where(InventoryRecordModel.owner_id == owner_id)
        if available_only:
            stmt = stmt.where(InventoryRecordModel.available_for_trade.is_(True)).where(
                InventoryRecordModel.stock > 0
            )
        return await self._fetch(stmt.order_by(InventoryRecordModel.id.asc()))

    async def list_available_for_trade(
        self, exclude_owner_id: Optional[int] = None
    ) -> list[InventoryRecord]:
        stmt = (
            select(InventoryRecordModel)
            .where(InventoryRecordModel.available_for_trade.is_(True))
            .where(InventoryRecordModel.stock > 0)
        )
        if exclude_owner_id is not None:
            stmt = stmt.where(InventoryRecordModel.owner_id != exclude_owner_id)
        return await self._fetch(stmt.order_by(InventoryRecordModel.id.asc()))

    async def list_received(self, owner_id: int) -> list[InventoryRecord]:
        stmt = (
            select(InventoryRecordModel)
            .where(InventoryRecordModel.owner_id == owner_id)
            .where(InventoryRecordModel.origin_trade_id.is_not(None))
            .order_by(
                InventoryRecordModel.acquired_date.desc(),
                InventoryRecordModel.id.desc(),
            )
        )
        return await self._fetch(stmt)

    async def lineage_ids(self, product_id: int) -> list[int]:
        """Walk ``source_product_id`` links downwards with a recursive CTE."""
        lineage = (
            select(InventoryRecordModel.id)
            .where(InventoryRecordModel.id == product_id)
            .cte(name="lineage", recursive=True)
        )
        derived = aliased(InventoryRecordModel)
        lineage = lineage.union_all(
            select(derived.id).where(derived.source_product_id == lineage.c.id)
        )

        result = await self._session.execute(select(lineage.c.id))
        return list(result.scalars().all())

    async def _fetch(self, stmt) -> list[InventoryRecord]:
        result = await self._session.execute(
            stmt.execution_options(populate_existing=True)
        )
        return [self._mapper.to_entity(model) for model in result.scalars().all()]
