"""Inventory use case handlers."""

import logging

from barter.application.inventory.commands import SetTradeAvailabilityCommand
from barter.application.inventory.dtos import InventoryRecordDTO
from barter.application.inventory.queries import (
    GetProductsForTradeQuery,
    GetProductTradeHistoryQuery,
    GetReceivedProductsQuery,
    GetUserProductsQuery,
)
from barter.application.shared import CommandHandler, QueryHandler, UnitOfWork
from barter.application.trading.dtos import TradeDTO
from barter.domain.shared import AggregateNotFound

logger = logging.getLogger(__name__)


class SetTradeAvailabilityHandler(
    CommandHandler[SetTradeAvailabilityCommand, InventoryRecordDTO]
):
    """Handler for add-for-trade / remove-from-trade.

    Raises:
        AggregateNotFound: No such product.
        NotProductOwnerError: Caller does not own the product.
        InsufficientStockError: Listing a product with no stock left.
    """

    def __init__(self, uow: UnitOfWork) -> None:
        self.uow = uow

    async def handle(self, command: SetTradeAvailabilityCommand) -> InventoryRecordDTO:
        async with self.uow:
            record = await self.uow.inventory.get_by_id(command.product_id)
            if record is None:
                raise AggregateNotFound("Product not found", product_id=command.product_id)

            if command.available:
                record.mark_available_for_trade(by_user_id=command.user_id)
            else:
                record.withdraw_from_trade(by_user_id=command.user_id)

            await self.uow.inventory.save(record)
            await self.uow.commit()

        logger.info(
            "inventory.trade_availability_changed",
            extra={
                "product_id": record.id,
                "owner_id": record.owner_id,
                "available": record.available_for_trade,
            },
        )
        return InventoryRecordDTO.from_entity(record)


class GetUserProductsHandler(QueryHandler[GetUserProductsQuery, list[InventoryRecordDTO]]):
    def __init__(self, uow: UnitOfWork) -> None:
        self.uow = uow

    async def handle(self, query: GetUserProductsQuery) -> list[InventoryRecordDTO]:
        async with self.uow:
            records = await self.uow.inventory.list_by_owner(
                query.user_id, available_only=query.available_only
            )
        return [InventoryRecordDTO.from_entity(record) for record in records]


class GetProductsForTradeHandler(
    QueryHandler[GetProductsForTradeQuery, list[InventoryRecordDTO]]
):
    def __init__(self, uow: UnitOfWork) -> None:
        self.uow = uow

    async def handle(self, query: GetProductsForTradeQuery) -> list[InventoryRecordDTO]:
        async with self.uow:
            records = await self.uow.inventory.list_available_for_trade(
                exclude_owner_id=query.user_id
            )
        return [InventoryRecordDTO.from_entity(record) for record in records]


class GetReceivedProductsHandler(
    QueryHandler[GetReceivedProductsQuery, list[InventoryRecordDTO]]
):
    """Received products carry ``origin = {trade_id, acquired_date}``."""

    def __init__(self, uow: UnitOfWork) -> None:
        self.uow = uow

    async def handle(self, query: GetReceivedProductsQuery) -> list[InventoryRecordDTO]:
        async with self.uow:
            records = await self.uow.inventory.list_received(query.user_id)
        return [InventoryRecordDTO.from_entity(record) for record in records]


class GetProductTradeHistoryHandler(
    QueryHandler[GetProductTradeHistoryQuery, list[TradeDTO]]
):
    """Follow the product's lineage and list every completed trade along it."""

    def __init__(self, uow: UnitOfWork) -> None:
        self.uow = uow

    async def handle(self, query: GetProductTradeHistoryQuery) -> list[TradeDTO]:
        async with self.uow:
            if await self.uow.inventory.get_by_id(query.product_id) is None:
                raise AggregateNotFound("Product not found", product_id=query.product_id)

            lineage = await self.uow.inventory.lineage_ids(query.product_id)
            trades = await self.uow.trades.list_completed_involving_products(lineage)
        return [TradeDTO.from_entity(trade) for trade in trades]
