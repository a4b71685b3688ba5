"""Read-side handlers for trades."""

from barter.application.shared import QueryHandler, UnitOfWork
from barter.application.trading.dtos import PerspectiveTradeDTO, TradeDTO
from barter.application.trading.queries import (
    GetCompletedTradesQuery,
    GetLogisticsQuery,
    GetTradeQuery,
    GetUserTradesQuery,
)
from barter.domain.shared import ValidationError
from barter.domain.trading import PartyRole, TradeStatus

from ..common import load_trade


def _parse_role(value: str) -> PartyRole:
    try:
        return PartyRole(value.strip().lower())
    except ValueError:
        raise ValidationError(
            "Role must be 'proposer' or 'counterpart'", role=value
        ) from None


class GetUserTradesHandler(QueryHandler[GetUserTradesQuery, list[TradeDTO]]):
    """List a user's trades, newest first.

    Raises:
        UnknownStatusError: ``status`` is not a trade status.
    """

    def __init__(self, uow: UnitOfWork) -> None:
        self.uow = uow

    async def handle(self, query: GetUserTradesQuery) -> list[TradeDTO]:
        status = TradeStatus.parse(query.status) if query.status else None
        role = _parse_role(query.role) if query.role else None

        async with self.uow:
            trades = await self.uow.trades.list_for_user(
                query.user_id, status=status, role=role
            )
        return [TradeDTO.from_entity(trade) for trade in trades]


class GetLogisticsHandler(QueryHandler[GetLogisticsQuery, list[TradeDTO]]):
    def __init__(self, uow: UnitOfWork) -> None:
        self.uow = uow

    async def handle(self, query: GetLogisticsQuery) -> list[TradeDTO]:
        async with self.uow:
            trades = await self.uow.trades.list_logistics_for_user(query.user_id)
        return [TradeDTO.from_entity(trade) for trade in trades]


class GetCompletedTradesHandler(
    QueryHandler[GetCompletedTradesQuery, list[PerspectiveTradeDTO]]
):
    def __init__(self, uow: UnitOfWork) -> None:
        self.uow = uow

    async def handle(self, query: GetCompletedTradesQuery) -> list[PerspectiveTradeDTO]:
        async with self.uow:
            trades = await self.uow.trades.list_for_user(
                query.user_id, status=TradeStatus.COMPLETED
            )
        return [PerspectiveTradeDTO.for_user(trade, query.user_id) for trade in trades]


class GetTradeHandler(QueryHandler[GetTradeQuery, TradeDTO]):
    """Single trade view.

    Raises:
        AggregateNotFound: No such trade.
        NotTradePartyError: Caller is not a party.
    """

    def __init__(self, uow: UnitOfWork) -> None:
        self.uow = uow

    async def handle(self, query: GetTradeQuery) -> TradeDTO:
        async with self.uow:
            trade = await load_trade(self.uow, query.trade_id)
        trade.role_of(query.user_id)
        return TradeDTO.from_entity(trade)
