"""Base Handler classes for Commands and Queries.

Handler - orchestrates domain logic to execute one use case.
"""

from abc import ABC, abstractmethod
from typing import Generic, TypeVar

from .command import Command
from .query import Query

TCommand = TypeVar("TCommand", bound=Command)
TQuery = TypeVar("TQuery", bound=Query)
TResult = TypeVar("TResult")


class CommandHandler(ABC, Generic[TCommand, TResult]):
    """Base class for command handlers.

    A Command Handler:
    - Loads aggregates from repositories
    - Executes domain logic (aggregate methods, domain services)
    - Saves changes through the Unit of Work
    - Publishes domain events after commit

    Example:
        >>> class AcceptTradeHandler(CommandHandler[AcceptTradeCommand, TradeDTO]):
        ...     def __init__(self, uow: UnitOfWork, event_bus: EventBus):
        ...         self.uow = uow
        ...         self.event_bus = event_bus
        ...
        ...     async def handle(self, command: AcceptTradeCommand) -> TradeDTO:
        ...         async with self.uow:
        ...             trade = await self.uow.trades.get_by_id(command.trade_id)
        ...             trade.accept(by_user_id=command.user_id)
        ...             await self.uow.trades.save(trade, TradeStatus.PENDING)
        ...             await self.uow.commit()
        ...         await self.event_bus.publish_all(trade.get_domain_events())
        ...         return TradeDTO.from_entity(trade)
    """

    @abstractmethod
    async def handle(self, command: TCommand) -> TResult:
        """Handle command and return result.

        Raises:
            DomainException: If a business rule is violated.
        """
        pass


class QueryHandler(ABC, Generic[TQuery, TResult]):
    """Base class for query handlers.

    A Query Handler fetches data from repositories, shapes it into DTOs and
    has NO side effects.

    Example:
        >>> class GetUserTradesHandler(QueryHandler[GetUserTradesQuery, list[TradeDTO]]):
        ...     async def handle(self, query: GetUserTradesQuery) -> list[TradeDTO]:
        ...         async with self.uow:
        ...             trades = await self.uow.trades.list_for_user(query.user_id)
        ...         return [TradeDTO.from_entity(t) for t in trades]
    """

    @abstractmethod
    async def handle(self, query: TQuery) -> TResult:
        """Handle query and return result.

        Note:
            Queries MUST NOT have side effects.
        """
        pass
