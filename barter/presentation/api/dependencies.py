"""Dependency injection for FastAPI.

Provides dependencies for API routes:
- Unit of Work (one per request)
- Event bus
- Command / query handlers
- User authentication (JWT bearer token)
- Per-user trade update feeds (push or poll)
"""

from typing import Annotated, Callable, Literal, TypeVar

from fastapi import Depends, Header, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from barter.application.inventory.handlers import (
    GetProductsForTradeHandler,
    GetProductTradeHistoryHandler,
    GetReceivedProductsHandler,
    GetUserProductsHandler,
    SetTradeAvailabilityHandler,
)
from barter.application.orders.handlers import (
    ConfirmOrRejectOrderHandler,
    GetOrderHistoryHandler,
    GetPendingConfirmationHandler,
    PlaceOrderHandler,
    ProcessPartialOrderHandler,
)
from barter.application.shared import UnitOfWork
from barter.application.trading.handlers import (
    AcceptTradeHandler,
    CancelTradeHandler,
    CompleteTradeHandler,
    ConfirmDeliveryHandler,
    GetCompletedTradesHandler,
    GetLogisticsHandler,
    GetTradeHandler,
    GetUserTradesHandler,
    ProposeTradeHandler,
    RejectTradeHandler,
    UpdateShippingHandler,
    UpdateTradeHandler,
)
from barter.application.trading.notifications import (
    PollingTradeUpdateSource,
    PushTradeUpdateSource,
    TradeUpdateSource,
)
from barter.application.trading.queries import GetTradeQuery, GetUserTradesQuery
from barter.config import get_settings
from barter.domain.shared import ForbiddenActionError
from barter.infrastructure.auth import get_jwt_manager
from barter.infrastructure.messaging import EventBus, get_event_bus
from barter.infrastructure.persistence.sqlalchemy import create_unit_of_work

H = TypeVar("H")

# ============================================================================
# GLOBAL DEPENDENCIES (initialized in main.py)
# ============================================================================

# Database session factory (set at startup)
_session_factory: async_sessionmaker[AsyncSession] | None = None


def init_dependencies(session_factory: async_sessionmaker[AsyncSession]) -> None:
    """Initialize global dependencies.

    Args:
        session_factory: SQLAlchemy async session factory.

    Note:
        Called from the FastAPI lifespan (main.py) and by tests.
    """
    global _session_factory
    _session_factory = session_factory


def get_session_factory() -> async_sessionmaker[AsyncSession]:
    if _session_factory is None:
        raise RuntimeError(
            "Dependencies not initialized. Call init_dependencies() first."
        )
    return _session_factory


# ============================================================================
# AUTHENTICATION
# ============================================================================


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


async def get_current_user_id(
    authorization: Annotated[str | None, Header()] = None,
) -> int:
    """Get current user ID from the Authorization header.

    Args:
        authorization: ``Bearer <jwt>``; the token carries a ``user_id`` claim.

    Returns:
        User ID.

    Raises:
        HTTPException: 401 if the header is missing or the token is invalid.
    """
    if not authorization:
        raise _unauthorized("Missing authorization header")

    parts = authorization.split()
    if len(parts) != 2 or parts[0].lower() != "bearer":
        raise _unauthorized("Invalid authorization header format")

    user_id = get_jwt_manager().user_id_from_token(parts[1])
    if user_id is None:
        raise _unauthorized("Invalid or expired token")

    return user_id


# ============================================================================
# UNIT OF WORK / EVENT BUS
# ============================================================================


async def get_unit_of_work() -> UnitOfWork:
    """Get a Unit of Work for this request.

    Raises:
        RuntimeError: If dependencies not initialized.
    """
    return create_unit_of_work(get_session_factory())


async def get_event_bus_dep() -> EventBus:
    return get_event_bus()


UnitOfWorkDep = Annotated[UnitOfWork, Depends(get_unit_of_work)]
EventBusDep = Annotated[EventBus, Depends(get_event_bus_dep)]


# ============================================================================
# HANDLERS
# ============================================================================


def _command_handler(handler_cls: Callable[..., H]) -> Callable[..., H]:
    """Dependency building ``handler_cls(uow, event_bus)`` per request."""

    async def factory(uow: UnitOfWorkDep, event_bus: EventBusDep) -> H:
        return handler_cls(uow=uow, event_bus=event_bus)

    return factory


def _query_handler(handler_cls: Callable[..., H]) -> Callable[..., H]:
    """Dependency building ``handler_cls(uow)`` per request."""

    async def factory(uow: UnitOfWorkDep) -> H:
        return handler_cls(uow=uow)

    return factory


# ============================================================================
# TRADE UPDATES
# ============================================================================


def create_trade_update_source(
    user_id: int,
    mode: Literal["push", "poll"] = "push",
) -> TradeUpdateSource:
    """Trade change feed for one user.

    ``push`` rides the in-process event bus and only works where the trade
    handlers run in the same process; ``poll`` re-reads the user's trades
    every ``settings.trade_poll_interval`` seconds.

    Example:
        >>> source = create_trade_update_source(user_id=7, mode="poll")
        >>> source.subscribe(refresh_view)
        >>> await source.start()
    """
    session_factory = get_session_factory()

    async def fetch_trade(trade_id: int):
        handler = GetTradeHandler(uow=create_unit_of_work(session_factory))
        try:
            return await handler.handle(GetTradeQuery(trade_id=trade_id, user_id=user_id))
        except ForbiddenActionError:
            # Someone else's trade
            return None

    async def fetch_trades():
        handler = GetUserTradesHandler(uow=create_unit_of_work(session_factory))
        return await handler.handle(GetUserTradesQuery(user_id=user_id))

    if mode == "poll":
        return PollingTradeUpdateSource(
            fetch=fetch_trades,
            interval=get_settings().trade_poll_interval,
        )
    return PushTradeUpdateSource(event_bus=get_event_bus(), fetch_trade=fetch_trade)


# ============================================================================
# TYPE ALIASES (for cleaner route signatures)
# ============================================================================

# User authentication
CurrentUserId = Annotated[int, Depends(get_current_user_id)]

# Trade commands
ProposeTradeHandlerDep = Annotated[ProposeTradeHandler, Depends(_command_handler(ProposeTradeHandler))]
UpdateTradeHandlerDep = Annotated[UpdateTradeHandler, Depends(_command_handler(UpdateTradeHandler))]
AcceptTradeHandlerDep = Annotated[AcceptTradeHandler, Depends(_command_handler(AcceptTradeHandler))]
RejectTradeHandlerDep = Annotated[RejectTradeHandler, Depends(_command_handler(RejectTradeHandler))]
CancelTradeHandlerDep = Annotated[CancelTradeHandler, Depends(_command_handler(CancelTradeHandler))]
UpdateShippingHandlerDep = Annotated[
    UpdateShippingHandler, Depends(_command_handler(UpdateShippingHandler))
]
ConfirmDeliveryHandlerDep = Annotated[
    ConfirmDeliveryHandler, Depends(_command_handler(ConfirmDeliveryHandler))
]
CompleteTradeHandlerDep = Annotated[
    CompleteTradeHandler, Depends(_command_handler(CompleteTradeHandler))
]

# Trade queries
GetUserTradesHandlerDep = Annotated[GetUserTradesHandler, Depends(_query_handler(GetUserTradesHandler))]
GetLogisticsHandlerDep = Annotated[GetLogisticsHandler, Depends(_query_handler(GetLogisticsHandler))]
GetCompletedTradesHandlerDep = Annotated[
    GetCompletedTradesHandler, Depends(_query_handler(GetCompletedTradesHandler))
]
GetTradeHandlerDep = Annotated[GetTradeHandler, Depends(_query_handler(GetTradeHandler))]

# Inventory
SetTradeAvailabilityHandlerDep = Annotated[
    SetTradeAvailabilityHandler, Depends(_query_handler(SetTradeAvailabilityHandler))
]
GetUserProductsHandlerDep = Annotated[
    GetUserProductsHandler, Depends(_query_handler(GetUserProductsHandler))
]
GetProductsForTradeHandlerDep = Annotated[
    GetProductsForTradeHandler, Depends(_query_handler(GetProductsForTradeHandler))
]
GetReceivedProductsHandlerDep = Annotated[
    GetReceivedProductsHandler, Depends(_query_handler(GetReceivedProductsHandler))
]
GetProductTradeHistoryHandlerDep = Annotated[
    GetProductTradeHistoryHandler, Depends(_query_handler(GetProductTradeHistoryHandler))
]

# Orders
PlaceOrderHandlerDep = Annotated[PlaceOrderHandler, Depends(_command_handler(PlaceOrderHandler))]
ConfirmOrRejectOrderHandlerDep = Annotated[
    ConfirmOrRejectOrderHandler, Depends(_command_handler(ConfirmOrRejectOrderHandler))
]
ProcessPartialOrderHandlerDep = Annotated[
    ProcessPartialOrderHandler, Depends(_command_handler(ProcessPartialOrderHandler))
]
GetPendingConfirmationHandlerDep = Annotated[
    GetPendingConfirmationHandler, Depends(_query_handler(GetPendingConfirmationHandler))
]
GetOrderHistoryHandlerDep = Annotated[
    GetOrderHistoryHandler, Depends(_query_handler(GetOrderHistoryHandler))
]
