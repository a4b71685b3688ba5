"""Trade API routes - negotiation, lifecycle, logistics and inventory views.

Every endpoint requires a bearer token; the caller's user ID is passed
explicitly into each command. Domain errors are mapped to HTTP status codes
by the exception handlers in main.py.
"""

import logging

from typing import Annotated

from fastapi import APIRouter, Query, status

from barter.application.inventory.commands import SetTradeAvailabilityCommand
from barter.application.inventory.queries import (
    GetProductsForTradeQuery,
    GetReceivedProductsQuery,
    GetUserProductsQuery,
)
from barter.application.trading.commands import (
    AcceptTradeCommand,
    CancelTradeCommand,
    CompleteTradeCommand,
    ConfirmDeliveryCommand,
    ProposeTradeCommand,
    RejectTradeCommand,
    UpdateShippingCommand,
    UpdateTradeCommand,
)
from barter.application.trading.dtos import DeliveryConfirmationResult
from barter.application.trading.queries import (
    GetCompletedTradesQuery,
    GetLogisticsQuery,
    GetTradeQuery,
    GetUserTradesQuery,
)
from barter.domain.shared import ForbiddenActionError
from barter.presentation.api.dependencies import (
    AcceptTradeHandlerDep,
    CancelTradeHandlerDep,
    CompleteTradeHandlerDep,
    ConfirmDeliveryHandlerDep,
    CurrentUserId,
    GetCompletedTradesHandlerDep,
    GetLogisticsHandlerDep,
    GetProductsForTradeHandlerDep,
    GetReceivedProductsHandlerDep,
    GetTradeHandlerDep,
    GetUserProductsHandlerDep,
    GetUserTradesHandlerDep,
    ProposeTradeHandlerDep,
    RejectTradeHandlerDep,
    SetTradeAvailabilityHandlerDep,
    UpdateShippingHandlerDep,
    UpdateTradeHandlerDep,
)
from barter.presentation.api.v1.schemas.common import ErrorResponse
from barter.presentation.api.v1.schemas.inventory_schemas import (
    ProductListResponse,
    ProductResponse,
    ProductSchema,
)
from barter.presentation.api.v1.schemas.trade_schemas import (
    CompletedTradesResponse,
    DeliveryConfirmationResponse,
    InitiateTradeRequest,
    MaterializationSchema,
    PerspectiveTradeSchema,
    ProductIdRequest,
    RejectTradeRequest,
    ShippingUpdateRequest,
    TradeIdRequest,
    TradeListResponse,
    TradeResponse,
    TradeSchema,
    UpdateTradeRequest,
)

logger = logging.getLogger(__name__)

# Create router
router = APIRouter(prefix="/trades", tags=["Trades"])

_ERRORS = {
    400: {"model": ErrorResponse, "description": "Validation failed"},
    401: {"model": ErrorResponse, "description": "Unauthorized"},
    403: {"model": ErrorResponse, "description": "Caller may not perform this action"},
    404: {"model": ErrorResponse, "description": "Trade or product not found"},
    409: {"model": ErrorResponse, "description": "Invalid transition or concurrent update"},
}


def _confirmation_response(
    result: DeliveryConfirmationResult, message: str
) -> DeliveryConfirmationResponse:
    return DeliveryConfirmationResponse(
        message=message,
        trade=TradeSchema.model_validate(result.trade),
        newly_confirmed=result.newly_confirmed,
        materialization=(
            MaterializationSchema.model_validate(result.materialization)
            if result.materialization
            else None
        ),
        materialization_deferred=result.materialization_deferred,
    )


# ============================================================================
# NEGOTIATION
# ============================================================================


@router.post(
    "/initiate",
    response_model=TradeResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Propose a barter trade",
    description="""
    Offer some of your product in exchange for another user's product.

    **Validation** (against current stock):
    - You own `productIdFrom`; `productIdTo` belongs to someone else
    - `1 <= quantityFrom <= stock(productIdFrom)`
    - `1 <= quantityTo <= stock(productIdTo)`

    The response carries the advisory fairness ratio
    (`offeredValue / requestedValue`, 2 decimals).
    """,
    responses=_ERRORS,
)
async def initiate_trade(
    request: InitiateTradeRequest,
    user_id: CurrentUserId,
    handler: ProposeTradeHandlerDep,
) -> TradeResponse:
    """Propose trade endpoint."""
    logger.info(
        "api.initiate_trade.started",
        extra={
            "user_id": user_id,
            "product_id_from": request.product_id_from,
            "product_id_to": request.product_id_to,
        },
    )

    if request.seller_from != user_id:
        raise ForbiddenActionError(
            "sellerFrom must be the authenticated user",
            user_id=user_id,
            seller_from=request.seller_from,
        )

    trade = await handler.handle(
        ProposeTradeCommand(
            proposer_id=user_id,
            offered_product_id=request.product_id_from,
            requested_product_id=request.product_id_to,
            qty_offered=request.quantity_from,
            qty_requested=request.quantity_to,
            counterpart_id=request.seller_to,
            notes=request.notes,
        )
    )

    return TradeResponse(message="Trade proposed", trade=TradeSchema.model_validate(trade))


@router.post(
    "/update",
    response_model=TradeResponse,
    summary="Revise a pending trade",
    description="The proposer may change both quantities while the trade is pending. "
    "The fairness ratio is recomputed from current prices.",
    responses=_ERRORS,
)
async def update_trade(
    request: UpdateTradeRequest,
    user_id: CurrentUserId,
    handler: UpdateTradeHandlerDep,
) -> TradeResponse:
    trade = await handler.handle(
        UpdateTradeCommand(
            trade_id=request.trade_id,
            user_id=user_id,
            qty_offered=request.quantity_from,
            qty_requested=request.quantity_to,
        )
    )
    return TradeResponse(message="Trade updated", trade=TradeSchema.model_validate(trade))


# ============================================================================
# LIFECYCLE
# ============================================================================


@router.post("/accept", response_model=TradeResponse, summary="Accept a trade", responses=_ERRORS)
async def accept_trade(
    request: TradeIdRequest,
    user_id: CurrentUserId,
    handler: AcceptTradeHandlerDep,
) -> TradeResponse:
    trade = await handler.handle(AcceptTradeCommand(trade_id=request.trade_id, user_id=user_id))
    return TradeResponse(message="Trade accepted", trade=TradeSchema.model_validate(trade))


@router.post("/reject", response_model=TradeResponse, summary="Reject a trade", responses=_ERRORS)
async def reject_trade(
    request: RejectTradeRequest,
    user_id: CurrentUserId,
    handler: RejectTradeHandlerDep,
) -> TradeResponse:
    trade = await handler.handle(
        RejectTradeCommand(trade_id=request.trade_id, user_id=user_id, reason=request.reason)
    )
    return TradeResponse(message="Trade rejected", trade=TradeSchema.model_validate(trade))


@router.post("/cancel", response_model=TradeResponse, summary="Cancel a trade", responses=_ERRORS)
async def cancel_trade(
    request: TradeIdRequest,
    user_id: CurrentUserId,
    handler: CancelTradeHandlerDep,
) -> TradeResponse:
    trade = await handler.handle(CancelTradeCommand(trade_id=request.trade_id, user_id=user_id))
    return TradeResponse(message="Trade cancelled", trade=TradeSchema.model_validate(trade))


@router.post(
    "/complete",
    response_model=DeliveryConfirmationResponse,
    summary="Complete a trade",
    description="Manual trigger; only succeeds once both parties confirmed delivery. "
    "Completing an already completed trade is a no-op.",
    responses={**_ERRORS, 503: {"model": ErrorResponse, "description": "Rolled back"}},
)
async def complete_trade(
    request: TradeIdRequest,
    user_id: CurrentUserId,
    handler: CompleteTradeHandlerDep,
) -> DeliveryConfirmationResponse:
    result = await handler.handle(CompleteTradeCommand(trade_id=request.trade_id, user_id=user_id))
    message = (
        "Trade was already completed"
        if result.materialization and result.materialization.already_materialized
        else "Trade completed"
    )
    return _confirmation_response(result, message)


# ============================================================================
# LOGISTICS
# ============================================================================


@router.post(
    "/shipping/update",
    response_model=TradeResponse,
    summary="Update shipping status",
    description="`shipped` requires `trackingNumber` and `courier`.",
    responses=_ERRORS,
)
async def update_shipping(
    request: ShippingUpdateRequest,
    user_id: CurrentUserId,
    handler: UpdateShippingHandlerDep,
) -> TradeResponse:
    trade = await handler.handle(
        UpdateShippingCommand(
            trade_id=request.trade_id,
            user_id=user_id,
            status=request.status,
            tracking_number=request.tracking_number,
            courier=request.courier,
            notes=request.notes,
        )
    )
    return TradeResponse(message="Shipping updated", trade=TradeSchema.model_validate(trade))


@router.post(
    "/confirm-delivery",
    response_model=DeliveryConfirmationResponse,
    summary="Confirm receipt of your goods",
    description="Idempotent per caller. When both parties confirmed, the trade "
    "is completed and inventory moves in the same request. If moving the stock "
    "rolls back, the confirmation still stands and materializationDeferred is set.",
    responses=_ERRORS,
)
async def confirm_delivery(
    request: TradeIdRequest,
    user_id: CurrentUserId,
    handler: ConfirmDeliveryHandlerDep,
) -> DeliveryConfirmationResponse:
    result = await handler.handle(
        ConfirmDeliveryCommand(trade_id=request.trade_id, user_id=user_id)
    )

    if result.materialization is not None:
        message = "Trade completed"
    elif result.materialization_deferred:
        message = "Delivery confirmed, completion will be retried"
    elif result.newly_confirmed:
        message = "Delivery confirmed, waiting for the other party"
    else:
        message = "Delivery was already confirmed"
    return _confirmation_response(result, message)


# ============================================================================
# READ VIEWS (static paths first, /{trade_id} last)
# ============================================================================


@router.get("", response_model=TradeListResponse, summary="List my trades")
async def list_trades(
    user_id: CurrentUserId,
    handler: GetUserTradesHandlerDep,
    status_filter: Annotated[str | None, Query(alias="status")] = None,
    role: str | None = None,
) -> TradeListResponse:
    trades = await handler.handle(
        GetUserTradesQuery(user_id=user_id, status=status_filter, role=role)
    )
    return TradeListResponse(trades=[TradeSchema.model_validate(t) for t in trades])


@router.get("/logistics", response_model=TradeListResponse, summary="Accepted trades in shipping")
async def list_logistics(
    user_id: CurrentUserId,
    handler: GetLogisticsHandlerDep,
) -> TradeListResponse:
    trades = await handler.handle(GetLogisticsQuery(user_id=user_id))
    return TradeListResponse(trades=[TradeSchema.model_validate(t) for t in trades])


@router.get(
    "/completed",
    response_model=CompletedTradesResponse,
    summary="Completed trades from my perspective",
)
async def list_completed(
    user_id: CurrentUserId,
    handler: GetCompletedTradesHandlerDep,
) -> CompletedTradesResponse:
    trades = await handler.handle(GetCompletedTradesQuery(user_id=user_id))
    return CompletedTradesResponse(
        trades=[PerspectiveTradeSchema.model_validate(t) for t in trades]
    )


@router.get(
    "/received-products",
    response_model=ProductListResponse,
    summary="Inventory I received through trades",
)
async def list_received_products(
    user_id: CurrentUserId,
    handler: GetReceivedProductsHandlerDep,
) -> ProductListResponse:
    products = await handler.handle(GetReceivedProductsQuery(user_id=user_id))
    return ProductListResponse(products=[ProductSchema.model_validate(p) for p in products])


@router.get(
    "/current-user-products",
    response_model=ProductListResponse,
    summary="My products available for trade",
)
async def list_current_user_products(
    user_id: CurrentUserId,
    handler: GetUserProductsHandlerDep,
    available_only: bool = True,
) -> ProductListResponse:
    products = await handler.handle(
        GetUserProductsQuery(user_id=user_id, available_only=available_only)
    )
    return ProductListResponse(products=[ProductSchema.model_validate(p) for p in products])


@router.get(
    "/products-for-trade",
    response_model=ProductListResponse,
    summary="Other users' products available for trade",
)
async def list_products_for_trade(
    user_id: CurrentUserId,
    handler: GetProductsForTradeHandlerDep,
) -> ProductListResponse:
    products = await handler.handle(GetProductsForTradeQuery(user_id=user_id))
    return ProductListResponse(products=[ProductSchema.model_validate(p) for p in products])


@router.post(
    "/add-for-trade",
    response_model=ProductResponse,
    summary="Offer my product for trade",
    responses=_ERRORS,
)
async def add_for_trade(
    request: ProductIdRequest,
    user_id: CurrentUserId,
    handler: SetTradeAvailabilityHandlerDep,
) -> ProductResponse:
    product = await handler.handle(
        SetTradeAvailabilityCommand(product_id=request.product_id, user_id=user_id, available=True)
    )
    return ProductResponse(
        message="Product is available for trade", product=ProductSchema.model_validate(product)
    )


@router.post(
    "/remove-from-trade",
    response_model=ProductResponse,
    summary="Withdraw my product from trade",
    responses=_ERRORS,
)
async def remove_from_trade(
    request: ProductIdRequest,
    user_id: CurrentUserId,
    handler: SetTradeAvailabilityHandlerDep,
) -> ProductResponse:
    product = await handler.handle(
        SetTradeAvailabilityCommand(product_id=request.product_id, user_id=user_id, available=False)
    )
    return ProductResponse(
        message="Product was removed from trade", product=ProductSchema.model_validate(product)
    )


@router.get(
    "/{trade_id}",
    response_model=TradeResponse,
    summary="Get one of my trades",
    responses=_ERRORS,
)
async def get_trade(
    trade_id: int,
    user_id: CurrentUserId,
    handler: GetTradeHandlerDep,
) -> TradeResponse:
    trade = await handler.handle(GetTradeQuery(trade_id=trade_id, user_id=user_id))
    return TradeResponse(trade=TradeSchema.model_validate(trade))
