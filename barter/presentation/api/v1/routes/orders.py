"""Order API routes - placement and seller-side fulfillment."""

import logging

from fastapi import APIRouter, status

from barter.application.orders.commands import (
    ConfirmOrRejectOrderCommand,
    OrderItemRequest,
    PartialLineRequest,
    PlaceOrderCommand,
    ProcessPartialOrderCommand,
)
from barter.application.orders.queries import (
    GetOrderHistoryQuery,
    GetPendingConfirmationQuery,
)
from barter.presentation.api.dependencies import (
    ConfirmOrRejectOrderHandlerDep,
    CurrentUserId,
    GetOrderHistoryHandlerDep,
    GetPendingConfirmationHandlerDep,
    PlaceOrderHandlerDep,
    ProcessPartialOrderHandlerDep,
)
from barter.presentation.api.v1.schemas.common import ErrorResponse
from barter.presentation.api.v1.schemas.order_schemas import (
    ConfirmRejectOrderRequest,
    OrderDecisionResponse,
    OrderHistoryEntrySchema,
    OrderHistoryResponse,
    OrderSchema,
    PendingOrderSchema,
    PendingOrdersResponse,
    PlaceOrderRequest,
    PlaceOrderResponse,
    ProcessPartialOrderRequest,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/order", tags=["Orders"])

_ERRORS = {
    400: {"model": ErrorResponse, "description": "Validation failed"},
    401: {"model": ErrorResponse, "description": "Unauthorized"},
    403: {"model": ErrorResponse, "description": "Caller is not the seller"},
    404: {"model": ErrorResponse, "description": "Order or product not found"},
    409: {"model": ErrorResponse, "description": "A different decision was already applied"},
    503: {"model": ErrorResponse, "description": "Processing rolled back"},
}


@router.post(
    "/place",
    response_model=PlaceOrderResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Place an order",
    description="Creates one `Pending Confirmation` order per seller. "
    "Stock is checked when the seller decides, not here.",
    responses=_ERRORS,
)
async def place_order(
    request: PlaceOrderRequest,
    user_id: CurrentUserId,
    handler: PlaceOrderHandlerDep,
) -> PlaceOrderResponse:
    orders = await handler.handle(
        PlaceOrderCommand(
            buyer_id=user_id,
            items=tuple(
                OrderItemRequest(product_id=item.product_id, quantity=item.quantity)
                for item in request.items
            ),
        )
    )
    return PlaceOrderResponse(
        message="Order placed",
        orders=[OrderSchema.model_validate(order) for order in orders],
    )


@router.get(
    "/pending-confirmation",
    response_model=PendingOrdersResponse,
    summary="Orders waiting for my decision",
    description="Lines carry `currentStock`; when `canFullyConfirm` is false only "
    "reject and partial processing are possible.",
)
async def pending_confirmation(
    user_id: CurrentUserId,
    handler: GetPendingConfirmationHandlerDep,
) -> PendingOrdersResponse:
    pending = await handler.handle(GetPendingConfirmationQuery(seller_id=user_id))
    return PendingOrdersResponse(
        orders=[PendingOrderSchema.model_validate(entry) for entry in pending]
    )


@router.post(
    "/confirm-reject",
    response_model=OrderDecisionResponse,
    summary="Confirm or reject a whole order",
    responses=_ERRORS,
)
async def confirm_reject(
    request: ConfirmRejectOrderRequest,
    user_id: CurrentUserId,
    handler: ConfirmOrRejectOrderHandlerDep,
) -> OrderDecisionResponse:
    logger.info(
        "api.confirm_reject.started",
        extra={"user_id": user_id, "order_id": request.order_id, "action": request.action},
    )
    result = await handler.handle(
        ConfirmOrRejectOrderCommand(
            order_id=request.order_id,
            seller_id=user_id,
            action=request.action,
            reason=request.reason,
        )
    )
    return OrderDecisionResponse(
        message=f"Order {result.order.status}" if result.applied else "Decision already applied",
        order=OrderSchema.model_validate(result.order),
        applied=result.applied,
    )


@router.post(
    "/process-partial",
    response_model=OrderDecisionResponse,
    summary="Fulfill an order partially",
    description="Each line gets `confirmedQty = confirmed ? min(quantity, orderedQty, stock) : 0`. "
    "All stock changes commit together or not at all.",
    responses=_ERRORS,
)
async def process_partial(
    request: ProcessPartialOrderRequest,
    user_id: CurrentUserId,
    handler: ProcessPartialOrderHandlerDep,
) -> OrderDecisionResponse:
    logger.info(
        "api.process_partial.started",
        extra={"user_id": user_id, "order_id": request.order_id, "lines": len(request.items)},
    )
    result = await handler.handle(
        ProcessPartialOrderCommand(
            order_id=request.order_id,
            seller_id=user_id,
            items=tuple(
                PartialLineRequest(
                    product_id=item.product_id,
                    quantity=item.quantity,
                    confirmed=item.confirmed,
                )
                for item in request.items
            ),
        )
    )
    return OrderDecisionResponse(
        message=f"Order {result.order.status}" if result.applied else "Decision already applied",
        order=OrderSchema.model_validate(result.order),
        applied=result.applied,
    )


@router.get(
    "/history/{order_id}",
    response_model=OrderHistoryResponse,
    summary="Status history of an order",
    responses=_ERRORS,
)
async def order_history(
    order_id: int,
    user_id: CurrentUserId,
    handler: GetOrderHistoryHandlerDep,
) -> OrderHistoryResponse:
    history = await handler.handle(GetOrderHistoryQuery(order_id=order_id, user_id=user_id))
    return OrderHistoryResponse(
        order_id=order_id,
        history=[OrderHistoryEntrySchema.model_validate(entry) for entry in history],
    )
