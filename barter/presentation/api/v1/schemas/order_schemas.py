"""Pydantic schemas for Order API requests/responses."""

from datetime import datetime
from decimal import Decimal

from pydantic import Field

from .common import ApiResponse, CamelModel


# ============================================================================
# REQUEST SCHEMAS
# ============================================================================


class OrderItemIn(CamelModel):
    product_id: int = Field(..., gt=0)
    quantity: int = Field(..., ge=1)


class PlaceOrderRequest(CamelModel):
    """Request schema for placing an order.

    Example:
        {"items": [{"productId": 2, "quantity": 5}]}
    """

    items: list[OrderItemIn] = Field(..., min_length=1)


class ConfirmRejectOrderRequest(CamelModel):
    """Whole-order decision; ``reason`` is required for reject."""

    order_id: int = Field(..., gt=0)
    action: str = Field(..., description="confirm | reject")
    reason: str | None = Field(default=None, max_length=2000)


class PartialItemIn(CamelModel):
    product_id: int = Field(..., gt=0)
    quantity: int = Field(..., ge=0)
    confirmed: bool


class ProcessPartialOrderRequest(CamelModel):
    """Request schema for partial fulfillment.

    Example:
        {"orderId": 7, "items": [{"productId": 2, "quantity": 5, "confirmed": true}]}
    """

    order_id: int = Field(..., gt=0)
    items: list[PartialItemIn] = Field(..., min_length=1)


# ============================================================================
# RESPONSE SCHEMAS
# ============================================================================


class OrderLineSchema(CamelModel):
    product_id: int
    name: str
    unit_price: Decimal
    ordered_qty: int
    confirmed_qty: int
    confirmed: bool
    current_stock: int | None = None


class OrderSchema(CamelModel):
    id: int
    buyer_id: int
    seller_id: int
    status: str
    total: Decimal
    rejection_reason: str | None
    items: list[OrderLineSchema]
    created_at: datetime
    updated_at: datetime


class PendingOrderSchema(CamelModel):
    order: OrderSchema
    can_fully_confirm: bool


class OrderHistoryEntrySchema(CamelModel):
    status: str
    note: str | None
    changed_at: datetime


class PlaceOrderResponse(ApiResponse):
    orders: list[OrderSchema]


class OrderDecisionResponse(ApiResponse):
    """Order after a seller decision; ``applied`` is False for a repeat."""

    order: OrderSchema
    applied: bool


class PendingOrdersResponse(ApiResponse):
    orders: list[PendingOrderSchema]


class OrderHistoryResponse(ApiResponse):
    order_id: int
    history: list[OrderHistoryEntrySchema]
