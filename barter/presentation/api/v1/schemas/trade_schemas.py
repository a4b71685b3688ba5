"""Pydantic schemas for Trade API requests/responses."""

from datetime import datetime
from decimal import Decimal

from pydantic import Field, field_validator

from .common import ApiResponse, CamelModel


# ============================================================================
# REQUEST SCHEMAS
# ============================================================================


class InitiateTradeRequest(CamelModel):
    """Request schema for proposing a barter trade.

    Example:
        {
            "sellerFrom": 1,
            "sellerTo": 2,
            "productIdFrom": 10,
            "productIdTo": 20,
            "quantityFrom": 2,
            "quantityTo": 1
        }
    """

    seller_from: int = Field(..., gt=0, description="Proposer (must be the caller)")
    seller_to: int | None = Field(
        default=None, gt=0, description="Owner of the requested product"
    )
    product_id_from: int = Field(..., gt=0, description="Offered product")
    product_id_to: int = Field(..., gt=0, description="Requested product")
    quantity_from: int = Field(..., description="Offered quantity")
    quantity_to: int = Field(..., description="Requested quantity")
    notes: str | None = Field(default=None, max_length=2000)


class UpdateTradeRequest(CamelModel):
    """Request schema for revising the quantities of a pending trade."""

    trade_id: int = Field(..., gt=0)
    quantity_from: int
    quantity_to: int


class TradeIdRequest(CamelModel):
    trade_id: int = Field(..., gt=0)


class RejectTradeRequest(TradeIdRequest):
    reason: str | None = Field(default=None, max_length=2000)


class ShippingUpdateRequest(CamelModel):
    """Request schema for a shipping status update.

    Example:
        {
            "tradeId": 42,
            "status": "shipped",
            "trackingNumber": "RR123456789UA",
            "courier": "Nova Poshta"
        }
    """

    trade_id: int = Field(..., gt=0)
    status: str = Field(..., description="preparing | shipped | delivered")
    tracking_number: str | None = Field(default=None, max_length=100)
    courier: str | None = Field(default=None, max_length=100)
    notes: str | None = Field(default=None, max_length=2000)

    @field_validator("status")
    @classmethod
    def normalize_status(cls, v: str) -> str:
        """Shipping status is case-insensitive on the wire."""
        return v.strip().lower()


class ProductIdRequest(CamelModel):
    product_id: int = Field(..., gt=0)


# ============================================================================
# RESPONSE SCHEMAS
# ============================================================================


class TradeSchema(CamelModel):
    """A trade as returned by every trade endpoint."""

    id: int
    proposer_id: int
    counterpart_id: int
    status: str
    offered_product_id: int
    offered_quantity: int
    offered_unit_price: Decimal
    offered_value: Decimal
    requested_product_id: int
    requested_quantity: int
    requested_unit_price: Decimal
    requested_value: Decimal
    value_ratio: Decimal | None
    fairness: str
    shipping_status: str
    tracking_number: str | None
    courier: str | None
    shipping_notes: str | None
    shipping_updated_by: int | None
    shipping_updated_at: datetime | None
    proposer_confirmed: bool
    counterpart_confirmed: bool
    created_at: datetime
    accepted_at: datetime | None
    completed_at: datetime | None
    rejection_reason: str | None
    notes: str | None
    version: int


class PerspectiveTradeSchema(CamelModel):
    """A completed trade from the caller's side."""

    trade: TradeSchema
    role: str
    with_user_id: int
    given_product_id: int
    given_quantity: int
    received_product_id: int
    received_quantity: int


class MaterializationSchema(CamelModel):
    trade_id: int
    already_materialized: bool
    completed_at: datetime | None
    proposer_record_id: int | None = None
    counterpart_record_id: int | None = None


class TradeResponse(ApiResponse):
    trade: TradeSchema


class TradeListResponse(ApiResponse):
    trades: list[TradeSchema]


class CompletedTradesResponse(ApiResponse):
    trades: list[PerspectiveTradeSchema]


class DeliveryConfirmationResponse(ApiResponse):
    """Trade after a delivery confirmation or completion trigger."""

    trade: TradeSchema
    newly_confirmed: bool
    materialization: MaterializationSchema | None = None
    materialization_deferred: bool = False
