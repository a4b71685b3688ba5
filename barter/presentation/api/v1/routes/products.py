"""Product API routes - provenance views."""

from fastapi import APIRouter

from barter.application.inventory.queries import GetProductTradeHistoryQuery
from barter.presentation.api.dependencies import (
    CurrentUserId,
    GetProductTradeHistoryHandlerDep,
)
from barter.presentation.api.v1.schemas.common import ErrorResponse
from barter.presentation.api.v1.schemas.inventory_schemas import ProductTradeHistoryResponse
from barter.presentation.api.v1.schemas.trade_schemas import TradeSchema

router = APIRouter(prefix="/products", tags=["Products"])


@router.get(
    "/{product_id}/trade-history",
    response_model=ProductTradeHistoryResponse,
    summary="Trade history of a product",
    description="Completed trades involving the product or any inventory derived from it, "
    "newest first.",
    responses={
        401: {"model": ErrorResponse, "description": "Unauthorized"},
        404: {"model": ErrorResponse, "description": "Product not found"},
    },
)
async def product_trade_history(
    product_id: int,
    user_id: CurrentUserId,
    handler: GetProductTradeHistoryHandlerDep,
) -> ProductTradeHistoryResponse:
    trades = await handler.handle(GetProductTradeHistoryQuery(product_id=product_id))
    return ProductTradeHistoryResponse(
        product_id=product_id,
        trades=[TradeSchema.model_validate(t) for t in trades],
    )
