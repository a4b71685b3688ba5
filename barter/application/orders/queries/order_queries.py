"""Order queries (read operations)."""

from dataclasses import dataclass

from barter.application.shared import Query


@dataclass(frozen=True)
class GetPendingConfirmationQuery(Query):
    """Seller's orders waiting for a decision, annotated with current stock."""

    seller_id: int


@dataclass(frozen=True)
class GetOrderHistoryQuery(Query):
    """Status history of an order; visible to its buyer and seller."""

    order_id: int
    user_id: int
