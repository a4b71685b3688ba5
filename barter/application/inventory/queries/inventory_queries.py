"""Inventory queries (read operations)."""

from dataclasses import dataclass

from barter.application.shared import Query


@dataclass(frozen=True)
class GetUserProductsQuery(Query):
    """The caller's own products; ``available_only`` keeps tradeable ones."""

    user_id: int
    available_only: bool = True


@dataclass(frozen=True)
class GetProductsForTradeQuery(Query):
    """Other users' products open for barter."""

    user_id: int


@dataclass(frozen=True)
class GetReceivedProductsQuery(Query):
    """Inventory the caller acquired through completed trades."""

    user_id: int


@dataclass(frozen=True)
class GetProductTradeHistoryQuery(Query):
    """Completed trades involving a product or inventory derived from it."""

    product_id: int
