"""API v1 routes."""

from .health import router as health_router
from .orders import router as orders_router
from .products import router as products_router
from .trades import router as trades_router

__all__ = [
    "health_router",
    "orders_router",
    "products_router",
    "trades_router",
]
