"""Repository ports (interfaces) for the Trading bounded context."""

from .trade_repository import TradeRepository

__all__ = ["TradeRepository"]
