"""InventoryRecord Aggregate Root - a user's holding of one product."""

from datetime import datetime, timezone
from decimal import Decimal
from typing import Optional

from barter.domain.shared import AggregateRoot

from ..exceptions.inventory_exceptions import (
    InsufficientStockError,
    NotProductOwnerError,
)
from ..value_objects import Provenance


class InventoryRecord(AggregateRoot):
    """A product held by one owner.

    The record ID is the product ID that trades and orders refer to.
    Originally listed products have no ``origin``; records created by the
    inventory materializer point at the trade that produced them and at the
    product they were derived from (``source_product_id``).

    Stock is never written through ``save()``. It only moves through the
    repository's conditional increments and decrements, so two transactions
    touching the same product cannot overwrite each other's counts.

    Example:
        >>> record = InventoryRecord.create_listing(
        ...     owner_id=7, name="Vintage camera", unit_price=Decimal("120"), stock=3
        ... )
        >>> record.origin is None
        True
    """

    def __init__(
        self,
        owner_id: int,
        name: str,
        unit_price: Decimal,
        stock: int,
        category: Optional[str] = None,
        available_for_trade: bool = False,
        source_product_id: Optional[int] = None,
        origin: Optional[Provenance] = None,
        created_at: Optional[datetime] = None,
        id: Optional[int] = None,
        version: int = 0,
    ) -> None:
        super().__init__(id, version)

        if stock < 0:
            raise InsufficientStockError(
                "Stock cannot be negative", product_id=id, stock=stock
            )

        self.owner_id = owner_id
        self.name = name
        self.unit_price = unit_price
        self.stock = stock
        self.category = category
        self.available_for_trade = available_for_trade
        self.source_product_id = source_product_id
        self.origin = origin
        self.created_at = created_at or datetime.now(timezone.utc)

    @classmethod
    def create_listing(
        cls,
        owner_id: int,
        name: str,
        unit_price: Decimal,
        stock: int,
        category: Optional[str] = None,
        available_for_trade: bool = False,
    ) -> "InventoryRecord":
        """Factory method for an originally listed product (no provenance)."""
        return cls(
            owner_id=owner_id,
            name=name,
            unit_price=unit_price,
            stock=stock,
            category=category,
            available_for_trade=available_for_trade,
        )

    @classmethod
    def acquire_from_trade(
        cls,
        source: "InventoryRecord",
        owner_id: int,
        quantity: int,
        provenance: Provenance,
    ) -> "InventoryRecord":
        """Factory method for inventory a recipient receives in a trade.

        Name, category and price are copied from the product that was given
        away. The new record is not offered for trade until its owner says so.
        """
        return cls(
            owner_id=owner_id,
            name=source.name,
            unit_price=source.unit_price,
            stock=quantity,
            category=source.category,
            available_for_trade=False,
            source_product_id=source.id,
            origin=provenance,
        )

    @property
    def is_acquired(self) -> bool:
        """True for inventory that came from a trade."""
        return self.origin is not None

    def has_stock(self, quantity: int) -> bool:
        return 1 <= quantity <= self.stock

    def ensure_owned_by(self, user_id: int) -> None:
        if self.owner_id != user_id:
            raise NotProductOwnerError(
                "Product belongs to another user",
                product_id=self.id,
                user_id=user_id,
            )

    def mark_available_for_trade(self, by_user_id: int) -> None:
        """List the product in the tradeable inventory of its owner.

        Raises:
            NotProductOwnerError: Caller does not own the product.
            InsufficientStockError: Nothing left to trade.
        """
        self.ensure_owned_by(by_user_id)
        if self.stock < 1:
            raise InsufficientStockError(
                "Product is out of stock", product_id=self.id, available=self.stock
            )
        self.available_for_trade = True

    def withdraw_from_trade(self, by_user_id: int) -> None:
        self.ensure_owned_by(by_user_id)
        self.available_for_trade = False

    def __repr__(self) -> str:
        return (
            f"InventoryRecord(id={self.id}, owner_id={self.owner_id}, "
            f"stock={self.stock}, origin={self.origin})"
        )
