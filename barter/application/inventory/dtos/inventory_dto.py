"""Inventory DTOs for API responses."""

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal

from barter.domain.inventory import InventoryRecord


@dataclass(frozen=True)
class InventoryRecordDTO:
    """Inventory record data transfer object.

    ``origin_trade_id`` and ``acquired_date`` are None for originally listed
    products.
    """

    id: int
    owner_id: int
    name: str
    category: str | None
    unit_price: Decimal
    stock: int
    available_for_trade: bool
    source_product_id: int | None
    origin_trade_id: int | None
    acquired_date: datetime | None

    @classmethod
    def from_entity(cls, record: InventoryRecord) -> "InventoryRecordDTO":
        return cls(
            id=record.id or 0,
            owner_id=record.owner_id,
            name=record.name,
            category=record.category,
            unit_price=record.unit_price,
            stock=record.stock,
            available_for_trade=record.available_for_trade,
            source_product_id=record.source_product_id,
            origin_trade_id=record.origin.trade_id if record.origin else None,
            acquired_date=record.origin.acquired_date if record.origin else None,
        )
