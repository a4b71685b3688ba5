"""Inventory ORM Model - products and the records derived from trades."""

from datetime import datetime
from decimal import Decimal

from sqlalchemy import (
    BigInteger,
    Boolean,
    CheckConstraint,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    String,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base, BigIntegerPK


class InventoryRecordModel(Base):
    """ORM model for the InventoryRecord aggregate.

    A row is a product as far as trades and orders are concerned: its ID is
    the product ID they reference.
    """

    __tablename__ = "inventory_records"

    id: Mapped[int] = mapped_column(BigIntegerPK, primary_key=True, autoincrement=True)
    owner_id: Mapped[int] = mapped_column(BigInteger, nullable=False, index=True)

    name: Mapped[str] = mapped_column(String(200), nullable=False)
    category: Mapped[str | None] = mapped_column(String(100), nullable=True)
    unit_price: Mapped[Decimal] = mapped_column(Numeric(precision=12, scale=2), nullable=False)
    stock: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    available_for_trade: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    # Provenance (NULL for originally listed products)
    source_product_id: Mapped[int | None] = mapped_column(
        BigInteger, ForeignKey("inventory_records.id"), nullable=True, index=True
    )
    origin_trade_id: Mapped[int | None] = mapped_column(
        BigInteger, ForeignKey("trades.id"), nullable=True, index=True
    )
    acquired_date: Mapped[datetime | None] = mapped_column(nullable=True)

    created_at: Mapped[datetime] = mapped_column(nullable=False)
    version: Mapped[int] = mapped_column(Integer, nullable=False, default=1)

    __table_args__ = (
        CheckConstraint("stock >= 0", name="ck_inventory_records_stock_non_negative"),
        # One derived record per (recipient, source product)
        UniqueConstraint(
            "owner_id", "source_product_id", name="uq_inventory_records_owner_source"
        ),
        # Query: products offered for trade
        Index("ix_inventory_records_available_owner", "available_for_trade", "owner_id"),
    )

    def __repr__(self) -> str:
        """String representation."""
        return (
            f"<InventoryRecordModel(id={self.id}, owner_id={self.owner_id}, "
            f"name={self.name!r}, stock={self.stock})>"
        )
