"""Order ORM Models - orders, their line items and status history."""

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
    Text,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base, BigIntegerPK


class OrderModel(Base):
    """ORM model for the Order aggregate."""

    __tablename__ = "orders"

    id: Mapped[int] = mapped_column(BigIntegerPK, primary_key=True, autoincrement=True)
    buyer_id: Mapped[int] = mapped_column(BigInteger, nullable=False, index=True)
    seller_id: Mapped[int] = mapped_column(BigInteger, nullable=False, index=True)

    status: Mapped[str] = mapped_column(String(30), nullable=False, index=True)
    total: Mapped[Decimal] = mapped_column(Numeric(precision=12, scale=2), nullable=False)
    rejection_reason: Mapped[str | None] = mapped_column(Text, nullable=True)

    # sha256 of the decision that was applied (idempotent resubmission)
    applied_decision: Mapped[str | None] = mapped_column(String(64), nullable=True)

    created_at: Mapped[datetime] = mapped_column(nullable=False)
    updated_at: Mapped[datetime] = mapped_column(nullable=False)
    version: Mapped[int] = mapped_column(Integer, nullable=False, default=1)

    items: Mapped[list["OrderItemModel"]] = relationship(
        back_populates="order",
        cascade="all, delete-orphan",
        lazy="selectin",
        order_by="OrderItemModel.position",
    )
    history: Mapped[list["OrderHistoryModel"]] = relationship(
        back_populates="order",
        cascade="all, delete-orphan",
        lazy="selectin",
        order_by="OrderHistoryModel.id",
    )

    __table_args__ = (
        # Query: seller's pending orders
        Index("ix_orders_seller_status_created", "seller_id", "status", "created_at"),
    )

    def __repr__(self) -> str:
        """String representation."""
        return (
            f"<OrderModel(id={self.id}, buyer_id={self.buyer_id}, "
            f"seller_id={self.seller_id}, status={self.status}, total={self.total})>"
        )


class OrderItemModel(Base):
    """One line of an order with its price snapshot."""

    __tablename__ = "order_items"

    id: Mapped[int] = mapped_column(BigIntegerPK, primary_key=True, autoincrement=True)
    order_id: Mapped[int] = mapped_column(
        BigInteger, ForeignKey("orders.id", ondelete="CASCADE"), nullable=False, index=True
    )
    position: Mapped[int] = mapped_column(Integer, nullable=False)

    product_id: Mapped[int] = mapped_column(BigInteger, nullable=False, index=True)
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    unit_price: Mapped[Decimal] = mapped_column(Numeric(precision=12, scale=2), nullable=False)
    ordered_qty: Mapped[int] = mapped_column(Integer, nullable=False)
    confirmed_qty: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    confirmed: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    order: Mapped[OrderModel] = relationship(back_populates="items")

    __table_args__ = (
        CheckConstraint("ordered_qty >= 1", name="ck_order_items_ordered_qty"),
        CheckConstraint(
            "confirmed_qty >= 0 AND confirmed_qty <= ordered_qty",
            name="ck_order_items_confirmed_qty",
        ),
    )


class OrderHistoryModel(Base):
    """Append-only status history of an order."""

    __tablename__ = "order_status_history"

    id: Mapped[int] = mapped_column(BigIntegerPK, primary_key=True, autoincrement=True)
    order_id: Mapped[int] = mapped_column(
        BigInteger, ForeignKey("orders.id", ondelete="CASCADE"), nullable=False, index=True
    )
    status: Mapped[str] = mapped_column(String(30), nullable=False)
    note: Mapped[str | None] = mapped_column(Text, nullable=True)
    changed_at: Mapped[datetime] = mapped_column(nullable=False)

    order: Mapped[OrderModel] = relationship(back_populates="history")
