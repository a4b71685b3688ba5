"""Trade ORM Model - SQLAlchemy mapping for the Trade aggregate."""

from datetime import datetime
from decimal import Decimal

from sqlalchemy import (
    BigInteger,
    Boolean,
    CheckConstraint,
    Index,
    Integer,
    Numeric,
    String,
    Text,
)
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base, BigIntegerPK


class TradeModel(Base):
    """ORM model for the Trade aggregate.

    Persistence ONLY - no business logic here.
    Business logic lives in domain.trading.entities.Trade.
    """

    __tablename__ = "trades"

    # Primary key
    id: Mapped[int] = mapped_column(BigIntegerPK, primary_key=True, autoincrement=True)

    # Parties
    proposer_id: Mapped[int] = mapped_column(BigInteger, nullable=False, index=True)
    counterpart_id: Mapped[int] = mapped_column(BigInteger, nullable=False, index=True)

    # Offered side (unit price is a snapshot taken at proposal / last update)
    offered_product_id: Mapped[int] = mapped_column(BigInteger, nullable=False, index=True)
    offered_quantity: Mapped[int] = mapped_column(Integer, nullable=False)
    offered_unit_price: Mapped[Decimal] = mapped_column(
        Numeric(precision=12, scale=2), nullable=False
    )

    # Requested side
    requested_product_id: Mapped[int] = mapped_column(BigInteger, nullable=False, index=True)
    requested_quantity: Mapped[int] = mapped_column(Integer, nullable=False)
    requested_unit_price: Mapped[Decimal] = mapped_column(
        Numeric(precision=12, scale=2), nullable=False
    )

    # Stored for listing / sorting; recomputed on every quantity update
    value_ratio: Mapped[Decimal | None] = mapped_column(
        Numeric(precision=12, scale=2), nullable=True
    )

    status: Mapped[str] = mapped_column(
        String(20), nullable=False, index=True
    )  # "pending", "accepted", "rejected", "cancelled", "completed"

    # Shipping sub-workflow
    shipping_status: Mapped[str] = mapped_column(
        String(20), nullable=False, default="none"
    )  # "none", "preparing", "shipped", "delivered"
    tracking_number: Mapped[str | None] = mapped_column(String(100), nullable=True)
    courier: Mapped[str | None] = mapped_column(String(100), nullable=True)
    shipping_notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    shipping_updated_by: Mapped[int | None] = mapped_column(BigInteger, nullable=True)
    shipping_updated_at: Mapped[datetime | None] = mapped_column(nullable=True)

    # Delivery confirmations (written one column at a time)
    proposer_confirmed: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    counterpart_confirmed: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False
    )

    # Timestamps
    created_at: Mapped[datetime] = mapped_column(nullable=False, index=True)
    accepted_at: Mapped[datetime | None] = mapped_column(nullable=True)
    completed_at: Mapped[datetime | None] = mapped_column(nullable=True)

    rejection_reason: Mapped[str | None] = mapped_column(Text, nullable=True)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)

    # Optimistic locking (for concurrent updates)
    version: Mapped[int] = mapped_column(Integer, nullable=False, default=1)

    __table_args__ = (
        CheckConstraint("offered_quantity >= 1", name="ck_trades_offered_quantity"),
        CheckConstraint("requested_quantity >= 1", name="ck_trades_requested_quantity"),
        CheckConstraint("proposer_id <> counterpart_id", name="ck_trades_distinct_parties"),
        # Query: user's trades by status, newest first
        Index("ix_trades_proposer_status_created", "proposer_id", "status", "created_at"),
        Index(
            "ix_trades_counterpart_status_created",
            "counterpart_id",
            "status",
            "created_at",
        ),
        # Query: accepted trades with both confirmations (materialization retry)
        Index(
            "ix_trades_awaiting_materialization",
            "status",
            "proposer_confirmed",
            "counterpart_confirmed",
        ),
    )

    def __repr__(self) -> str:
        """String representation."""
        return (
            f"<TradeModel(id={self.id}, proposer_id={self.proposer_id}, "
            f"counterpart_id={self.counterpart_id}, status={self.status}, "
            f"shipping_status={self.shipping_status})>"
        )
