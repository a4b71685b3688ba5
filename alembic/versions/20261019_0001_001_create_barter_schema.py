"""Create barter schema.

Creates the tables of the trade lifecycle and fulfillment engine:
- trades (state machine, shipping, delivery confirmations, version)
- inventory_records (products + trade-derived inventory with provenance)
- orders, order_items, order_status_history

Revision ID: 001
Revises: None
Create Date: 2026-10-19
"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade database schema."""
    # ====================================
    # TRADES
    # ====================================
    op.create_table(
        "trades",
        sa.Column("id", sa.BigInteger(), primary_key=True, autoincrement=True),
        sa.Column("proposer_id", sa.BigInteger(), nullable=False),
        sa.Column("counterpart_id", sa.BigInteger(), nullable=False),
        sa.Column("offered_product_id", sa.BigInteger(), nullable=False),
        sa.Column("offered_quantity", sa.Integer(), nullable=False),
        sa.Column("offered_unit_price", sa.Numeric(12, 2), nullable=False),
        sa.Column("requested_product_id", sa.BigInteger(), nullable=False),
        sa.Column("requested_quantity", sa.Integer(), nullable=False),
        sa.Column("requested_unit_price", sa.Numeric(12, 2), nullable=False),
        sa.Column("value_ratio", sa.Numeric(12, 2), nullable=True),
        sa.Column("status", sa.String(20), nullable=False),
        sa.Column("shipping_status", sa.String(20), nullable=False, server_default="none"),
        sa.Column("tracking_number", sa.String(100), nullable=True),
        sa.Column("courier", sa.String(100), nullable=True),
        sa.Column("shipping_notes", sa.Text(), nullable=True),
        sa.Column("shipping_updated_by", sa.BigInteger(), nullable=True),
        sa.Column("shipping_updated_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("proposer_confirmed", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("counterpart_confirmed", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("accepted_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("completed_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("rejection_reason", sa.Text(), nullable=True),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("version", sa.Integer(), nullable=False, server_default="1"),
        sa.CheckConstraint("offered_quantity >= 1", name="ck_trades_offered_quantity"),
        sa.CheckConstraint("requested_quantity >= 1", name="ck_trades_requested_quantity"),
        sa.CheckConstraint("proposer_id <> counterpart_id", name="ck_trades_distinct_parties"),
    )
    for column in (
        "proposer_id",
        "counterpart_id",
        "offered_product_id",
        "requested_product_id",
        "status",
        "created_at",
    ):
        op.create_index(f"ix_trades_{column}", "trades", [column])
    op.create_index(
        "ix_trades_proposer_status_created", "trades", ["proposer_id", "status", "created_at"]
    )
    op.create_index(
        "ix_trades_counterpart_status_created",
        "trades",
        ["counterpart_id", "status", "created_at"],
    )
    op.create_index(
        "ix_trades_awaiting_materialization",
        "trades",
        ["status", "proposer_confirmed", "counterpart_confirmed"],
    )

    # ====================================
    # INVENTORY_RECORDS
    # ====================================
    op.create_table(
        "inventory_records",
        sa.Column("id", sa.BigInteger(), primary_key=True, autoincrement=True),
        sa.Column("owner_id", sa.BigInteger(), nullable=False),
        sa.Column("name", sa.String(200), nullable=False),
        sa.Column("category", sa.String(100), nullable=True),
        sa.Column("unit_price", sa.Numeric(12, 2), nullable=False),
        sa.Column("stock", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("available_for_trade", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column(
            "source_product_id",
            sa.BigInteger(),
            sa.ForeignKey("inventory_records.id"),
            nullable=True,
        ),
        sa.Column("origin_trade_id", sa.BigInteger(), sa.ForeignKey("trades.id"), nullable=True),
        sa.Column("acquired_date", sa.DateTime(timezone=True), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("version", sa.Integer(), nullable=False, server_default="1"),
        sa.CheckConstraint("stock >= 0", name="ck_inventory_records_stock_non_negative"),
        sa.UniqueConstraint(
            "owner_id", "source_product_id", name="uq_inventory_records_owner_source"
        ),
    )
    for column in ("owner_id", "source_product_id", "origin_trade_id"):
        op.create_index(f"ix_inventory_records_{column}", "inventory_records", [column])
    op.create_index(
        "ix_inventory_records_available_owner",
        "inventory_records",
        ["available_for_trade", "owner_id"],
    )

    # ====================================
    # ORDERS
    # ====================================
    op.create_table(
        "orders",
        sa.Column("id", sa.BigInteger(), primary_key=True, autoincrement=True),
        sa.Column("buyer_id", sa.BigInteger(), nullable=False),
        sa.Column("seller_id", sa.BigInteger(), nullable=False),
        sa.Column("status", sa.String(30), nullable=False),
        sa.Column("total", sa.Numeric(12, 2), nullable=False),
        sa.Column("rejection_reason", sa.Text(), nullable=True),
        sa.Column("applied_decision", sa.String(64), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("version", sa.Integer(), nullable=False, server_default="1"),
    )
    for column in ("buyer_id", "seller_id", "status"):
        op.create_index(f"ix_orders_{column}", "orders", [column])
    op.create_index(
        "ix_orders_seller_status_created", "orders", ["seller_id", "status", "created_at"]
    )

    op.create_table(
        "order_items",
        sa.Column("id", sa.BigInteger(), primary_key=True, autoincrement=True),
        sa.Column(
            "order_id",
            sa.BigInteger(),
            sa.ForeignKey("orders.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("position", sa.Integer(), nullable=False),
        sa.Column("product_id", sa.BigInteger(), nullable=False),
        sa.Column("name", sa.String(200), nullable=False),
        sa.Column("unit_price", sa.Numeric(12, 2), nullable=False),
        sa.Column("ordered_qty", sa.Integer(), nullable=False),
        sa.Column("confirmed_qty", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("confirmed", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.CheckConstraint("ordered_qty >= 1", name="ck_order_items_ordered_qty"),
        sa.CheckConstraint(
            "confirmed_qty >= 0 AND confirmed_qty <= ordered_qty",
            name="ck_order_items_confirmed_qty",
        ),
    )
    op.create_index("ix_order_items_order_id", "order_items", ["order_id"])
    op.create_index("ix_order_items_product_id", "order_items", ["product_id"])

    op.create_table(
        "order_status_history",
        sa.Column("id", sa.BigInteger(), primary_key=True, autoincrement=True),
        sa.Column(
            "order_id",
            sa.BigInteger(),
            sa.ForeignKey("orders.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("status", sa.String(30), nullable=False),
        sa.Column("note", sa.Text(), nullable=True),
        sa.Column("changed_at", sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index("ix_order_status_history_order_id", "order_status_history", ["order_id"])


def downgrade() -> None:
    """Downgrade database schema."""
    op.drop_table("order_status_history")
    op.drop_table("order_items")
    op.drop_table("orders")
    op.drop_table("inventory_records")
    op.drop_table("trades")
