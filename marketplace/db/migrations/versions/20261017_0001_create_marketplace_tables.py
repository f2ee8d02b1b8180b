"""create categories, shipping_records, shipping_tracking_events, return_requests

Revision ID: 20261017_0001
Revises:
Create Date: 2026-10-17 00:00:00
"""

from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision: str = "20261017_0001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
    ]


def upgrade() -> None:
    op.create_table(
        "categories",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("name", sa.String(length=100), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("icon", sa.String(length=1024), nullable=True),
        sa.Column("parent_id", sa.Uuid(), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        *_timestamps(),
        sa.ForeignKeyConstraint(["parent_id"], ["categories.id"], ondelete="SET NULL"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_categories_name"), "categories", ["name"], unique=True)

    op.create_table(
        "shipping_records",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("order_id", sa.Uuid(), nullable=False),
        sa.Column("carrier", sa.String(length=100), nullable=True),
        sa.Column("tracking_number", sa.String(length=100), nullable=True),
        sa.Column("status", sa.String(length=50), nullable=False),
        sa.Column("estimated_arrival", sa.DateTime(timezone=True), nullable=True),
        sa.Column("actual_delivery_date", sa.DateTime(timezone=True), nullable=True),
        sa.Column("shipping_address", sa.JSON(), nullable=False),
        sa.Column("notes", sa.Text(), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        op.f("ix_shipping_records_order_id"), "shipping_records", ["order_id"], unique=True
    )
    op.create_index(
        op.f("ix_shipping_records_tracking_number"),
        "shipping_records",
        ["tracking_number"],
        unique=False,
    )
    op.create_index(
        op.f("ix_shipping_records_status"), "shipping_records", ["status"], unique=False
    )

    op.create_table(
        "shipping_tracking_events",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("shipping_record_id", sa.Uuid(), nullable=False),
        sa.Column("position", sa.Integer(), nullable=False),
        sa.Column("status", sa.String(length=50), nullable=True),
        sa.Column("location", sa.String(length=255), nullable=True),
        sa.Column("timestamp", sa.DateTime(timezone=True), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.ForeignKeyConstraint(
            ["shipping_record_id"], ["shipping_records.id"], ondelete="CASCADE"
        ),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        op.f("ix_shipping_tracking_events_shipping_record_id"),
        "shipping_tracking_events",
        ["shipping_record_id"],
        unique=False,
    )

    op.create_table(
        "return_requests",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("order_id", sa.Uuid(), nullable=False),
        sa.Column("user_id", sa.String(length=128), nullable=False),
        sa.Column("reason", sa.Text(), nullable=False),
        sa.Column("status", sa.String(length=20), nullable=False),
        sa.Column("images", sa.JSON(), nullable=False),
        sa.Column("admin_response", sa.Text(), nullable=True),
        sa.Column("processed_by", sa.String(length=128), nullable=True),
        sa.Column("processed_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("refund_amount", sa.Numeric(precision=10, scale=2), nullable=False),
        sa.Column("refund_method", sa.String(length=32), nullable=True),
        sa.Column("return_shipping", sa.JSON(), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        op.f("ix_return_requests_order_id"), "return_requests", ["order_id"], unique=False
    )
    op.create_index(
        op.f("ix_return_requests_user_id"), "return_requests", ["user_id"], unique=False
    )
    op.create_index(op.f("ix_return_requests_status"), "return_requests", ["status"], unique=False)
    op.create_index(
        op.f("ix_return_requests_created_at"), "return_requests", ["created_at"], unique=False
    )


def downgrade() -> None:
    op.drop_index(op.f("ix_return_requests_created_at"), table_name="return_requests")
    op.drop_index(op.f("ix_return_requests_status"), table_name="return_requests")
    op.drop_index(op.f("ix_return_requests_user_id"), table_name="return_requests")
    op.drop_index(op.f("ix_return_requests_order_id"), table_name="return_requests")
    op.drop_table("return_requests")

    op.drop_index(
        op.f("ix_shipping_tracking_events_shipping_record_id"),
        table_name="shipping_tracking_events",
    )
    op.drop_table("shipping_tracking_events")

    op.drop_index(op.f("ix_shipping_records_status"), table_name="shipping_records")
    op.drop_index(op.f("ix_shipping_records_tracking_number"), table_name="shipping_records")
    op.drop_index(op.f("ix_shipping_records_order_id"), table_name="shipping_records")
    op.drop_table("shipping_records")

    op.drop_index(op.f("ix_categories_name"), table_name="categories")
    op.drop_table("categories")
