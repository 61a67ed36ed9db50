"""create customers and usage_records tables

Revision ID: 3f9c1a7d2b60
Revises:
Create Date: 2026-10-19 09:00:00.000000

"""

import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision = "3f9c1a7d2b60"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "customers",
        sa.Column("id", sa.String(length=36), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("(CURRENT_TIMESTAMP)"),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("(CURRENT_TIMESTAMP)"),
            nullable=False,
        ),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_table(
        "usage_records",
        sa.Column("id", sa.String(length=36), nullable=False),
        sa.Column("customer_id", sa.String(length=36), nullable=False),
        sa.Column("service", sa.String(length=255), nullable=False),
        sa.Column("service_code", sa.String(length=255), nullable=False),
        sa.Column("units_consumed", sa.Integer(), nullable=False),
        sa.Column("price_per_unit", sa.Numeric(precision=10, scale=4), nullable=False),
        sa.Column("request_id", sa.String(length=255), nullable=False),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("(CURRENT_TIMESTAMP)"),
            nullable=False,
        ),
        sa.ForeignKeyConstraint(["customer_id"], ["customers.id"], ondelete="RESTRICT"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("request_id", name="uq_usage_records_request_id"),
        sa.CheckConstraint("units_consumed > 0", name="ck_usage_records_units_consumed_positive"),
        sa.CheckConstraint("price_per_unit > 0", name="ck_usage_records_price_per_unit_positive"),
    )
    op.create_index("ix_usage_records_customer_id", "usage_records", ["customer_id"])


def downgrade() -> None:
    op.drop_index("ix_usage_records_customer_id", table_name="usage_records")
    op.drop_table("usage_records")
    op.drop_table("customers")
