"""initial schema

Revision ID: 3f1c9a2d7b40
Revises:
Create Date: 2026-10-19
"""

from typing import Sequence, Union

import sqlalchemy as sa

from alembic import op

revision: str = "3f1c9a2d7b40"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "customers",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("uuid", sa.String(26), nullable=False, unique=True),
        sa.Column("name", sa.Text, nullable=False),
        sa.Column("id_number", sa.Text, nullable=False, server_default=""),
        sa.Column("phone", sa.Text, nullable=False, server_default=""),
        sa.Column("balance", sa.Numeric(14, 2), nullable=False, server_default="0"),
        sa.Column("created_at", sa.DateTime, nullable=False, server_default=sa.func.now()),
    )

    op.create_table(
        "customer_transactions",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("customer_id", sa.Integer, sa.ForeignKey("customers.id", ondelete="CASCADE"), nullable=False),
        sa.Column("type", sa.String(20), nullable=False),
        sa.Column("amount", sa.Numeric(14, 2), nullable=False),
        sa.Column("balance_before", sa.Numeric(14, 2), nullable=False),
        sa.Column("balance_after", sa.Numeric(14, 2), nullable=False),
        sa.Column("reference_id", sa.String(64), nullable=False, server_default=""),
        sa.Column("description", sa.Text, nullable=False, server_default=""),
        sa.Column("created_at", sa.DateTime, nullable=False, server_default=sa.func.now()),
    )
    op.create_index("ix_customer_transactions_customer_id", "customer_transactions", ["customer_id"])

    op.create_table(
        "deals",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("uuid", sa.String(26), nullable=False, unique=True),
        sa.Column("title", sa.Text, nullable=False, server_default=""),
        sa.Column("description", sa.Text, nullable=False, server_default=""),
        sa.Column("deal_type", sa.String(40), nullable=False),
        sa.Column("status", sa.String(20), nullable=False, server_default="pending"),
        sa.Column("selling_price", sa.Numeric(14, 2), nullable=True),
        sa.Column("amount", sa.Numeric(14, 2), nullable=True),
        sa.Column("customer_car_eval_value", sa.Numeric(14, 2), nullable=True),
        sa.Column("customer_id", sa.Integer, sa.ForeignKey("customers.id"), nullable=True),
        sa.Column("seller_id", sa.Integer, sa.ForeignKey("customers.id"), nullable=True),
        sa.Column("buyer_id", sa.Integer, sa.ForeignKey("customers.id"), nullable=True),
        sa.Column("car_id", sa.Integer, nullable=True),
        sa.Column("created_at", sa.DateTime, nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime, nullable=False, server_default=sa.func.now()),
        sa.Column("deleted_at", sa.DateTime, nullable=True),
    )

    # Legacy amount columns are free text: old rows hold unparsed strings.
    op.create_table(
        "bills",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("uuid", sa.String(26), nullable=False, unique=True),
        sa.Column("deal_id", sa.Integer, sa.ForeignKey("deals.id"), nullable=True),
        sa.Column("bill_type", sa.String(30), nullable=False),
        sa.Column("bill_direction", sa.String(10), nullable=True),
        sa.Column("customer_name", sa.Text, nullable=False, server_default=""),
        sa.Column("visa_amount", sa.Text, nullable=True),
        sa.Column("transfer_amount", sa.Text, nullable=True),
        sa.Column("check_amount", sa.Text, nullable=True),
        sa.Column("cash_amount", sa.Text, nullable=True),
        sa.Column("bank_amount", sa.Text, nullable=True),
        sa.Column("bill_amount", sa.Text, nullable=True),
        sa.Column("total_with_tax", sa.Text, nullable=True),
        sa.Column("created_at", sa.DateTime, nullable=False, server_default=sa.func.now()),
        sa.Column("deleted_at", sa.DateTime, nullable=True),
    )
    op.create_index("ix_bills_deal_id", "bills", ["deal_id"])

    op.create_table(
        "bill_payments",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("bill_id", sa.Integer, sa.ForeignKey("bills.id", ondelete="CASCADE"), nullable=False),
        sa.Column("payment_type", sa.String(20), nullable=False),
        sa.Column("amount", sa.Numeric(14, 2), nullable=True),
        sa.Column("sort_order", sa.Integer, nullable=False, server_default="0"),
        sa.Column("created_at", sa.DateTime, nullable=False, server_default=sa.func.now()),
    )

    op.create_table(
        "activity_logs",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("uuid", sa.String(26), nullable=False, unique=True),
        sa.Column("type", sa.String(30), nullable=False),
        sa.Column("deal", sa.Text, nullable=True),
        sa.Column("bill", sa.Text, nullable=True),
        sa.Column("car", sa.Text, nullable=True),
        sa.Column("created_at", sa.DateTime, nullable=False, server_default=sa.func.now()),
    )
    op.create_index("ix_activity_logs_type", "activity_logs", ["type"])


def downgrade() -> None:
    op.drop_index("ix_activity_logs_type", table_name="activity_logs")
    op.drop_table("activity_logs")
    op.drop_table("bill_payments")
    op.drop_index("ix_bills_deal_id", table_name="bills")
    op.drop_table("bills")
    op.drop_table("deals")
    op.drop_index("ix_customer_transactions_customer_id", table_name="customer_transactions")
    op.drop_table("customer_transactions")
    op.drop_table("customers")
