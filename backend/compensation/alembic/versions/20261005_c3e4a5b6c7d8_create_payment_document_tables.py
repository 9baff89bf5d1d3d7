"""create receipts and payment_orders tables with their items

Revision ID: c3e4a5b6c7d8
Revises: b2d3f4a5b6c7
Create Date: 2026-10-05 09:20:00.000000

"""

import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision = "c3e4a5b6c7d8"
down_revision = "b2d3f4a5b6c7"
branch_labels = None
depends_on = None

# (document table, debtor column, debtor table, item table, item fk, invoice table)
PAYMENT_TABLES = [
    ("receipts", "customer_id", "customers", "receipt_items", "receipt_id", "sales_invoices"),
    (
        "payment_orders",
        "supplier_id",
        "suppliers",
        "payment_order_items",
        "payment_order_id",
        "purchase_invoices",
    ),
]


def upgrade() -> None:
    for table, debtor_column, debtor_table, item_table, item_fk, invoice_table in PAYMENT_TABLES:
        op.create_table(
            table,
            sa.Column("id", sa.String(length=36), nullable=False),
            sa.Column("company_id", sa.String(length=36), nullable=False),
            sa.Column(debtor_column, sa.String(length=36), nullable=False),
            sa.Column("number", sa.String(length=50), nullable=False),
            sa.Column("issue_date", sa.Date(), nullable=False),
            sa.Column("status", sa.String(length=20), nullable=False),
            sa.Column(
                "created_at",
                sa.DateTime(timezone=True),
                server_default=sa.text("(CURRENT_TIMESTAMP)"),
                nullable=True,
            ),
            sa.ForeignKeyConstraint(["company_id"], ["companies.id"], ondelete="RESTRICT"),
            sa.ForeignKeyConstraint([debtor_column], [f"{debtor_table}.id"], ondelete="RESTRICT"),
            sa.PrimaryKeyConstraint("id"),
        )
        op.create_index(f"ix_{table}_company_id", table, ["company_id"])
        op.create_index(f"ix_{table}_{debtor_column}", table, [debtor_column])

        op.create_table(
            item_table,
            sa.Column("id", sa.String(length=36), nullable=False),
            sa.Column(item_fk, sa.String(length=36), nullable=False),
            sa.Column("invoice_id", sa.String(length=36), nullable=False),
            sa.Column("amount", sa.Numeric(precision=12, scale=4), nullable=False),
            sa.ForeignKeyConstraint([item_fk], [f"{table}.id"], ondelete="CASCADE"),
            sa.ForeignKeyConstraint(["invoice_id"], [f"{invoice_table}.id"], ondelete="RESTRICT"),
            sa.PrimaryKeyConstraint("id"),
        )
        op.create_index(f"ix_{item_table}_{item_fk}", item_table, [item_fk])
        op.create_index(f"ix_{item_table}_invoice_id", item_table, ["invoice_id"])


def downgrade() -> None:
    for table, debtor_column, _, item_table, item_fk, _ in reversed(PAYMENT_TABLES):
        op.drop_index(f"ix_{item_table}_invoice_id", table_name=item_table)
        op.drop_index(f"ix_{item_table}_{item_fk}", table_name=item_table)
        op.drop_table(item_table)
        op.drop_index(f"ix_{table}_{debtor_column}", table_name=table)
        op.drop_index(f"ix_{table}_company_id", table_name=table)
        op.drop_table(table)
