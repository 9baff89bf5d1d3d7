"""create sales_invoices and purchase_invoices tables

Revision ID: b2d3f4a5b6c7
Revises: a1c2e3f4a5b6
Create Date: 2026-10-05 09:10:00.000000

"""

import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision = "b2d3f4a5b6c7"
down_revision = "a1c2e3f4a5b6"
branch_labels = None
depends_on = None

# (table, debtor column, debtor table)
INVOICE_TABLES = [
    ("sales_invoices", "customer_id", "customers"),
    ("purchase_invoices", "supplier_id", "suppliers"),
]


def upgrade() -> None:
    for table, debtor_column, debtor_table in INVOICE_TABLES:
        op.create_table(
            table,
            sa.Column("id", sa.String(length=36), nullable=False),
            sa.Column("company_id", sa.String(length=36), nullable=False),
            sa.Column(debtor_column, sa.String(length=36), nullable=False),
            sa.Column("original_invoice_id", sa.String(length=36), nullable=True),
            sa.Column("number", sa.String(length=50), nullable=False),
            sa.Column("voucher_class", sa.String(length=20), nullable=False),
            sa.Column("status", sa.String(length=20), nullable=False),
            sa.Column("issue_date", sa.Date(), nullable=False),
            sa.Column("total", sa.Numeric(precision=12, scale=4), nullable=False),
            sa.Column("currency", sa.String(length=3), nullable=False),
            sa.Column("version", sa.Integer(), nullable=False),
            sa.Column("confirmed_at", sa.DateTime(timezone=True), nullable=True),
            sa.Column("cancelled_at", sa.DateTime(timezone=True), nullable=True),
            sa.Column(
                "created_at",
                sa.DateTime(timezone=True),
                server_default=sa.text("(CURRENT_TIMESTAMP)"),
                nullable=True,
            ),
            sa.Column(
                "updated_at",
                sa.DateTime(timezone=True),
                server_default=sa.text("(CURRENT_TIMESTAMP)"),
                nullable=True,
            ),
            sa.ForeignKeyConstraint(["company_id"], ["companies.id"], ondelete="RESTRICT"),
            sa.ForeignKeyConstraint([debtor_column], [f"{debtor_table}.id"], ondelete="RESTRICT"),
            sa.ForeignKeyConstraint(["original_invoice_id"], [f"{table}.id"], ondelete="RESTRICT"),
            sa.PrimaryKeyConstraint("id"),
        )
        op.create_index(f"ix_{table}_company_id", table, ["company_id"])
        op.create_index(f"ix_{table}_{debtor_column}", table, [debtor_column])
        op.create_index(f"ix_{table}_original_invoice_id", table, ["original_invoice_id"])
        op.create_index(f"ix_{table}_number", table, ["number"])
        op.create_index(f"ix_{table}_issue_date", table, ["issue_date"])


def downgrade() -> None:
    for table, debtor_column, _ in reversed(INVOICE_TABLES):
        op.drop_index(f"ix_{table}_issue_date", table_name=table)
        op.drop_index(f"ix_{table}_number", table_name=table)
        op.drop_index(f"ix_{table}_original_invoice_id", table_name=table)
        op.drop_index(f"ix_{table}_{debtor_column}", table_name=table)
        op.drop_index(f"ix_{table}_company_id", table_name=table)
        op.drop_table(table)
