"""create sales and purchase credit_note_applications tables

Revision ID: d4f5b6c7d8e9
Revises: c3e4a5b6c7d8
Create Date: 2026-10-05 09:30:00.000000

"""

import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision = "d4f5b6c7d8e9"
down_revision = "c3e4a5b6c7d8"
branch_labels = None
depends_on = None

# (table, index prefix, invoice table)
APPLICATION_TABLES = [
    ("sales_credit_note_applications", "sales", "sales_invoices"),
    ("purchase_credit_note_applications", "purchase", "purchase_invoices"),
]


def upgrade() -> None:
    for table, prefix, invoice_table in APPLICATION_TABLES:
        op.create_table(
            table,
            sa.Column("id", sa.String(length=36), nullable=False),
            sa.Column("company_id", sa.String(length=36), nullable=False),
            sa.Column("credit_note_id", sa.String(length=36), nullable=False),
            sa.Column("invoice_id", sa.String(length=36), nullable=False),
            sa.Column("amount", sa.Numeric(precision=12, scale=4), nullable=False),
            sa.Column("sequence", sa.Integer(), nullable=False),
            sa.Column("reverses_id", sa.String(length=36), nullable=True),
            sa.Column(
                "created_at",
                sa.DateTime(timezone=True),
                server_default=sa.text("(CURRENT_TIMESTAMP)"),
                nullable=True,
            ),
            sa.ForeignKeyConstraint(["company_id"], ["companies.id"], ondelete="RESTRICT"),
            sa.ForeignKeyConstraint(
                ["credit_note_id"], [f"{invoice_table}.id"], ondelete="RESTRICT"
            ),
            sa.ForeignKeyConstraint(["invoice_id"], [f"{invoice_table}.id"], ondelete="RESTRICT"),
            sa.ForeignKeyConstraint(["reverses_id"], [f"{table}.id"], ondelete="RESTRICT"),
            sa.PrimaryKeyConstraint("id"),
        )
        op.create_index(f"ix_{table}_company_id", table, ["company_id"])
        op.create_index(f"ix_{table}_credit_note_id", table, ["credit_note_id"])
        op.create_index(f"ix_{table}_invoice_id", table, ["invoice_id"])
        op.create_index(
            f"ix_{prefix}_cn_applications_note_sequence", table, ["credit_note_id", "sequence"]
        )


def downgrade() -> None:
    for table, prefix, _ in reversed(APPLICATION_TABLES):
        op.drop_index(f"ix_{prefix}_cn_applications_note_sequence", table_name=table)
        op.drop_index(f"ix_{table}_invoice_id", table_name=table)
        op.drop_index(f"ix_{table}_credit_note_id", table_name=table)
        op.drop_index(f"ix_{table}_company_id", table_name=table)
        op.drop_table(table)
