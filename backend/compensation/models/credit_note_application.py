"""Explicit credit note applications: which note paid which invoice, and how much.

Rows are append-only. Undoing a compensation appends a negative row that
points at the row it cancels through ``reverses_id``.
"""

from sqlalchemy import Column, DateTime, ForeignKey, Index, Integer, Numeric, func

from compensation.core.database import Base
from compensation.models.shared import DEFAULT_COMPANY_ID, UUIDType, generate_uuid


class SalesCreditNoteApplication(Base):
    __tablename__ = "sales_credit_note_applications"

    id = Column(UUIDType, primary_key=True, default=generate_uuid)
    company_id = Column(
        UUIDType,
        ForeignKey("companies.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
        default=DEFAULT_COMPANY_ID,
    )
    credit_note_id = Column(
        UUIDType, ForeignKey("sales_invoices.id", ondelete="RESTRICT"), nullable=False, index=True
    )
    invoice_id = Column(
        UUIDType, ForeignKey("sales_invoices.id", ondelete="RESTRICT"), nullable=False, index=True
    )
    amount = Column(Numeric(12, 4), nullable=False)
    sequence = Column(Integer, nullable=False)
    reverses_id = Column(
        UUIDType,
        ForeignKey("sales_credit_note_applications.id", ondelete="RESTRICT"),
        nullable=True,
    )
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    __table_args__ = (
        Index("ix_sales_cn_applications_note_sequence", "credit_note_id", "sequence"),
    )


class PurchaseCreditNoteApplication(Base):
    __tablename__ = "purchase_credit_note_applications"

    id = Column(UUIDType, primary_key=True, default=generate_uuid)
    company_id = Column(
        UUIDType,
        ForeignKey("companies.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
        default=DEFAULT_COMPANY_ID,
    )
    credit_note_id = Column(
        UUIDType,
        ForeignKey("purchase_invoices.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
    )
    invoice_id = Column(
        UUIDType,
        ForeignKey("purchase_invoices.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
    )
    amount = Column(Numeric(12, 4), nullable=False)
    sequence = Column(Integer, nullable=False)
    reverses_id = Column(
        UUIDType,
        ForeignKey("purchase_credit_note_applications.id", ondelete="RESTRICT"),
        nullable=True,
    )
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    __table_args__ = (
        Index("ix_purchase_cn_applications_note_sequence", "credit_note_id", "sequence"),
    )
