"""Direct payment documents: receipts (sales) and payment orders (purchases).

A document settles one or more invoices through its items. Only items of a
confirmed document reduce what an invoice still owes.
"""

from enum import Enum

from sqlalchemy import Column, Date, DateTime, ForeignKey, Numeric, String, func

from compensation.core.database import Base
from compensation.models.shared import DEFAULT_COMPANY_ID, UUIDType, generate_uuid


class PaymentDocumentStatus(str, Enum):
    DRAFT = "draft"
    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"


class Receipt(Base):
    __tablename__ = "receipts"

    id = Column(UUIDType, primary_key=True, default=generate_uuid)
    company_id = Column(
        UUIDType,
        ForeignKey("companies.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
        default=DEFAULT_COMPANY_ID,
    )
    customer_id = Column(
        UUIDType, ForeignKey("customers.id", ondelete="RESTRICT"), nullable=False, index=True
    )
    number = Column(String(50), nullable=False)
    issue_date = Column(Date, nullable=False)
    status = Column(String(20), nullable=False, default=PaymentDocumentStatus.DRAFT.value)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    @property
    def debtor_id(self):  # type: ignore[no-untyped-def]
        return self.customer_id


class ReceiptItem(Base):
    __tablename__ = "receipt_items"

    id = Column(UUIDType, primary_key=True, default=generate_uuid)
    receipt_id = Column(
        UUIDType, ForeignKey("receipts.id", ondelete="CASCADE"), nullable=False, index=True
    )
    invoice_id = Column(
        UUIDType, ForeignKey("sales_invoices.id", ondelete="RESTRICT"), nullable=False, index=True
    )
    amount = Column(Numeric(12, 4), nullable=False)


class PaymentOrder(Base):
    __tablename__ = "payment_orders"

    id = Column(UUIDType, primary_key=True, default=generate_uuid)
    company_id = Column(
        UUIDType,
        ForeignKey("companies.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
        default=DEFAULT_COMPANY_ID,
    )
    supplier_id = Column(
        UUIDType, ForeignKey("suppliers.id", ondelete="RESTRICT"), nullable=False, index=True
    )
    number = Column(String(50), nullable=False)
    issue_date = Column(Date, nullable=False)
    status = Column(String(20), nullable=False, default=PaymentDocumentStatus.DRAFT.value)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    @property
    def debtor_id(self):  # type: ignore[no-untyped-def]
        return self.supplier_id


class PaymentOrderItem(Base):
    __tablename__ = "payment_order_items"

    id = Column(UUIDType, primary_key=True, default=generate_uuid)
    payment_order_id = Column(
        UUIDType, ForeignKey("payment_orders.id", ondelete="CASCADE"), nullable=False, index=True
    )
    invoice_id = Column(
        UUIDType,
        ForeignKey("purchase_invoices.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
    )
    amount = Column(Numeric(12, 4), nullable=False)
