"""Sales and purchase invoices, including the credit and debit notes issued against them."""

from enum import Enum

from sqlalchemy import Column, Date, DateTime, ForeignKey, Integer, Numeric, String, func

from compensation.core.database import Base
from compensation.models.shared import DEFAULT_COMPANY_ID, UUIDType, generate_uuid


class InvoiceStatus(str, Enum):
    DRAFT = "draft"
    CONFIRMED = "confirmed"
    PARTIAL_PAID = "partial_paid"
    PAID = "paid"
    CANCELLED = "cancelled"


class VoucherClass(str, Enum):
    ORDINARY = "ordinary"
    CREDIT_NOTE = "credit_note"
    DEBIT_NOTE = "debit_note"


NOTE_CLASSES = (VoucherClass.CREDIT_NOTE.value, VoucherClass.DEBIT_NOTE.value)
OPEN_STATUSES = (InvoiceStatus.CONFIRMED.value, InvoiceStatus.PARTIAL_PAID.value)


class InvoiceColumns:
    """Columns shared by both invoice tables.

    Foreign keys and the version counter live on the concrete classes
    because they reference the class's own table.
    """

    id = Column(UUIDType, primary_key=True, default=generate_uuid)
    number = Column(String(50), nullable=False, index=True)
    voucher_class = Column(String(20), nullable=False, default=VoucherClass.ORDINARY.value)
    status = Column(String(20), nullable=False, default=InvoiceStatus.DRAFT.value)
    issue_date = Column(Date, nullable=False, index=True)

    # Amounts (stored as Decimal with 4 decimal places for precision)
    total = Column(Numeric(12, 4), nullable=False, default=0)
    currency = Column(String(3), nullable=False, default="USD")

    confirmed_at = Column(DateTime(timezone=True), nullable=True)
    cancelled_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    @property
    def is_note(self) -> bool:
        return self.voucher_class in NOTE_CLASSES


class SalesInvoice(InvoiceColumns, Base):
    __tablename__ = "sales_invoices"

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
    original_invoice_id = Column(
        UUIDType, ForeignKey("sales_invoices.id", ondelete="RESTRICT"), nullable=True, index=True
    )
    version = Column(Integer, nullable=False)

    __mapper_args__ = {"version_id_col": version}

    @property
    def debtor_id(self):  # type: ignore[no-untyped-def]
        return self.customer_id


class PurchaseInvoice(InvoiceColumns, Base):
    __tablename__ = "purchase_invoices"

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
    original_invoice_id = Column(
        UUIDType,
        ForeignKey("purchase_invoices.id", ondelete="RESTRICT"),
        nullable=True,
        index=True,
    )
    version = Column(Integer, nullable=False)

    __mapper_args__ = {"version_id_col": version}

    @property
    def debtor_id(self):  # type: ignore[no-untyped-def]
        return self.supplier_id
