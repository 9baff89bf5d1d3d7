"""Invoice repositories for the sales and purchase ledgers.

Both ledgers share one implementation; the subclasses only name the model
and the debtor column.
"""

from datetime import datetime
from typing import Any, ClassVar
from uuid import UUID

from sqlalchemy.orm import Session

from compensation.models.invoice import InvoiceStatus, PurchaseInvoice, SalesInvoice
from compensation.models.shared import DEFAULT_COMPANY_ID, utc_now
from compensation.schemas.invoice import InvoiceCreate


class InvoiceRepository:
    model: ClassVar[Any]
    debtor_field: ClassVar[str]

    def __init__(self, db: Session):
        self.db = db

    def create(self, data: InvoiceCreate, company_id: UUID = DEFAULT_COMPANY_ID) -> Any:
        fields: dict[str, Any] = {
            "company_id": company_id,
            self.debtor_field: data.debtor_id,
            "number": data.number,
            "issue_date": data.issue_date,
            "total": data.total,
            "currency": data.currency,
            "voucher_class": data.voucher_class.value,
            "original_invoice_id": data.original_invoice_id,
            "status": data.status.value,
        }
        if data.status != InvoiceStatus.DRAFT:
            fields["confirmed_at"] = utc_now()
        invoice = self.model(**fields)
        self.db.add(invoice)
        self.db.commit()
        self.db.refresh(invoice)
        return invoice

    def set_status(self, invoice: Any, status: InvoiceStatus, at: datetime | None = None) -> Any:
        """Change an invoice's status inside the caller's transaction."""
        invoice.status = status.value
        if status == InvoiceStatus.CONFIRMED and invoice.confirmed_at is None:
            invoice.confirmed_at = at or utc_now()
        elif status == InvoiceStatus.CANCELLED:
            invoice.cancelled_at = at or utc_now()
        self.db.flush()
        return invoice


class SalesInvoiceRepository(InvoiceRepository):
    model = SalesInvoice
    debtor_field = "customer_id"


class PurchaseInvoiceRepository(InvoiceRepository):
    model = PurchaseInvoice
    debtor_field = "supplier_id"
