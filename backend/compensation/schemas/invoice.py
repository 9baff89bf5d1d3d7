"""Invoice schemas shared by the sales and purchase ledgers."""

from datetime import date, datetime
from decimal import Decimal
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from compensation.models.invoice import InvoiceStatus, VoucherClass


class InvoiceCreate(BaseModel):
    number: str = Field(max_length=50)
    debtor_id: UUID
    issue_date: date
    total: Decimal = Field(ge=0)
    voucher_class: VoucherClass = VoucherClass.ORDINARY
    original_invoice_id: UUID | None = None
    currency: str = Field(default="USD", min_length=3, max_length=3)
    status: InvoiceStatus = InvoiceStatus.DRAFT


class InvoiceResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    company_id: UUID
    debtor_id: UUID
    number: str
    voucher_class: VoucherClass
    status: InvoiceStatus
    issue_date: date
    total: Decimal
    currency: str
    original_invoice_id: UUID | None = None
    confirmed_at: datetime | None = None
    cancelled_at: datetime | None = None
