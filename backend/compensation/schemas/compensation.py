"""Compensation engine response schemas."""

from datetime import date, datetime
from decimal import Decimal
from uuid import UUID

from pydantic import BaseModel, ConfigDict

from compensation.models.invoice import InvoiceStatus
from compensation.schemas.invoice import InvoiceResponse


class ApplicationResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    invoice_id: UUID
    amount: Decimal


class CompensationResultResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    credit_note_id: UUID
    applications: list[ApplicationResponse]
    applied_total: Decimal
    unapplied: Decimal
    credit_note_status: InvoiceStatus


class CreditNoteApplicationResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    credit_note_id: UUID
    invoice_id: UUID
    amount: Decimal
    sequence: int
    reverses_id: UUID | None = None
    created_at: datetime | None = None


class OutstandingInvoiceResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    invoice_id: UUID
    number: str
    issue_date: date
    pending_amount: Decimal


class InvoiceBalanceResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    invoice_id: UUID
    total: Decimal
    direct_payments: Decimal
    explicit_applications: Decimal
    implicit_notes: Decimal
    pending_amount: Decimal
    implicit_note_ids: list[UUID]


class ConfirmInvoiceResponse(BaseModel):
    invoice: InvoiceResponse
    compensation: CompensationResultResponse | None = None
