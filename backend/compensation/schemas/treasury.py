"""Receipt and payment order schemas."""

from datetime import date
from decimal import Decimal
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from compensation.models.treasury import PaymentDocumentStatus


class PaymentItemCreate(BaseModel):
    invoice_id: UUID
    amount: Decimal = Field(gt=0)


class PaymentDocumentCreate(BaseModel):
    """A receipt (sales) or payment order (purchases) with its items."""

    number: str = Field(max_length=50)
    debtor_id: UUID
    issue_date: date
    status: PaymentDocumentStatus = PaymentDocumentStatus.DRAFT
    items: list[PaymentItemCreate] = Field(default_factory=list)


class PaymentDocumentResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    company_id: UUID
    debtor_id: UUID
    number: str
    issue_date: date
    status: PaymentDocumentStatus
