"""Invoice lifecycle and credit note compensation endpoints.

Mounted once per ledger under ``/v1/{side}``; ``side`` is ``sales`` or
``purchases``.
"""

from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from compensation.core.database import get_compensation_db
from compensation.core.tenancy import get_current_company
from compensation.schemas.compensation import (
    CompensationResultResponse,
    ConfirmInvoiceResponse,
    CreditNoteApplicationResponse,
    InvoiceBalanceResponse,
    OutstandingInvoiceResponse,
)
from compensation.schemas.invoice import InvoiceResponse
from compensation.services.compensation import (
    CompensationError,
    CreditNoteCompensationService,
    DocumentNotFound,
    InvalidDocumentState,
    LedgerSide,
    TransactionConflict,
)
from compensation.services.compensation.exceptions import persistence_guard
from compensation.services.invoice_lifecycle import InvoiceLifecycleService

router = APIRouter()

ERROR_RESPONSES: dict[int | str, dict[str, Any]] = {
    400: {"description": "Document is not in a valid state for this operation"},
    404: {"description": "Document not found"},
    409: {"description": "Concurrent modification, retry the request"},
    500: {"description": "The change could not be persisted"},
}


def _status_code_for(exc: CompensationError) -> int:
    if isinstance(exc, DocumentNotFound):
        return 404
    if isinstance(exc, InvalidDocumentState):
        return 400
    if isinstance(exc, TransactionConflict):
        return 409
    return 500


@contextmanager
def engine_call(db: Session, operation: str) -> Iterator[None]:
    """Commit the block's work and turn engine errors into HTTP errors."""
    try:
        with persistence_guard(db, operation):
            yield
            db.commit()
    except CompensationError as exc:
        raise HTTPException(status_code=_status_code_for(exc), detail=str(exc)) from exc


@router.post(
    "/invoices/{invoice_id}/confirm",
    response_model=ConfirmInvoiceResponse,
    summary="Confirm invoice",
    responses=ERROR_RESPONSES,
)
async def confirm_invoice(
    side: LedgerSide,
    invoice_id: UUID,
    db: Session = Depends(get_compensation_db),
    company_id: UUID = Depends(get_current_company),
) -> ConfirmInvoiceResponse:
    """Confirm a draft invoice. Credit and debit notes are compensated on confirmation."""
    service = InvoiceLifecycleService(db, side)
    with engine_call(db, "invoice confirmation"):
        invoice, result = service.confirm_invoice(invoice_id, company_id)
    return ConfirmInvoiceResponse(
        invoice=InvoiceResponse.model_validate(invoice),
        compensation=CompensationResultResponse.model_validate(result) if result else None,
    )


@router.post(
    "/invoices/{invoice_id}/cancel",
    response_model=InvoiceResponse,
    summary="Cancel invoice",
    responses=ERROR_RESPONSES,
)
async def cancel_invoice(
    side: LedgerSide,
    invoice_id: UUID,
    db: Session = Depends(get_compensation_db),
    company_id: UUID = Depends(get_current_company),
) -> InvoiceResponse:
    """Cancel an invoice, reversing it first when it is a compensated note."""
    service = InvoiceLifecycleService(db, side)
    with engine_call(db, "invoice cancellation"):
        invoice = service.cancel_invoice(invoice_id, company_id)
    return InvoiceResponse.model_validate(invoice)


@router.get(
    "/invoices/{invoice_id}/balance",
    response_model=InvoiceBalanceResponse,
    summary="Get invoice balance",
    responses={404: {"description": "Invoice not found"}},
)
async def get_invoice_balance(
    side: LedgerSide,
    invoice_id: UUID,
    db: Session = Depends(get_compensation_db),
    company_id: UUID = Depends(get_current_company),
) -> InvoiceBalanceResponse:
    """Break down what has been offset against an invoice and what is still pending."""
    service = CreditNoteCompensationService(db, side)
    with engine_call(db, "invoice balance"):
        balance = service.get_invoice_balance(invoice_id, company_id)
    return InvoiceBalanceResponse.model_validate(balance)


@router.get(
    "/debtors/{debtor_id}/outstanding",
    response_model=list[OutstandingInvoiceResponse],
    summary="List outstanding invoices",
)
async def list_outstanding_invoices(
    side: LedgerSide,
    debtor_id: UUID,
    db: Session = Depends(get_compensation_db),
    company_id: UUID = Depends(get_current_company),
) -> list[OutstandingInvoiceResponse]:
    """List a debtor's open ordinary invoices with their pending amounts, oldest first."""
    service = CreditNoteCompensationService(db, side)
    with engine_call(db, "outstanding invoices"):
        outstanding = service.list_outstanding(debtor_id, company_id)
    return [OutstandingInvoiceResponse.model_validate(item) for item in outstanding]


@router.post(
    "/credit_notes/{credit_note_id}/compensate",
    response_model=CompensationResultResponse,
    summary="Compensate credit note",
    responses=ERROR_RESPONSES,
)
async def compensate_credit_note(
    side: LedgerSide,
    credit_note_id: UUID,
    db: Session = Depends(get_compensation_db),
    company_id: UUID = Depends(get_current_company),
) -> CompensationResultResponse:
    """Apply a confirmed credit or debit note to the debtor's outstanding invoices."""
    service = CreditNoteCompensationService(db, side)
    with engine_call(db, "credit note compensation"):
        result = service.compensate(credit_note_id, company_id)
    return CompensationResultResponse.model_validate(result)


@router.post(
    "/credit_notes/{credit_note_id}/reverse",
    response_model=CompensationResultResponse,
    summary="Reverse credit note compensation",
    responses=ERROR_RESPONSES,
)
async def reverse_credit_note(
    side: LedgerSide,
    credit_note_id: UUID,
    db: Session = Depends(get_compensation_db),
    company_id: UUID = Depends(get_current_company),
) -> CompensationResultResponse:
    """Undo a compensation with inverse application entries."""
    service = CreditNoteCompensationService(db, side)
    with engine_call(db, "credit note reversal"):
        result = service.reverse(credit_note_id, company_id)
    return CompensationResultResponse.model_validate(result)


@router.get(
    "/credit_notes/{credit_note_id}/applications",
    response_model=list[CreditNoteApplicationResponse],
    summary="List credit note applications",
    responses={404: {"description": "Credit note not found"}},
)
async def list_credit_note_applications(
    side: LedgerSide,
    credit_note_id: UUID,
    db: Session = Depends(get_compensation_db),
    company_id: UUID = Depends(get_current_company),
) -> list[CreditNoteApplicationResponse]:
    """List the note's application entries in the order they were written."""
    service = CreditNoteCompensationService(db, side)
    with engine_call(db, "credit note applications"):
        applications = service.list_applications(credit_note_id, company_id)
    return [CreditNoteApplicationResponse.model_validate(row) for row in applications]
