"""Debtor, invoice and payment document endpoints.

Documents are created here and moved through their lifecycle by the
ledger endpoints. Mounted under ``/v1/{side}`` like the ledger router.
"""

from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from compensation.core.database import get_db
from compensation.core.tenancy import get_current_company
from compensation.models.invoice import NOTE_CLASSES, InvoiceStatus
from compensation.models.treasury import PaymentDocumentStatus
from compensation.repositories.invoice_repository import (
    InvoiceRepository,
    PurchaseInvoiceRepository,
    SalesInvoiceRepository,
)
from compensation.repositories.party_repository import (
    CustomerRepository,
    DebtorRepository,
    SupplierRepository,
)
from compensation.repositories.payment_document_repository import (
    PaymentDocumentRepository,
    PaymentOrderRepository,
    ReceiptRepository,
)
from compensation.schemas.invoice import InvoiceCreate, InvoiceResponse
from compensation.schemas.party import DebtorCreate, DebtorResponse
from compensation.schemas.treasury import PaymentDocumentCreate, PaymentDocumentResponse
from compensation.services.compensation import LedgerSide, get_ledger_adapter

router = APIRouter()

DEBTOR_REPOSITORIES: dict[LedgerSide, type[DebtorRepository]] = {
    LedgerSide.SALES: CustomerRepository,
    LedgerSide.PURCHASES: SupplierRepository,
}
INVOICE_REPOSITORIES: dict[LedgerSide, type[InvoiceRepository]] = {
    LedgerSide.SALES: SalesInvoiceRepository,
    LedgerSide.PURCHASES: PurchaseInvoiceRepository,
}
PAYMENT_REPOSITORIES: dict[LedgerSide, type[PaymentDocumentRepository]] = {
    LedgerSide.SALES: ReceiptRepository,
    LedgerSide.PURCHASES: PaymentOrderRepository,
}


def _require_debtor(side: LedgerSide, db: Session, debtor_id: UUID, company_id: UUID) -> None:
    if not DEBTOR_REPOSITORIES[side](db).get_by_id(debtor_id, company_id):
        raise HTTPException(status_code=404, detail="Debtor not found")


@router.post(
    "/debtors",
    response_model=DebtorResponse,
    status_code=201,
    summary="Create debtor",
    responses={422: {"description": "Validation error"}},
)
async def create_debtor(
    side: LedgerSide,
    data: DebtorCreate,
    db: Session = Depends(get_db),
    company_id: UUID = Depends(get_current_company),
) -> DebtorResponse:
    """Create a customer (sales) or supplier (purchases)."""
    debtor = DEBTOR_REPOSITORIES[side](db).create(data.name, company_id, data.tax_id)
    return DebtorResponse.model_validate(debtor)


@router.post(
    "/invoices",
    response_model=InvoiceResponse,
    status_code=201,
    summary="Create invoice",
    responses={
        400: {"description": "Notes must be created as drafts"},
        404: {"description": "Debtor or original invoice not found"},
        422: {"description": "Validation error"},
    },
)
async def create_invoice(
    side: LedgerSide,
    data: InvoiceCreate,
    db: Session = Depends(get_db),
    company_id: UUID = Depends(get_current_company),
) -> InvoiceResponse:
    """Create an invoice or a credit/debit note.

    Notes are compensated when they are confirmed, so they can only be
    created as drafts.
    """
    if data.voucher_class.value in NOTE_CLASSES and data.status != InvoiceStatus.DRAFT:
        raise HTTPException(
            status_code=400, detail="Credit and debit notes must be created as drafts"
        )
    _require_debtor(side, db, data.debtor_id, company_id)
    if data.original_invoice_id is not None:
        original = get_ledger_adapter(side, db).get_invoice(data.original_invoice_id, company_id)
        if not original or original.debtor_id != data.debtor_id:
            raise HTTPException(status_code=404, detail="Original invoice not found")

    invoice = INVOICE_REPOSITORIES[side](db).create(data, company_id)
    return InvoiceResponse.model_validate(invoice)


@router.post(
    "/payments",
    response_model=PaymentDocumentResponse,
    status_code=201,
    summary="Create payment document",
    responses={
        400: {"description": "An item points at another debtor's invoice"},
        404: {"description": "Debtor not found"},
        422: {"description": "Validation error"},
    },
)
async def create_payment(
    side: LedgerSide,
    data: PaymentDocumentCreate,
    db: Session = Depends(get_db),
    company_id: UUID = Depends(get_current_company),
) -> PaymentDocumentResponse:
    """Create a receipt (sales) or payment order (purchases) with its items."""
    _require_debtor(side, db, data.debtor_id, company_id)
    ledger = get_ledger_adapter(side, db)
    for item in data.items:
        invoice = ledger.get_invoice(item.invoice_id, company_id)
        if not invoice or invoice.debtor_id != data.debtor_id:
            raise HTTPException(
                status_code=400,
                detail=f"Invoice {item.invoice_id} does not belong to the debtor",
            )

    document = PAYMENT_REPOSITORIES[side](db).create(data, company_id)
    return PaymentDocumentResponse.model_validate(document)


def _set_payment_status(
    side: LedgerSide,
    db: Session,
    payment_id: UUID,
    company_id: UUID,
    status: PaymentDocumentStatus,
) -> PaymentDocumentResponse:
    document = PAYMENT_REPOSITORIES[side](db).set_status(payment_id, company_id, status)
    if not document:
        raise HTTPException(status_code=404, detail="Payment document not found")
    return PaymentDocumentResponse.model_validate(document)


@router.post(
    "/payments/{payment_id}/confirm",
    response_model=PaymentDocumentResponse,
    summary="Confirm payment document",
    responses={404: {"description": "Payment document not found"}},
)
async def confirm_payment(
    side: LedgerSide,
    payment_id: UUID,
    db: Session = Depends(get_db),
    company_id: UUID = Depends(get_current_company),
) -> PaymentDocumentResponse:
    """Confirm a payment document; its items start counting against invoices."""
    return _set_payment_status(side, db, payment_id, company_id, PaymentDocumentStatus.CONFIRMED)


@router.post(
    "/payments/{payment_id}/cancel",
    response_model=PaymentDocumentResponse,
    summary="Cancel payment document",
    responses={404: {"description": "Payment document not found"}},
)
async def cancel_payment(
    side: LedgerSide,
    payment_id: UUID,
    db: Session = Depends(get_db),
    company_id: UUID = Depends(get_current_company),
) -> PaymentDocumentResponse:
    return _set_payment_status(side, db, payment_id, company_id, PaymentDocumentStatus.CANCELLED)
