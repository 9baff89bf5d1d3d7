from compensation.schemas.compensation import (
    ApplicationResponse,
    CompensationResultResponse,
    ConfirmInvoiceResponse,
    CreditNoteApplicationResponse,
    InvoiceBalanceResponse,
    OutstandingInvoiceResponse,
)
from compensation.schemas.invoice import InvoiceCreate, InvoiceResponse
from compensation.schemas.party import DebtorCreate, DebtorResponse
from compensation.schemas.treasury import (
    PaymentDocumentCreate,
    PaymentDocumentResponse,
    PaymentItemCreate,
)

__all__ = [
    "ApplicationResponse",
    "CompensationResultResponse",
    "ConfirmInvoiceResponse",
    "CreditNoteApplicationResponse",
    "DebtorCreate",
    "DebtorResponse",
    "InvoiceBalanceResponse",
    "InvoiceCreate",
    "InvoiceResponse",
    "OutstandingInvoiceResponse",
    "PaymentDocumentCreate",
    "PaymentDocumentResponse",
    "PaymentItemCreate",
]
