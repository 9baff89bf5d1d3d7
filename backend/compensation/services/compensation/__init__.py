"""Credit/debit note compensation engine."""

from compensation.services.compensation.balances import (
    InvoiceBalance,
    OutstandingInvoice,
    compute_balances,
    list_outstanding,
)
from compensation.services.compensation.exceptions import (
    CompensationError,
    CreditNoteNotFound,
    DocumentNotFound,
    InvalidCreditNoteState,
    InvalidDocumentState,
    InvoiceNotFound,
    PersistenceFailure,
    TransactionConflict,
)
from compensation.services.compensation.ledgers import (
    LedgerAdapter,
    LedgerSide,
    PurchaseLedgerAdapter,
    SalesLedgerAdapter,
    get_ledger_adapter,
)
from compensation.services.compensation.planner import (
    Allocation,
    AllocationPlan,
    order_for_allocation,
    plan_allocations,
)
from compensation.services.compensation.service import (
    AppliedAmount,
    CompensationResult,
    CreditNoteCompensationService,
)

__all__ = [
    "Allocation",
    "AllocationPlan",
    "AppliedAmount",
    "CompensationError",
    "CompensationResult",
    "CreditNoteCompensationService",
    "CreditNoteNotFound",
    "DocumentNotFound",
    "InvalidCreditNoteState",
    "InvalidDocumentState",
    "InvoiceBalance",
    "InvoiceNotFound",
    "LedgerAdapter",
    "LedgerSide",
    "OutstandingInvoice",
    "PersistenceFailure",
    "PurchaseLedgerAdapter",
    "SalesLedgerAdapter",
    "TransactionConflict",
    "compute_balances",
    "get_ledger_adapter",
    "list_outstanding",
    "order_for_allocation",
    "plan_allocations",
]
