from compensation.models.audit_log import AuditLog
from compensation.models.company import Company
from compensation.models.credit_note_application import (
    PurchaseCreditNoteApplication,
    SalesCreditNoteApplication,
)
from compensation.models.invoice import (
    InvoiceStatus,
    PurchaseInvoice,
    SalesInvoice,
    VoucherClass,
)
from compensation.models.party import Customer, Supplier
from compensation.models.treasury import (
    PaymentDocumentStatus,
    PaymentOrder,
    PaymentOrderItem,
    Receipt,
    ReceiptItem,
)

__all__ = [
    "AuditLog",
    "Company",
    "Customer",
    "InvoiceStatus",
    "PaymentDocumentStatus",
    "PaymentOrder",
    "PaymentOrderItem",
    "PurchaseCreditNoteApplication",
    "PurchaseInvoice",
    "Receipt",
    "ReceiptItem",
    "SalesCreditNoteApplication",
    "SalesInvoice",
    "Supplier",
    "VoucherClass",
]
