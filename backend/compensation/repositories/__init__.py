from compensation.repositories.audit_log_repository import AuditLogRepository
from compensation.repositories.company_repository import CompanyRepository
from compensation.repositories.credit_note_application_repository import (
    CreditNoteApplicationRepository,
    PurchaseCreditNoteApplicationRepository,
    SalesCreditNoteApplicationRepository,
)
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

__all__ = [
    "AuditLogRepository",
    "CompanyRepository",
    "CreditNoteApplicationRepository",
    "CustomerRepository",
    "DebtorRepository",
    "InvoiceRepository",
    "PaymentDocumentRepository",
    "PaymentOrderRepository",
    "PurchaseCreditNoteApplicationRepository",
    "PurchaseInvoiceRepository",
    "ReceiptRepository",
    "SalesCreditNoteApplicationRepository",
    "SalesInvoiceRepository",
    "SupplierRepository",
]
