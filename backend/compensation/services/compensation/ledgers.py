"""Ledger adapters: the data capabilities the compensation engine needs.

The sales and purchase sides keep their documents in separate tables but
are otherwise identical, so one SQLAlchemy implementation serves both and
the concrete adapters only name their models.
"""

from abc import ABC, abstractmethod
from collections import defaultdict
from decimal import Decimal
from enum import Enum
from typing import Any, ClassVar
from uuid import UUID

from sqlalchemy import func
from sqlalchemy.orm import Session

from compensation.core.money import to_decimal
from compensation.models.invoice import (
    NOTE_CLASSES,
    OPEN_STATUSES,
    InvoiceStatus,
    VoucherClass,
)
from compensation.models.treasury import (
    PaymentDocumentStatus,
    PaymentOrder,
    PaymentOrderItem,
    Receipt,
    ReceiptItem,
)
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


class LedgerSide(str, Enum):
    SALES = "sales"
    PURCHASES = "purchases"


class LedgerAdapter(ABC):
    """Capability set over one side's invoices, payments and applications.

    Writes are flushed, never committed: the caller owns the transaction.
    """

    side: ClassVar[LedgerSide]
    # Audit log resource name for this side's invoices and notes.
    resource_type: ClassVar[str]

    def __init__(self, db: Session) -> None:
        self.db = db

    @abstractmethod
    def get_note(self, note_id: UUID, company_id: UUID, lock: bool = True) -> Any | None:
        """Load a credit/debit note, locking its row when *lock* is set."""
        ...  # pragma: no cover

    @abstractmethod
    def get_invoice(self, invoice_id: UUID, company_id: UUID, lock: bool = False) -> Any | None:
        """Load any invoice or note of the tenant."""
        ...  # pragma: no cover

    @abstractmethod
    def fetch_eligible_invoices(
        self, company_id: UUID, debtor_id: UUID, lock: bool = True
    ) -> list[Any]:
        """Open ordinary invoices of the debtor, oldest first."""
        ...  # pragma: no cover

    @abstractmethod
    def fetch_direct_payments(self, invoice_ids: list[UUID]) -> dict[UUID, Decimal]:
        """Sum of confirmed receipt/payment-order items per invoice."""
        ...  # pragma: no cover

    @abstractmethod
    def fetch_explicit_applications(self, invoice_ids: list[UUID]) -> dict[UUID, list[Any]]:
        """Application rows received by each invoice."""
        ...  # pragma: no cover

    @abstractmethod
    def fetch_linked_notes(self, invoice_ids: list[UUID]) -> dict[UUID, list[Any]]:
        """Live notes pointing at each invoice through ``original_invoice_id``."""
        ...  # pragma: no cover

    @abstractmethod
    def fetch_notes_with_applications(self, note_ids: list[UUID]) -> set[UUID]:
        """Subset of *note_ids* that already went through the engine."""
        ...  # pragma: no cover

    @abstractmethod
    def get_applications_for_note(self, note_id: UUID) -> list[Any]:
        """Application rows written for a note, in sequence order."""
        ...  # pragma: no cover

    @abstractmethod
    def next_application_sequence(self, note_id: UUID) -> int:
        ...  # pragma: no cover

    @abstractmethod
    def write_application(
        self,
        company_id: UUID,
        credit_note_id: UUID,
        invoice_id: UUID,
        amount: Decimal,
        sequence: int,
        reverses_id: UUID | None = None,
    ) -> Any:
        ...  # pragma: no cover

    @abstractmethod
    def update_invoice_status(self, invoice: Any, status: InvoiceStatus) -> Any:
        ...  # pragma: no cover


class SqlLedgerAdapter(LedgerAdapter):
    """SQLAlchemy implementation shared by both ledgers."""

    invoice_repository_class: ClassVar[type[InvoiceRepository]]
    application_repository_class: ClassVar[type[CreditNoteApplicationRepository]]
    payment_document_model: ClassVar[Any]
    payment_item_model: ClassVar[Any]
    payment_document_field: ClassVar[str]

    def __init__(self, db: Session) -> None:
        super().__init__(db)
        self.invoice_repo = self.invoice_repository_class(db)
        self.application_repo = self.application_repository_class(db)
        self.invoice_model = self.invoice_repo.model
        self.debtor_field = self.invoice_repo.debtor_field

    def _invoice_query(self, company_id: UUID, lock: bool):  # type: ignore[no-untyped-def]
        query = self.db.query(self.invoice_model).filter(
            self.invoice_model.company_id == company_id
        )
        if lock:
            query = query.with_for_update()
        return query

    def get_note(self, note_id: UUID, company_id: UUID, lock: bool = True) -> Any | None:
        return (
            self._invoice_query(company_id, lock)
            .filter(
                self.invoice_model.id == note_id,
                self.invoice_model.voucher_class.in_(NOTE_CLASSES),
            )
            .first()
        )

    def get_invoice(self, invoice_id: UUID, company_id: UUID, lock: bool = False) -> Any | None:
        return (
            self._invoice_query(company_id, lock)
            .filter(self.invoice_model.id == invoice_id)
            .first()
        )

    def fetch_eligible_invoices(
        self, company_id: UUID, debtor_id: UUID, lock: bool = True
    ) -> list[Any]:
        return (
            self._invoice_query(company_id, lock)
            .filter(
                getattr(self.invoice_model, self.debtor_field) == debtor_id,
                self.invoice_model.status.in_(OPEN_STATUSES),
                self.invoice_model.voucher_class == VoucherClass.ORDINARY.value,
            )
            .order_by(self.invoice_model.issue_date.asc(), self.invoice_model.number.asc())
            .all()
        )

    def fetch_direct_payments(self, invoice_ids: list[UUID]) -> dict[UUID, Decimal]:
        if not invoice_ids:
            return {}
        item = self.payment_item_model
        document = self.payment_document_model
        rows = (
            self.db.query(item.invoice_id, func.sum(item.amount))
            .join(document, document.id == getattr(item, self.payment_document_field))
            .filter(
                item.invoice_id.in_(invoice_ids),
                document.status == PaymentDocumentStatus.CONFIRMED.value,
            )
            .group_by(item.invoice_id)
            .all()
        )
        return {invoice_id: to_decimal(total) for invoice_id, total in rows}

    def fetch_explicit_applications(self, invoice_ids: list[UUID]) -> dict[UUID, list[Any]]:
        return self.application_repo.get_by_invoice_ids(invoice_ids)

    def fetch_linked_notes(self, invoice_ids: list[UUID]) -> dict[UUID, list[Any]]:
        linked: dict[UUID, list[Any]] = defaultdict(list)
        if not invoice_ids:
            return linked
        notes = (
            self.db.query(self.invoice_model)
            .filter(
                self.invoice_model.original_invoice_id.in_(invoice_ids),
                self.invoice_model.voucher_class.in_(NOTE_CLASSES),
                self.invoice_model.status.notin_(
                    (InvoiceStatus.DRAFT.value, InvoiceStatus.CANCELLED.value)
                ),
            )
            .all()
        )
        for note in notes:
            linked[note.original_invoice_id].append(note)
        return linked

    def fetch_notes_with_applications(self, note_ids: list[UUID]) -> set[UUID]:
        return self.application_repo.get_note_ids_with_applications(note_ids)

    def get_applications_for_note(self, note_id: UUID) -> list[Any]:
        return self.application_repo.get_by_credit_note_id(note_id)

    def next_application_sequence(self, note_id: UUID) -> int:
        return self.application_repo.next_sequence(note_id)

    def write_application(
        self,
        company_id: UUID,
        credit_note_id: UUID,
        invoice_id: UUID,
        amount: Decimal,
        sequence: int,
        reverses_id: UUID | None = None,
    ) -> Any:
        return self.application_repo.create(
            company_id=company_id,
            credit_note_id=credit_note_id,
            invoice_id=invoice_id,
            amount=amount,
            sequence=sequence,
            reverses_id=reverses_id,
        )

    def update_invoice_status(self, invoice: Any, status: InvoiceStatus) -> Any:
        return self.invoice_repo.set_status(invoice, status)


class SalesLedgerAdapter(SqlLedgerAdapter):
    side = LedgerSide.SALES
    resource_type = "sales_invoice"
    invoice_repository_class = SalesInvoiceRepository
    application_repository_class = SalesCreditNoteApplicationRepository
    payment_document_model = Receipt
    payment_item_model = ReceiptItem
    payment_document_field = "receipt_id"


class PurchaseLedgerAdapter(SqlLedgerAdapter):
    side = LedgerSide.PURCHASES
    resource_type = "purchase_invoice"
    invoice_repository_class = PurchaseInvoiceRepository
    application_repository_class = PurchaseCreditNoteApplicationRepository
    payment_document_model = PaymentOrder
    payment_item_model = PaymentOrderItem
    payment_document_field = "payment_order_id"


def get_ledger_adapter(side: LedgerSide | str, db: Session) -> LedgerAdapter:
    """Factory: return the adapter for *side*.

    Raises ``ValueError`` for an unknown side.
    """
    adapters: dict[LedgerSide, type[LedgerAdapter]] = {
        LedgerSide.SALES: SalesLedgerAdapter,
        LedgerSide.PURCHASES: PurchaseLedgerAdapter,
    }
    return adapters[LedgerSide(side)](db)
