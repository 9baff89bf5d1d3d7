"""Invoice lifecycle transitions that drive credit note compensation."""

import logging
from typing import Any
from uuid import UUID

from sqlalchemy.orm import Session

from compensation.core.money import is_settled
from compensation.models.invoice import InvoiceStatus
from compensation.services.audit_service import AuditService
from compensation.services.compensation import (
    CompensationResult,
    CreditNoteCompensationService,
    InvalidDocumentState,
    InvoiceNotFound,
    LedgerSide,
)
from compensation.services.compensation.exceptions import engine_savepoint
from compensation.services.compensation.service import live_applications

logger = logging.getLogger(__name__)


class InvoiceLifecycleService:
    """Confirm and cancel invoices of one ledger.

    Confirming a credit or debit note compensates it in the same
    savepoint, so confirmation and compensation commit together or not at
    all. A failure rolls back only this call's writes; the rest of the
    session's transaction is left to the caller.
    """

    def __init__(self, db: Session, side: LedgerSide | str):
        self.db = db
        self.compensation = CreditNoteCompensationService(db, side)
        self.ledger = self.compensation.ledger
        self.audit = AuditService(db)

    def confirm_invoice(
        self, invoice_id: UUID, company_id: UUID
    ) -> tuple[Any, CompensationResult | None]:
        with engine_savepoint(self.db, "invoice confirmation"):
            invoice = self._get_for_update(invoice_id, company_id)
            if invoice.status != InvoiceStatus.DRAFT.value:
                raise InvalidDocumentState(
                    f"Only draft invoices can be confirmed (status: {invoice.status})"
                )
            self._transition(invoice, InvoiceStatus.CONFIRMED, company_id)

            result = None
            if invoice.is_note:
                result = self.compensation.compensate(invoice.id, company_id)

        logger.info("Invoice %s confirmed", invoice.id)
        return invoice, result

    def cancel_invoice(self, invoice_id: UUID, company_id: UUID) -> Any:
        """Cancel an invoice or note.

        An ordinary invoice that has received payments or applications can
        not be cancelled. A compensated note is reversed first, which frees
        the invoices it was applied to.
        """
        with engine_savepoint(self.db, "invoice cancellation"):
            invoice = self._get_for_update(invoice_id, company_id)
            if invoice.status == InvoiceStatus.CANCELLED.value:
                raise InvalidDocumentState(f"Invoice {invoice.id} is already cancelled")

            if invoice.is_note:
                if live_applications(self.ledger.get_applications_for_note(invoice.id)):
                    self.compensation.reverse(invoice.id, company_id)
            else:
                self._check_cancellable(invoice, company_id)

            self._transition(invoice, InvoiceStatus.CANCELLED, company_id)

        logger.info("Invoice %s cancelled", invoice.id)
        return invoice

    def _get_for_update(self, invoice_id: UUID, company_id: UUID) -> Any:
        invoice = self.ledger.get_invoice(invoice_id, company_id, lock=True)
        if not invoice:
            raise InvoiceNotFound(f"Invoice {invoice_id} not found")
        return invoice

    def _check_cancellable(self, invoice: Any, company_id: UUID) -> None:
        if invoice.status in (InvoiceStatus.PAID.value, InvoiceStatus.PARTIAL_PAID.value):
            raise InvalidDocumentState(
                f"Invoice {invoice.id} has payments applied and cannot be cancelled"
            )
        balance = self.compensation.get_invoice_balance(invoice.id, company_id)
        if not is_settled(balance.offset_amount):
            raise InvalidDocumentState(
                f"Invoice {invoice.id} has payments applied and cannot be cancelled"
            )

    def _transition(self, invoice: Any, status: InvoiceStatus, company_id: UUID) -> None:
        old_status = str(invoice.status)
        self.ledger.update_invoice_status(invoice, status)
        self.audit.log_status_change(
            self.ledger.resource_type, invoice.id, company_id, old_status, status.value
        )
