"""Credit/debit note compensation service.

Applies a confirmed note against the debtor's open invoices: the note's
original invoice first, then oldest first. Every write of a run (application
rows, invoice statuses, the note's status and the audit trail) happens in the
caller's transaction; a failure rolls all of it back.
"""

import logging
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any
from uuid import UUID

from sqlalchemy.orm import Session

from compensation.core.money import ZERO, is_settled, round_to_cents, to_decimal
from compensation.models.invoice import InvoiceStatus
from compensation.services.audit_service import AuditService
from compensation.services.compensation.balances import (
    InvoiceBalance,
    OutstandingInvoice,
    compute_balances,
    list_outstanding,
)
from compensation.services.compensation.exceptions import (
    CreditNoteNotFound,
    InvalidCreditNoteState,
    InvoiceNotFound,
    engine_savepoint,
)
from compensation.services.compensation.ledgers import LedgerAdapter, LedgerSide, get_ledger_adapter
from compensation.services.compensation.planner import Allocation, AllocationPlan, plan_allocations

logger = logging.getLogger(__name__)


@dataclass
class AppliedAmount:
    invoice_id: UUID
    amount: Decimal


@dataclass
class CompensationResult:
    """Outcome of a compensation (or reversal) run."""

    credit_note_id: UUID
    credit_note_status: str
    credit_total: Decimal
    applications: list[AppliedAmount] = field(default_factory=list)

    @property
    def applied_total(self) -> Decimal:
        return sum((application.amount for application in self.applications), ZERO)

    @property
    def unapplied(self) -> Decimal:
        return max(round_to_cents(self.credit_total - self.applied_total), ZERO)


def live_applications(rows: list[Any]) -> list[Any]:
    """Positive application rows that no later row reverses, in sequence order."""
    reversed_ids = {row.reverses_id for row in rows if row.reverses_id is not None}
    return [
        row
        for row in rows
        if row.reverses_id is None and row.id not in reversed_ids and to_decimal(row.amount) > 0
    ]


class CreditNoteCompensationService:
    """Service for applying credit and debit notes against open invoices."""

    def __init__(self, db: Session, side: LedgerSide | str):
        self.db = db
        self.ledger: LedgerAdapter = get_ledger_adapter(side, db)
        self.audit = AuditService(db)

    def compensate(self, credit_note_id: UUID, company_id: UUID) -> CompensationResult:
        """Apply a confirmed note to the debtor's outstanding invoices.

        Args:
            credit_note_id: The note to apply.
            company_id: Tenant scope for every query.

        Returns:
            The applications made, in the order they were written.

        Raises:
            CreditNoteNotFound: If the note does not exist in the tenant.
            InvalidCreditNoteState: If the document is not a note, is not
                confirmed, has no positive total or has already been applied.
            TransactionConflict: If a concurrent writer touched the same rows.
            PersistenceFailure: If any write failed.
        """
        with engine_savepoint(self.db, "credit note compensation"):
            note = self.ledger.get_invoice(credit_note_id, company_id, lock=True)
            if not note:
                raise CreditNoteNotFound(f"Credit note {credit_note_id} not found")
            self._check_compensable(note)

            outstanding = list_outstanding(
                self.ledger, company_id, note.debtor_id, exclude_note_id=note.id
            )
            plan = plan_allocations(outstanding, to_decimal(note.total), note.original_invoice_id)
            result = self._apply_plan(note, outstanding, plan, company_id)

        logger.info(
            "Credit note %s compensated",
            result.credit_note_id,
            extra={
                "credit_note_id": str(result.credit_note_id),
                "applications": [
                    {"invoice_id": str(a.invoice_id), "amount": str(a.amount)}
                    for a in result.applications
                ],
                "unapplied": str(result.unapplied),
            },
        )
        return result

    def reverse(self, credit_note_id: UUID, company_id: UUID) -> CompensationResult:
        """Undo a compensation by appending inverse application rows.

        Existing rows are never modified. Each touched invoice gets its
        status recomputed from its true balance and the note returns to
        CONFIRMED, ready to be compensated again or cancelled.
        """
        with engine_savepoint(self.db, "credit note reversal"):
            note = self.ledger.get_note(credit_note_id, company_id)
            if not note:
                raise CreditNoteNotFound(f"Credit note {credit_note_id} not found")

            live = live_applications(self.ledger.get_applications_for_note(note.id))
            if not live:
                raise InvalidCreditNoteState(
                    f"Credit note {credit_note_id} has no applications to reverse"
                )

            sequence = self.ledger.next_application_sequence(note.id)
            reversals: list[AppliedAmount] = []
            touched_ids: list[UUID] = []
            for offset, row in enumerate(live):
                amount = -to_decimal(row.amount)
                self.ledger.write_application(
                    company_id, note.id, row.invoice_id, amount, sequence + offset, reverses_id=row.id
                )
                reversals.append(AppliedAmount(invoice_id=row.invoice_id, amount=amount))
                if row.invoice_id not in touched_ids:
                    touched_ids.append(row.invoice_id)

            invoices = [
                self.ledger.get_invoice(invoice_id, company_id, lock=True)
                for invoice_id in touched_ids
            ]
            invoices = [invoice for invoice in invoices if invoice is not None]
            balances = compute_balances(self.ledger, invoices)
            for invoice in invoices:
                if invoice.status not in (InvoiceStatus.PAID.value, InvoiceStatus.PARTIAL_PAID.value):
                    continue
                self._transition(invoice, self._status_for_balance(balances[invoice.id]), company_id)

            self._transition(note, InvoiceStatus.CONFIRMED, company_id)
            self.audit.log_action(
                self.ledger.resource_type,
                note.id,
                company_id,
                "compensation_reversed",
                {"applications": [_serialize(a) for a in reversals]},
            )

        result = CompensationResult(
            credit_note_id=note.id,
            credit_note_status=str(note.status),
            credit_total=to_decimal(note.total),
            applications=reversals,
        )
        logger.info(
            "Credit note %s compensation reversed",
            note.id,
            extra={
                "credit_note_id": str(note.id),
                "applications": [_serialize(a) for a in reversals],
            },
        )
        return result

    def list_outstanding(self, debtor_id: UUID, company_id: UUID) -> list[OutstandingInvoice]:
        """Read-only view of the debtor's invoices with something still pending."""
        return list_outstanding(self.ledger, company_id, debtor_id, lock=False)

    def get_invoice_balance(self, invoice_id: UUID, company_id: UUID) -> InvoiceBalance:
        invoice = self.ledger.get_invoice(invoice_id, company_id)
        if not invoice:
            raise InvoiceNotFound(f"Invoice {invoice_id} not found")
        return compute_balances(self.ledger, [invoice])[invoice.id]

    def list_applications(self, credit_note_id: UUID, company_id: UUID) -> list[Any]:
        note = self.ledger.get_note(credit_note_id, company_id, lock=False)
        if not note:
            raise CreditNoteNotFound(f"Credit note {credit_note_id} not found")
        return self.ledger.get_applications_for_note(note.id)

    def _check_compensable(self, note: Any) -> None:
        if not note.is_note:
            raise InvalidCreditNoteState(f"Document {note.id} is not a credit or debit note")
        if note.status != InvoiceStatus.CONFIRMED.value:
            raise InvalidCreditNoteState(
                f"Credit note {note.id} must be confirmed to be compensated (status: {note.status})"
            )
        if to_decimal(note.total) <= ZERO:
            raise InvalidCreditNoteState(f"Credit note {note.id} has no value to apply")
        if live_applications(self.ledger.get_applications_for_note(note.id)):
            raise InvalidCreditNoteState(f"Credit note {note.id} has already been applied")

    def _apply_plan(
        self,
        note: Any,
        outstanding: list[OutstandingInvoice],
        plan: AllocationPlan,
        company_id: UUID,
    ) -> CompensationResult:
        targets = {item.invoice_id: item.invoice for item in outstanding}
        sequence = self.ledger.next_application_sequence(note.id)
        applied: list[AppliedAmount] = []

        for offset, allocation in enumerate(plan.allocations):
            invoice = targets[allocation.invoice_id]
            self.ledger.write_application(
                company_id, note.id, invoice.id, allocation.amount, sequence + offset
            )
            self._transition(invoice, _status_after(allocation), company_id)
            applied.append(AppliedAmount(invoice_id=invoice.id, amount=allocation.amount))

        # A note with nothing to apply keeps its confirmed status.
        if plan.allocations:
            note_status = InvoiceStatus.PAID if plan.fully_applied else InvoiceStatus.PARTIAL_PAID
            self._transition(note, note_status, company_id)

        result = CompensationResult(
            credit_note_id=note.id,
            credit_note_status=str(note.status),
            credit_total=to_decimal(note.total),
            applications=applied,
        )
        self.audit.log_action(
            self.ledger.resource_type,
            note.id,
            company_id,
            "compensated",
            {
                "applications": [_serialize(a) for a in applied],
                "unapplied": str(result.unapplied),
            },
        )
        self.db.flush()
        return result

    def _transition(self, invoice: Any, status: InvoiceStatus, company_id: UUID) -> None:
        old_status = str(invoice.status)
        self.ledger.update_invoice_status(invoice, status)
        self.audit.log_status_change(
            self.ledger.resource_type, invoice.id, company_id, old_status, status.value
        )

    @staticmethod
    def _status_for_balance(balance: InvoiceBalance) -> InvoiceStatus:
        if is_settled(balance.pending_amount):
            return InvoiceStatus.PAID
        if is_settled(balance.offset_amount):
            return InvoiceStatus.CONFIRMED
        return InvoiceStatus.PARTIAL_PAID


def _status_after(allocation: Allocation) -> InvoiceStatus:
    return InvoiceStatus.PAID if is_settled(allocation.pending_after) else InvoiceStatus.PARTIAL_PAID


def _serialize(application: AppliedAmount) -> dict[str, str]:
    return {"invoice_id": str(application.invoice_id), "amount": str(application.amount)}
