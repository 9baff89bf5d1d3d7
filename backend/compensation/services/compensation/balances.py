"""Outstanding-balance calculation.

An invoice's pending amount is its total minus everything already offset
against it:

* confirmed direct payments (receipt or payment-order items),
* explicit credit note applications recorded by this engine,
* the full total of live notes linked through ``original_invoice_id`` that
  never went through the engine (legacy data, see ``implicit_notes``).
"""

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import Any
from uuid import UUID

from compensation.core.money import ZERO, is_settled, to_decimal
from compensation.services.compensation.ledgers import LedgerAdapter


@dataclass
class InvoiceBalance:
    invoice_id: UUID
    total: Decimal
    direct_payments: Decimal = ZERO
    explicit_applications: Decimal = ZERO
    implicit_notes: Decimal = ZERO
    implicit_note_ids: list[UUID] = field(default_factory=list)

    @property
    def pending_amount(self) -> Decimal:
        return self.total - self.direct_payments - self.explicit_applications - self.implicit_notes

    @property
    def offset_amount(self) -> Decimal:
        return self.total - self.pending_amount


@dataclass
class OutstandingInvoice:
    """An eligible invoice together with what it still owes."""

    invoice: Any
    pending_amount: Decimal

    @property
    def invoice_id(self) -> UUID:
        return self.invoice.id  # type: ignore[no-any-return]

    @property
    def issue_date(self) -> date:
        return self.invoice.issue_date  # type: ignore[no-any-return]

    @property
    def number(self) -> str:
        return str(self.invoice.number)


def compute_balances(
    ledger: LedgerAdapter,
    invoices: list[Any],
    exclude_note_id: UUID | None = None,
) -> dict[UUID, InvoiceBalance]:
    """Break down the balance of every invoice in *invoices*.

    *exclude_note_id* names the note currently being compensated. It is
    already confirmed and may point at one of the invoices, but its value
    is what is being distributed, so it must not count as consumed.
    """
    invoice_ids = [invoice.id for invoice in invoices]
    payments = ledger.fetch_direct_payments(invoice_ids)
    applications = ledger.fetch_explicit_applications(invoice_ids)
    linked_notes = ledger.fetch_linked_notes(invoice_ids)

    candidate_ids = [
        note.id
        for notes in linked_notes.values()
        for note in notes
        if note.id != exclude_note_id
    ]
    # A note with any application row is fully described by its rows.
    processed_ids = ledger.fetch_notes_with_applications(candidate_ids)

    balances: dict[UUID, InvoiceBalance] = {}
    for invoice in invoices:
        received = applications.get(invoice.id, [])
        explicit_ids = {row.credit_note_id for row in received}
        implicit = [
            note
            for note in linked_notes.get(invoice.id, [])
            if note.id != exclude_note_id
            and note.id not in explicit_ids
            and note.id not in processed_ids
        ]
        balances[invoice.id] = InvoiceBalance(
            invoice_id=invoice.id,
            total=to_decimal(invoice.total),
            direct_payments=payments.get(invoice.id, ZERO),
            explicit_applications=sum((to_decimal(row.amount) for row in received), ZERO),
            implicit_notes=sum((to_decimal(note.total) for note in implicit), ZERO),
            implicit_note_ids=[note.id for note in implicit],
        )
    return balances


def list_outstanding(
    ledger: LedgerAdapter,
    company_id: UUID,
    debtor_id: UUID,
    exclude_note_id: UUID | None = None,
    lock: bool = True,
) -> list[OutstandingInvoice]:
    """Eligible invoices of a debtor that still owe more than half a cent.

    Returns an empty list when the debtor has nothing open. The order is
    the ledger's: ascending issue date.
    """
    invoices = ledger.fetch_eligible_invoices(company_id, debtor_id, lock=lock)
    if not invoices:
        return []

    balances = compute_balances(ledger, invoices, exclude_note_id=exclude_note_id)
    outstanding = []
    for invoice in invoices:
        pending = balances[invoice.id].pending_amount
        if is_settled(pending):
            continue
        outstanding.append(OutstandingInvoice(invoice=invoice, pending_amount=pending))
    return outstanding
