"""Allocation planning: decide how much of a note goes to which invoice.

Pure functions over :class:`OutstandingInvoice`-like objects (anything with
``invoice_id``, ``issue_date`` and ``pending_amount``); nothing here touches
the database.
"""

from dataclasses import dataclass, field
from decimal import ROUND_DOWN, Decimal
from typing import Any
from uuid import UUID

from compensation.core.money import CENT, ZERO, is_settled, round_to_cents, to_decimal


@dataclass(frozen=True)
class Allocation:
    invoice_id: UUID
    amount: Decimal
    pending_before: Decimal

    @property
    def pending_after(self) -> Decimal:
        return self.pending_before - self.amount


@dataclass
class AllocationPlan:
    allocations: list[Allocation] = field(default_factory=list)
    remaining: Decimal = ZERO

    @property
    def applied_total(self) -> Decimal:
        return sum((allocation.amount for allocation in self.allocations), ZERO)

    @property
    def fully_applied(self) -> bool:
        return is_settled(self.remaining)


def order_for_allocation(invoices: list[Any], original_invoice_id: UUID | None = None) -> list[Any]:
    """Oldest first, with the note's original invoice (if eligible) in front."""
    # sorted() is stable, so same-day invoices keep the order they came in.
    ordered = sorted(invoices, key=lambda invoice: invoice.issue_date)
    if original_invoice_id is None:
        return ordered

    for index, invoice in enumerate(ordered):
        if invoice.invoice_id == original_invoice_id:
            ordered.insert(0, ordered.pop(index))
            break
    return ordered


def plan_allocations(
    invoices: list[Any],
    credit_total: Decimal,
    original_invoice_id: UUID | None = None,
) -> AllocationPlan:
    """Greedily spread *credit_total* over *invoices*.

    Each allocation is ``min(remaining, pending)`` rounded to cents. An
    amount that rounds above the remaining credit is rounded down instead,
    so a note with sub-cent digits is never over-applied. Planning
    stops once the remaining credit is settled or the invoices run out;
    whatever is left stays unapplied on the note.
    """
    plan = AllocationPlan(remaining=to_decimal(credit_total))

    for invoice in order_for_allocation(invoices, original_invoice_id):
        if is_settled(plan.remaining):
            break

        pending = to_decimal(invoice.pending_amount)
        amount = round_to_cents(min(plan.remaining, pending))
        if amount > plan.remaining:
            # Never apply more than the note holds.
            amount = plan.remaining.quantize(CENT, rounding=ROUND_DOWN)
        if amount <= ZERO:
            continue

        plan.allocations.append(
            Allocation(invoice_id=invoice.invoice_id, amount=amount, pending_before=pending)
        )
        plan.remaining -= amount

    return plan
