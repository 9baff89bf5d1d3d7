"""Tests for the outstanding-balance calculator.

Covers direct payments from confirmed documents only, explicit
applications, the legacy fallback for notes linked through
original_invoice_id, and eligibility filtering.
"""

import itertools
from datetime import date
from decimal import Decimal
from uuid import uuid4

import pytest

from compensation.core.database import get_db
from compensation.models.invoice import InvoiceStatus, VoucherClass
from compensation.models.treasury import PaymentDocumentStatus
from compensation.repositories.company_repository import CompanyRepository
from compensation.repositories.invoice_repository import SalesInvoiceRepository
from compensation.repositories.party_repository import CustomerRepository
from compensation.repositories.payment_document_repository import ReceiptRepository
from compensation.schemas.invoice import InvoiceCreate
from compensation.schemas.treasury import PaymentDocumentCreate, PaymentItemCreate
from compensation.services.compensation import (
    CreditNoteCompensationService,
    InvoiceNotFound,
    compute_balances,
    get_ledger_adapter,
    list_outstanding,
)
from tests.conftest import DEFAULT_COMPANY_ID


@pytest.fixture
def db_session():
    """Create a database session for direct repository testing."""
    gen = get_db()
    db = next(gen)
    try:
        yield db
    finally:
        for _ in gen:
            pass


@pytest.fixture
def customer(db_session):
    return CustomerRepository(db_session).create("Balance Test Customer")


@pytest.fixture
def ledger(db_session):
    return get_ledger_adapter("sales", db_session)


@pytest.fixture
def make_invoice(db_session, customer):
    """Factory for sales invoices and notes of the test customer."""
    repo = SalesInvoiceRepository(db_session)
    numbers = itertools.count(1)

    def _make(
        total,
        issue_date=date(2026, 1, 1),
        voucher_class=VoucherClass.ORDINARY,
        status=InvoiceStatus.CONFIRMED,
        original_invoice_id=None,
        debtor_id=None,
    ):
        return repo.create(
            InvoiceCreate(
                number=f"FV-{next(numbers):04d}",
                debtor_id=debtor_id or customer.id,
                issue_date=issue_date,
                total=Decimal(total),
                voucher_class=voucher_class,
                status=status,
                original_invoice_id=original_invoice_id,
            )
        )

    return _make


@pytest.fixture
def make_receipt(db_session, customer):
    repo = ReceiptRepository(db_session)

    def _make(invoice, amount, status=PaymentDocumentStatus.CONFIRMED):
        return repo.create(
            PaymentDocumentCreate(
                number=f"RC-{invoice.number}",
                debtor_id=customer.id,
                issue_date=date(2026, 2, 1),
                status=status,
                items=[PaymentItemCreate(invoice_id=invoice.id, amount=Decimal(amount))],
            )
        )

    return _make


class TestComputeBalances:
    def test_untouched_invoice_owes_its_total(self, ledger, make_invoice):
        invoice = make_invoice("1000")

        balance = compute_balances(ledger, [invoice])[invoice.id]

        assert balance.pending_amount == Decimal("1000")
        assert balance.offset_amount == Decimal("0")

    def test_receipt_and_legacy_note(self, ledger, make_invoice, make_receipt):
        """Invoice 1000, confirmed receipt 400, legacy note 200 -> pending 400."""
        invoice = make_invoice("1000")
        make_receipt(invoice, "400")
        legacy = make_invoice(
            "200", voucher_class=VoucherClass.CREDIT_NOTE, original_invoice_id=invoice.id
        )

        balance = compute_balances(ledger, [invoice])[invoice.id]

        assert balance.direct_payments == Decimal("400")
        assert balance.explicit_applications == Decimal("0")
        assert balance.implicit_notes == Decimal("200")
        assert balance.implicit_note_ids == [legacy.id]
        assert balance.pending_amount == Decimal("400")

    def test_unconfirmed_receipts_do_not_count(self, ledger, make_invoice, make_receipt):
        invoice = make_invoice("1000")
        make_receipt(invoice, "300", status=PaymentDocumentStatus.DRAFT)
        cancelled = make_receipt(invoice, "100")
        ReceiptRepository(ledger.db).set_status(
            cancelled.id, DEFAULT_COMPANY_ID, PaymentDocumentStatus.CANCELLED
        )

        balance = compute_balances(ledger, [invoice])[invoice.id]

        assert balance.direct_payments == Decimal("0")
        assert balance.pending_amount == Decimal("1000")

    def test_multiple_receipts_are_summed(self, ledger, make_invoice, make_receipt):
        invoice = make_invoice("1000")
        make_receipt(invoice, "100")
        make_receipt(invoice, "250.50")

        balance = compute_balances(ledger, [invoice])[invoice.id]

        assert balance.direct_payments == Decimal("350.50")

    def test_draft_and_cancelled_notes_are_not_implicit(self, ledger, make_invoice):
        invoice = make_invoice("1000")
        make_invoice(
            "100",
            voucher_class=VoucherClass.CREDIT_NOTE,
            status=InvoiceStatus.DRAFT,
            original_invoice_id=invoice.id,
        )
        make_invoice(
            "200",
            voucher_class=VoucherClass.CREDIT_NOTE,
            status=InvoiceStatus.CANCELLED,
            original_invoice_id=invoice.id,
        )

        balance = compute_balances(ledger, [invoice])[invoice.id]

        assert balance.implicit_notes == Decimal("0")
        assert balance.pending_amount == Decimal("1000")

    def test_debit_notes_count_as_legacy_links(self, ledger, make_invoice):
        invoice = make_invoice("1000")
        make_invoice("150", voucher_class=VoucherClass.DEBIT_NOTE, original_invoice_id=invoice.id)

        balance = compute_balances(ledger, [invoice])[invoice.id]

        assert balance.implicit_notes == Decimal("150")

    def test_excluded_note_is_not_counted(self, ledger, make_invoice):
        invoice = make_invoice("1000")
        note = make_invoice(
            "300", voucher_class=VoucherClass.CREDIT_NOTE, original_invoice_id=invoice.id
        )

        balance = compute_balances(ledger, [invoice], exclude_note_id=note.id)[invoice.id]

        assert balance.implicit_notes == Decimal("0")
        assert balance.pending_amount == Decimal("1000")

    def test_compensated_note_counts_through_its_rows(self, db_session, ledger, make_invoice):
        """A note that went through compensation is never counted by its total."""
        older = make_invoice("100", issue_date=date(2026, 1, 1))
        original = make_invoice("1000", issue_date=date(2026, 1, 5))
        note = make_invoice(
            "1050",
            issue_date=date(2026, 2, 1),
            voucher_class=VoucherClass.CREDIT_NOTE,
            original_invoice_id=original.id,
        )
        CreditNoteCompensationService(db_session, "sales").compensate(note.id, DEFAULT_COMPANY_ID)
        db_session.commit()

        balances = compute_balances(ledger, [older, original])

        assert balances[original.id].explicit_applications == Decimal("1000")
        assert balances[original.id].implicit_notes == Decimal("0")
        assert balances[original.id].pending_amount == Decimal("0")
        # The note's remaining 50 went to the older invoice.
        assert balances[older.id].explicit_applications == Decimal("50")
        assert balances[older.id].pending_amount == Decimal("50")

    def test_repeatable_without_writes(self, ledger, make_invoice, make_receipt):
        invoice = make_invoice("1000")
        make_receipt(invoice, "123.45")
        make_invoice("10", voucher_class=VoucherClass.CREDIT_NOTE, original_invoice_id=invoice.id)

        first = compute_balances(ledger, [invoice])[invoice.id].pending_amount
        second = compute_balances(ledger, [invoice])[invoice.id].pending_amount

        assert first == second == Decimal("866.55")


class TestListOutstanding:
    def test_no_invoices_returns_empty_list(self, ledger, customer):
        assert list_outstanding(ledger, DEFAULT_COMPANY_ID, customer.id) == []

    def test_only_open_ordinary_invoices_of_the_debtor(self, db_session, ledger, make_invoice):
        confirmed = make_invoice("100", issue_date=date(2026, 1, 2))
        partial = make_invoice("100", issue_date=date(2026, 1, 1), status=InvoiceStatus.PARTIAL_PAID)
        make_invoice("100", status=InvoiceStatus.DRAFT)
        make_invoice("100", status=InvoiceStatus.PAID)
        make_invoice("100", status=InvoiceStatus.CANCELLED)
        make_invoice("100", voucher_class=VoucherClass.CREDIT_NOTE)
        make_invoice("100", voucher_class=VoucherClass.DEBIT_NOTE)
        other = CustomerRepository(db_session).create("Someone Else")
        make_invoice("100", debtor_id=other.id)

        outstanding = list_outstanding(ledger, DEFAULT_COMPANY_ID, confirmed.customer_id)

        assert [item.invoice_id for item in outstanding] == [partial.id, confirmed.id]

    def test_excludes_settled_invoices(self, ledger, make_invoice, make_receipt):
        paid_off = make_invoice("100", issue_date=date(2026, 1, 1))
        make_receipt(paid_off, "99.996")
        open_invoice = make_invoice("100", issue_date=date(2026, 1, 2))

        outstanding = list_outstanding(ledger, DEFAULT_COMPANY_ID, open_invoice.customer_id)

        assert [item.invoice_id for item in outstanding] == [open_invoice.id]

    def test_ordered_by_issue_date_then_number(self, ledger, make_invoice):
        late = make_invoice("10", issue_date=date(2026, 3, 1))
        early_a = make_invoice("10", issue_date=date(2026, 1, 1))
        early_b = make_invoice("10", issue_date=date(2026, 1, 1))

        outstanding = list_outstanding(ledger, DEFAULT_COMPANY_ID, late.customer_id)

        assert [item.invoice_id for item in outstanding] == [early_a.id, early_b.id, late.id]
        assert outstanding[0].number == early_a.number
        assert outstanding[0].issue_date == date(2026, 1, 1)

    def test_scoped_to_company(self, db_session, ledger, customer):
        other_company = CompanyRepository(db_session).create("Other Company")
        SalesInvoiceRepository(db_session).create(
            InvoiceCreate(
                number="X-1",
                debtor_id=customer.id,
                issue_date=date(2026, 1, 1),
                total=Decimal("100"),
                status=InvoiceStatus.CONFIRMED,
            ),
            other_company.id,
        )

        assert list_outstanding(ledger, DEFAULT_COMPANY_ID, customer.id) == []
        assert len(list_outstanding(ledger, other_company.id, customer.id)) == 1


class TestGetInvoiceBalance:
    def test_breakdown(self, db_session, make_invoice, make_receipt):
        invoice = make_invoice("1000")
        make_receipt(invoice, "400")
        make_invoice("200", voucher_class=VoucherClass.CREDIT_NOTE, original_invoice_id=invoice.id)
        service = CreditNoteCompensationService(db_session, "sales")

        balance = service.get_invoice_balance(invoice.id, DEFAULT_COMPANY_ID)

        assert balance.total == Decimal("1000")
        assert balance.pending_amount == Decimal("400")

    def test_unknown_invoice(self, db_session):
        service = CreditNoteCompensationService(db_session, "sales")

        with pytest.raises(InvoiceNotFound):
            service.get_invoice_balance(uuid4(), DEFAULT_COMPANY_ID)
