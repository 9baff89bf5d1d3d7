"""Tests for the ledger HTTP endpoints."""

import itertools
from datetime import date
from decimal import Decimal
from unittest.mock import MagicMock, patch
from uuid import uuid4

import pytest
from fastapi.testclient import TestClient

from compensation.core.config import settings
from compensation.core.database import get_db
from compensation.main import app
from compensation.models.invoice import InvoiceStatus, VoucherClass
from compensation.repositories.company_repository import CompanyRepository
from compensation.repositories.invoice_repository import (
    PurchaseInvoiceRepository,
    SalesInvoiceRepository,
)
from compensation.repositories.party_repository import CustomerRepository, SupplierRepository
from compensation.schemas.invoice import InvoiceCreate
from compensation.services.compensation import PersistenceFailure, TransactionConflict


@pytest.fixture
def client():
    """Create test client."""
    return TestClient(app)


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
    return CustomerRepository(db_session).create("API Test Customer")


@pytest.fixture
def make_invoice(db_session, customer):
    repo = SalesInvoiceRepository(db_session)
    numbers = itertools.count(1)

    def _make(
        total,
        status=InvoiceStatus.CONFIRMED,
        voucher_class=VoucherClass.ORDINARY,
        issue_date=date(2026, 1, 1),
        original_invoice_id=None,
    ):
        return repo.create(
            InvoiceCreate(
                number=f"FV-{next(numbers):04d}",
                debtor_id=customer.id,
                issue_date=issue_date,
                total=Decimal(total),
                voucher_class=voucher_class,
                status=status,
                original_invoice_id=original_invoice_id,
            )
        )

    return _make


def test_root(client):
    response = client.get("/")
    assert response.status_code == 200
    data = response.json()
    assert data["app"] == settings.APP_NAME
    assert data["version"] == settings.version


class TestConfirmEndpoint:
    def test_confirm_invoice(self, client, make_invoice):
        invoice = make_invoice("100", status=InvoiceStatus.DRAFT)

        response = client.post(f"/v1/sales/invoices/{invoice.id}/confirm")

        assert response.status_code == 200
        data = response.json()
        assert data["invoice"]["id"] == str(invoice.id)
        assert data["invoice"]["status"] == "confirmed"
        assert data["invoice"]["debtor_id"] == str(invoice.customer_id)
        assert data["compensation"] is None

    def test_confirm_note_returns_compensation(self, client, db_session, make_invoice):
        invoice = make_invoice("600", issue_date=date(2026, 1, 1))
        other = make_invoice("600", issue_date=date(2026, 1, 2))
        note = make_invoice(
            "1000",
            status=InvoiceStatus.DRAFT,
            voucher_class=VoucherClass.CREDIT_NOTE,
            issue_date=date(2026, 2, 1),
        )

        response = client.post(f"/v1/sales/invoices/{note.id}/confirm")

        assert response.status_code == 200
        data = response.json()
        assert data["invoice"]["status"] == "paid"
        compensation = data["compensation"]
        assert compensation["credit_note_id"] == str(note.id)
        assert compensation["credit_note_status"] == "paid"
        assert [
            (a["invoice_id"], Decimal(a["amount"])) for a in compensation["applications"]
        ] == [(str(invoice.id), Decimal("600")), (str(other.id), Decimal("400"))]
        assert Decimal(compensation["applied_total"]) == Decimal("1000")
        assert Decimal(compensation["unapplied"]) == Decimal("0")

        db_session.expire_all()
        assert invoice.status == InvoiceStatus.PAID.value
        assert other.status == InvoiceStatus.PARTIAL_PAID.value

    def test_confirm_non_draft(self, client, make_invoice):
        invoice = make_invoice("100")

        response = client.post(f"/v1/sales/invoices/{invoice.id}/confirm")

        assert response.status_code == 400
        assert "Only draft" in response.json()["detail"]

    def test_confirm_unknown(self, client):
        response = client.post(f"/v1/sales/invoices/{uuid4()}/confirm")
        assert response.status_code == 404

    def test_failed_compensation_leaves_note_draft(self, client, db_session, make_invoice):
        make_invoice("100")
        note = make_invoice("0", status=InvoiceStatus.DRAFT, voucher_class=VoucherClass.CREDIT_NOTE)

        response = client.post(f"/v1/sales/invoices/{note.id}/confirm")

        assert response.status_code == 400
        db_session.expire_all()
        assert note.status == InvoiceStatus.DRAFT.value


class TestCancelEndpoint:
    def test_cancel(self, client, make_invoice):
        invoice = make_invoice("100")

        response = client.post(f"/v1/sales/invoices/{invoice.id}/cancel")

        assert response.status_code == 200
        assert response.json()["status"] == "cancelled"

    def test_cancel_paid_invoice(self, client, make_invoice):
        invoice = make_invoice("100", status=InvoiceStatus.PAID)

        response = client.post(f"/v1/sales/invoices/{invoice.id}/cancel")

        assert response.status_code == 400


class TestCompensateEndpoint:
    def test_compensate(self, client, make_invoice):
        invoice = make_invoice("1000")
        note = make_invoice("300", voucher_class=VoucherClass.CREDIT_NOTE, original_invoice_id=invoice.id)

        response = client.post(f"/v1/sales/credit_notes/{note.id}/compensate")

        assert response.status_code == 200
        data = response.json()
        assert [a["invoice_id"] for a in data["applications"]] == [str(invoice.id)]
        assert data["credit_note_status"] == "paid"

    def test_compensate_unknown_note(self, client):
        response = client.post(f"/v1/sales/credit_notes/{uuid4()}/compensate")
        assert response.status_code == 404

    def test_compensate_draft_note(self, client, make_invoice):
        note = make_invoice("300", status=InvoiceStatus.DRAFT, voucher_class=VoucherClass.CREDIT_NOTE)

        response = client.post(f"/v1/sales/credit_notes/{note.id}/compensate")

        assert response.status_code == 400

    def test_conflict_maps_to_409(self, client):
        service = MagicMock()
        service.compensate.side_effect = TransactionConflict("Serialization conflict")

        with patch("compensation.routers.ledgers.CreditNoteCompensationService", return_value=service):
            response = client.post(f"/v1/sales/credit_notes/{uuid4()}/compensate")

        assert response.status_code == 409

    def test_persistence_failure_maps_to_500(self, client):
        service = MagicMock()
        service.compensate.side_effect = PersistenceFailure("Database error")

        with patch("compensation.routers.ledgers.CreditNoteCompensationService", return_value=service):
            response = client.post(f"/v1/sales/credit_notes/{uuid4()}/compensate")

        assert response.status_code == 500
        assert response.json()["detail"] == "Database error"

    def test_unknown_side(self, client):
        response = client.post(f"/v1/payroll/credit_notes/{uuid4()}/compensate")
        assert response.status_code == 422

    def test_purchase_side(self, client, db_session):
        supplier = SupplierRepository(db_session).create("API Supplier")
        repo = PurchaseInvoiceRepository(db_session)
        invoice = repo.create(
            InvoiceCreate(
                number="PI-1",
                debtor_id=supplier.id,
                issue_date=date(2026, 1, 1),
                total=Decimal("100"),
                status=InvoiceStatus.CONFIRMED,
            )
        )
        note = repo.create(
            InvoiceCreate(
                number="PDN-1",
                debtor_id=supplier.id,
                issue_date=date(2026, 1, 2),
                total=Decimal("100"),
                voucher_class=VoucherClass.DEBIT_NOTE,
                status=InvoiceStatus.CONFIRMED,
            )
        )

        response = client.post(f"/v1/purchases/credit_notes/{note.id}/compensate")

        assert response.status_code == 200
        assert response.json()["applications"][0]["invoice_id"] == str(invoice.id)


class TestReverseEndpoint:
    def test_reverse(self, client, make_invoice):
        make_invoice("100")
        note = make_invoice("100", voucher_class=VoucherClass.CREDIT_NOTE)
        client.post(f"/v1/sales/credit_notes/{note.id}/compensate")

        response = client.post(f"/v1/sales/credit_notes/{note.id}/reverse")

        assert response.status_code == 200
        data = response.json()
        assert data["credit_note_status"] == "confirmed"
        assert Decimal(data["applications"][0]["amount"]) == Decimal("-100")

    def test_reverse_without_applications(self, client, make_invoice):
        note = make_invoice("100", voucher_class=VoucherClass.CREDIT_NOTE)

        response = client.post(f"/v1/sales/credit_notes/{note.id}/reverse")

        assert response.status_code == 400


class TestReadEndpoints:
    def test_balance(self, client, make_invoice):
        invoice = make_invoice("1000")
        legacy = make_invoice("200", voucher_class=VoucherClass.CREDIT_NOTE, original_invoice_id=invoice.id)

        response = client.get(f"/v1/sales/invoices/{invoice.id}/balance")

        assert response.status_code == 200
        data = response.json()
        assert Decimal(data["total"]) == Decimal("1000")
        assert Decimal(data["implicit_notes"]) == Decimal("200")
        assert Decimal(data["pending_amount"]) == Decimal("800")
        assert data["implicit_note_ids"] == [str(legacy.id)]

    def test_balance_unknown_invoice(self, client):
        response = client.get(f"/v1/sales/invoices/{uuid4()}/balance")
        assert response.status_code == 404

    def test_outstanding(self, client, customer, make_invoice):
        newer = make_invoice("50", issue_date=date(2026, 2, 1))
        older = make_invoice("75.5", issue_date=date(2026, 1, 1))
        make_invoice("10", status=InvoiceStatus.PAID)

        response = client.get(f"/v1/sales/debtors/{customer.id}/outstanding")

        assert response.status_code == 200
        data = response.json()
        assert [item["invoice_id"] for item in data] == [str(older.id), str(newer.id)]
        assert Decimal(data[0]["pending_amount"]) == Decimal("75.5")
        assert data[0]["issue_date"] == "2026-01-01"

    def test_applications(self, client, make_invoice):
        invoice = make_invoice("100")
        note = make_invoice("40", voucher_class=VoucherClass.CREDIT_NOTE)
        client.post(f"/v1/sales/credit_notes/{note.id}/compensate")

        response = client.get(f"/v1/sales/credit_notes/{note.id}/applications")

        assert response.status_code == 200
        data = response.json()
        assert len(data) == 1
        assert data[0]["invoice_id"] == str(invoice.id)
        assert data[0]["sequence"] == 1
        assert data[0]["reverses_id"] is None
        assert Decimal(data[0]["amount"]) == Decimal("40")


class TestTenancy:
    def test_other_company_does_not_see_note(self, client, db_session, make_invoice):
        other = CompanyRepository(db_session).create("Other Company")
        note = make_invoice("100", voucher_class=VoucherClass.CREDIT_NOTE)

        response = client.post(
            f"/v1/sales/credit_notes/{note.id}/compensate",
            headers={"X-Company-Id": str(other.id)},
        )

        assert response.status_code == 404

    def test_invalid_company_header(self, client, make_invoice):
        note = make_invoice("100", voucher_class=VoucherClass.CREDIT_NOTE)

        response = client.post(
            f"/v1/sales/credit_notes/{note.id}/compensate",
            headers={"X-Company-Id": "not-a-uuid"},
        )

        assert response.status_code == 400
