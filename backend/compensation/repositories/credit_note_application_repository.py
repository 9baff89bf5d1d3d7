"""Credit note application repositories (append-only ledger)."""

from collections import defaultdict
from decimal import Decimal
from typing import Any, ClassVar
from uuid import UUID

from sqlalchemy import func
from sqlalchemy.orm import Session

from compensation.models.credit_note_application import (
    PurchaseCreditNoteApplication,
    SalesCreditNoteApplication,
)


class CreditNoteApplicationRepository:
    model: ClassVar[Any]

    def __init__(self, db: Session):
        self.db = db

    def create(
        self,
        *,
        company_id: UUID,
        credit_note_id: UUID,
        invoice_id: UUID,
        amount: Decimal,
        sequence: int,
        reverses_id: UUID | None = None,
    ) -> Any:
        """Append an application row inside the caller's transaction."""
        application = self.model(
            company_id=company_id,
            credit_note_id=credit_note_id,
            invoice_id=invoice_id,
            amount=amount,
            sequence=sequence,
            reverses_id=reverses_id,
        )
        self.db.add(application)
        self.db.flush()
        return application

    def get_by_credit_note_id(self, credit_note_id: UUID) -> list[Any]:
        return (
            self.db.query(self.model)
            .filter(self.model.credit_note_id == credit_note_id)
            .order_by(self.model.sequence.asc())
            .all()
        )

    def get_by_invoice_ids(self, invoice_ids: list[UUID]) -> dict[UUID, list[Any]]:
        """Group every application row received by the given invoices."""
        grouped: dict[UUID, list[Any]] = defaultdict(list)
        if not invoice_ids:
            return grouped
        rows = self.db.query(self.model).filter(self.model.invoice_id.in_(invoice_ids)).all()
        for row in rows:
            grouped[row.invoice_id].append(row)
        return grouped

    def get_note_ids_with_applications(self, note_ids: list[UUID]) -> set[UUID]:
        """Return the subset of *note_ids* that own at least one application row."""
        if not note_ids:
            return set()
        rows = (
            self.db.query(self.model.credit_note_id)
            .filter(self.model.credit_note_id.in_(note_ids))
            .distinct()
            .all()
        )
        return {row[0] for row in rows}

    def next_sequence(self, credit_note_id: UUID) -> int:
        result = (
            self.db.query(func.max(self.model.sequence))
            .filter(self.model.credit_note_id == credit_note_id)
            .scalar()
        )
        return (result or 0) + 1


class SalesCreditNoteApplicationRepository(CreditNoteApplicationRepository):
    model = SalesCreditNoteApplication


class PurchaseCreditNoteApplicationRepository(CreditNoteApplicationRepository):
    model = PurchaseCreditNoteApplication
