"""Customer and supplier repositories."""

from typing import Any, ClassVar
from uuid import UUID

from sqlalchemy.orm import Session

from compensation.models.party import Customer, Supplier
from compensation.models.shared import DEFAULT_COMPANY_ID


class DebtorRepository:
    model: ClassVar[Any]

    def __init__(self, db: Session):
        self.db = db

    def get_by_id(self, debtor_id: UUID, company_id: UUID) -> Any | None:
        return (
            self.db.query(self.model)
            .filter(self.model.id == debtor_id, self.model.company_id == company_id)
            .first()
        )

    def create(
        self, name: str, company_id: UUID = DEFAULT_COMPANY_ID, tax_id: str | None = None
    ) -> Any:
        debtor = self.model(company_id=company_id, name=name, tax_id=tax_id)
        self.db.add(debtor)
        self.db.commit()
        self.db.refresh(debtor)
        return debtor


class CustomerRepository(DebtorRepository):
    model = Customer


class SupplierRepository(DebtorRepository):
    model = Supplier
