from uuid import UUID

from sqlalchemy.orm import Session

from compensation.models.company import Company


class CompanyRepository:
    def __init__(self, db: Session):
        self.db = db

    def create(self, name: str, company_id: UUID | None = None) -> Company:
        company = Company(id=company_id, name=name) if company_id else Company(name=name)
        self.db.add(company)
        self.db.commit()
        self.db.refresh(company)
        return company
