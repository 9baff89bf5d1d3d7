"""Receipt and payment order repositories."""

from typing import Any, ClassVar
from uuid import UUID

from sqlalchemy.orm import Session

from compensation.models.shared import DEFAULT_COMPANY_ID
from compensation.models.treasury import (
    PaymentDocumentStatus,
    PaymentOrder,
    PaymentOrderItem,
    Receipt,
    ReceiptItem,
)
from compensation.schemas.treasury import PaymentDocumentCreate


class PaymentDocumentRepository:
    document_model: ClassVar[Any]
    item_model: ClassVar[Any]
    debtor_field: ClassVar[str]
    document_field: ClassVar[str]

    def __init__(self, db: Session):
        self.db = db

    def get_by_id(self, document_id: UUID, company_id: UUID) -> Any | None:
        return (
            self.db.query(self.document_model)
            .filter(
                self.document_model.id == document_id,
                self.document_model.company_id == company_id,
            )
            .first()
        )

    def create(self, data: PaymentDocumentCreate, company_id: UUID = DEFAULT_COMPANY_ID) -> Any:
        document = self.document_model(
            company_id=company_id,
            number=data.number,
            issue_date=data.issue_date,
            status=data.status.value,
            **{self.debtor_field: data.debtor_id},
        )
        self.db.add(document)
        self.db.flush()
        for item in data.items:
            self.db.add(
                self.item_model(
                    invoice_id=item.invoice_id,
                    amount=item.amount,
                    **{self.document_field: document.id},
                )
            )
        self.db.commit()
        self.db.refresh(document)
        return document

    def set_status(
        self, document_id: UUID, company_id: UUID, status: PaymentDocumentStatus
    ) -> Any | None:
        document = self.get_by_id(document_id, company_id)
        if not document:
            return None
        document.status = status.value
        self.db.commit()
        self.db.refresh(document)
        return document


class ReceiptRepository(PaymentDocumentRepository):
    document_model = Receipt
    item_model = ReceiptItem
    debtor_field = "customer_id"
    document_field = "receipt_id"


class PaymentOrderRepository(PaymentDocumentRepository):
    document_model = PaymentOrder
    item_model = PaymentOrderItem
    debtor_field = "supplier_id"
    document_field = "payment_order_id"
