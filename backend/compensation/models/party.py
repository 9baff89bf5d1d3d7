"""Debtor models: customers on the sales side, suppliers on the purchase side."""

from sqlalchemy import Column, DateTime, ForeignKey, String, func

from compensation.core.database import Base
from compensation.models.shared import DEFAULT_COMPANY_ID, UUIDType, generate_uuid


class Customer(Base):
    __tablename__ = "customers"

    id = Column(UUIDType, primary_key=True, default=generate_uuid)
    company_id = Column(
        UUIDType,
        ForeignKey("companies.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
        default=DEFAULT_COMPANY_ID,
    )
    name = Column(String(255), nullable=False)
    tax_id = Column(String(50), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())


class Supplier(Base):
    __tablename__ = "suppliers"

    id = Column(UUIDType, primary_key=True, default=generate_uuid)
    company_id = Column(
        UUIDType,
        ForeignKey("companies.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
        default=DEFAULT_COMPANY_ID,
    )
    name = Column(String(255), nullable=False)
    tax_id = Column(String(50), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
