from sqlalchemy import Column, DateTime, String, func

from compensation.core.database import Base
from compensation.models.shared import UUIDType, generate_uuid


class Company(Base):
    __tablename__ = "companies"

    id = Column(UUIDType, primary_key=True, default=generate_uuid)
    name = Column(String(255), nullable=False)
    default_currency = Column(String(3), nullable=False, default="USD")

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())
