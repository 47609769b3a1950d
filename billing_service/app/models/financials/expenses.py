import uuid
from sqlalchemy import (
    Column, Date, DateTime, ForeignKey, Numeric, String, Text, Uuid, func
)
from sqlalchemy.orm import relationship
from shared.core.database import Base


class Expense(Base):
    __tablename__ = "expenses"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    owner_id = Column(Uuid(as_uuid=True), ForeignKey(
        "users.id"), nullable=True, index=True)
    # null property = company overhead
    property_id = Column(Uuid(as_uuid=True), ForeignKey(
        "properties.id", ondelete="CASCADE"), nullable=True, index=True)
    category = Column(String(64), nullable=False)
    amount = Column(Numeric(14, 2), nullable=False)
    date = Column(Date, nullable=False, index=True)
    description = Column(Text, nullable=True)
    vendor_name = Column(String(200), nullable=True)
    notes = Column(Text, nullable=True)
    receipt_url = Column(String(500), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    property = relationship("Property", back_populates="expenses")
