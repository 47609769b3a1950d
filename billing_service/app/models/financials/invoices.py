import uuid
from sqlalchemy import (
    Column, Date, DateTime, ForeignKey, Numeric, String, Text, Uuid, func
)
from sqlalchemy.orm import relationship
from shared.core.database import Base


class Invoice(Base):
    """Owner-facing bill for management services."""
    __tablename__ = "invoices"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    owner_id = Column(Uuid(as_uuid=True), ForeignKey(
        "users.id"), nullable=False, index=True)
    invoice_number = Column(String(64), nullable=False, unique=True)
    total_amount = Column(Numeric(14, 2), nullable=False, default=0)
    status = Column(String(16), nullable=False, default="PENDING")  # PENDING|PAID|OVERDUE
    due_date = Column(Date, nullable=True)
    paid_date = Column(Date, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    owner = relationship("User")
    line_items = relationship(
        "InvoiceLineItem", back_populates="invoice", cascade="all, delete-orphan")


# -------------------
# Invoice Line Items
# -------------------


class InvoiceLineItem(Base):
    __tablename__ = "invoice_line_items"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    invoice_id = Column(Uuid(as_uuid=True), ForeignKey(
        "invoices.id", ondelete="CASCADE"), nullable=False)
    type = Column(String(32), nullable=False)  # management_fee|flat_fee|...
    description = Column(Text)
    amount = Column(Numeric(14, 2), nullable=False)

    invoice = relationship("Invoice", back_populates="line_items")
