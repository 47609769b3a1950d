import uuid
from sqlalchemy import Column, Date, DateTime, ForeignKey, Numeric, String, Uuid, func
from sqlalchemy.orm import relationship
from shared.core.database import Base


class Lease(Base):
    __tablename__ = "leases"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    unit_id = Column(Uuid(as_uuid=True), ForeignKey(
        "units.id", ondelete="CASCADE"), nullable=False, index=True)
    tenant_id = Column(Uuid(as_uuid=True), ForeignKey(
        "users.id"), nullable=True)

    start_date = Column(Date, nullable=False)
    end_date = Column(Date, nullable=True)  # open ended when null

    rent_amount = Column(Numeric(14, 2), nullable=False)
    deposit = Column(Numeric(14, 2), nullable=True)
    status = Column(String(16), nullable=False, default="ACTIVE")
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    # relationships
    unit = relationship("Unit", back_populates="leases")
    tenant = relationship("User", back_populates="leases")
    rent_charges = relationship(
        "RentCharge", back_populates="lease", cascade="all, delete-orphan")
    recurring_charges = relationship(
        "RecurringCharge", back_populates="lease", cascade="all, delete-orphan")
    payments = relationship(
        "Payment", back_populates="lease", cascade="all, delete-orphan")
    payment_aging = relationship(
        "PaymentAging", back_populates="lease", uselist=False,
        cascade="all, delete-orphan")
