import uuid
from datetime import datetime
from sqlalchemy import (
    Column, Date, DateTime, ForeignKey, Numeric, String, UniqueConstraint, Uuid
)
from sqlalchemy.orm import relationship
from shared.core.database import Base


class RentCharge(Base):
    __tablename__ = "rent_charges"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    lease_id = Column(Uuid(as_uuid=True), ForeignKey(
        "leases.id", ondelete="CASCADE"), nullable=False, index=True)
    # RENT|LATE_FEE|UTILITY|PARKING|PET|STORAGE|OTHER
    charge_type = Column(String(32), nullable=False, default="RENT")
    amount = Column(Numeric(14, 2), nullable=False)
    paid_amount = Column(Numeric(14, 2), nullable=False, default=0)
    due_date = Column(Date, nullable=False, index=True)
    # first day of the billing month the charge belongs to
    period_start = Column(Date, nullable=True)
    status = Column(String(16), nullable=False, default="UNPAID")  # UNPAID|PARTIAL|PAID
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)
    updated_at = Column(DateTime, nullable=False, default=datetime.utcnow,
                        onupdate=datetime.utcnow)

    __table_args__ = (
        UniqueConstraint("lease_id", "charge_type", "period_start",
                         name="uq_rent_charge_lease_type_period"),
    )

    lease = relationship("Lease", back_populates="rent_charges")

    @property
    def amount_due(self):
        return (self.amount or 0) - (self.paid_amount or 0)
