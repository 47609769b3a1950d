import uuid
from sqlalchemy import Boolean, Column, ForeignKey, Integer, Numeric, String, Uuid
from sqlalchemy.orm import relationship
from shared.core.database import Base


class RecurringCharge(Base):
    __tablename__ = "recurring_charges"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    lease_id = Column(Uuid(as_uuid=True), ForeignKey(
        "leases.id", ondelete="CASCADE"), nullable=False, index=True)
    charge_type = Column(String(32), nullable=False)
    amount = Column(Numeric(14, 2), nullable=False)
    day_of_month = Column(Integer, nullable=False, default=1)
    description = Column(String(255), nullable=True)
    is_active = Column(Boolean, nullable=False, default=True)

    lease = relationship("Lease", back_populates="recurring_charges")
