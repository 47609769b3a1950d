import uuid
from sqlalchemy import Column, Date, ForeignKey, Numeric, String, Uuid
from sqlalchemy.orm import relationship
from shared.core.database import Base


class Payment(Base):
    """Legacy rent collection record, read when a lease has no rent charges."""
    __tablename__ = "payments"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    lease_id = Column(Uuid(as_uuid=True), ForeignKey(
        "leases.id", ondelete="CASCADE"), nullable=False, index=True)
    amount = Column(Numeric(14, 2), nullable=False)
    due_date = Column(Date, nullable=False)
    paid_date = Column(Date, nullable=True)
    status = Column(String(16), nullable=False, default="PENDING")  # PAID|PENDING|COMPLETED|OVERDUE

    lease = relationship("Lease", back_populates="payments")
