import uuid
from datetime import datetime
from sqlalchemy import Column, DateTime, ForeignKey, Numeric, Uuid
from sqlalchemy.orm import relationship
from shared.core.database import Base


class PaymentAging(Base):
    __tablename__ = "payment_aging"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    lease_id = Column(Uuid(as_uuid=True), ForeignKey(
        "leases.id", ondelete="CASCADE"), nullable=False, unique=True)
    current = Column(Numeric(14, 2), nullable=False, default=0)
    days_30 = Column(Numeric(14, 2), nullable=False, default=0)
    days_60 = Column(Numeric(14, 2), nullable=False, default=0)
    days_90_plus = Column(Numeric(14, 2), nullable=False, default=0)
    total_due = Column(Numeric(14, 2), nullable=False, default=0)
    updated_at = Column(DateTime, nullable=False, default=datetime.utcnow,
                        onupdate=datetime.utcnow)

    lease = relationship("Lease", back_populates="payment_aging")
