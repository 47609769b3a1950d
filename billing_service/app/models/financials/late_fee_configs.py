import uuid
from sqlalchemy import Boolean, Column, ForeignKey, Integer, Numeric, String, Uuid
from sqlalchemy.orm import relationship
from shared.core.database import Base


class LateFeeConfig(Base):
    __tablename__ = "late_fee_configs"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    property_id = Column(Uuid(as_uuid=True), ForeignKey(
        "properties.id", ondelete="CASCADE"), nullable=False, unique=True)
    grace_period_days = Column(Integer, nullable=False, default=5)
    fee_type = Column(String(16), nullable=False, default="FLAT")  # FLAT|PERCENTAGE
    fee_amount = Column(Numeric(14, 2), nullable=False, default=50)
    max_fee_amount = Column(Numeric(14, 2), nullable=True)
    is_active = Column(Boolean, nullable=False, default=True)

    property = relationship("Property", back_populates="late_fee_config")
