import uuid
from sqlalchemy import Column, ForeignKey, Integer, Numeric, String, Uuid
from sqlalchemy.orm import relationship
from shared.core.database import Base


class Unit(Base):
    __tablename__ = "units"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    property_id = Column(Uuid(as_uuid=True), ForeignKey(
        "properties.id", ondelete="CASCADE"), nullable=False, index=True)
    unit_number = Column(String(32), nullable=False)
    status = Column(String(16), nullable=False, default="VACANT")
    bedrooms = Column(Integer, nullable=False, default=0)
    bathrooms = Column(Numeric(3, 1), nullable=False, default=0)
    sqft = Column(Integer, nullable=True)
    # market rent
    rent_amount = Column(Numeric(14, 2), nullable=False, default=0)

    property = relationship("Property", back_populates="units")
    leases = relationship("Lease", back_populates="unit",
                          cascade="all, delete-orphan")
    tenant_invites = relationship(
        "TenantInvite", back_populates="unit", cascade="all, delete-orphan")
