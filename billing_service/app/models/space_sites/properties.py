import uuid
from sqlalchemy import Column, DateTime, ForeignKey, String, Uuid, func
from sqlalchemy.orm import relationship
from shared.core.database import Base


class Property(Base):
    __tablename__ = "properties"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    owner_id = Column(Uuid(as_uuid=True), ForeignKey(
        "users.id"), nullable=False, index=True)
    name = Column(String(200), nullable=False)
    address = Column(String(255), nullable=False)
    city = Column(String(100), nullable=False)
    state = Column(String(50), nullable=False)
    zip_code = Column(String(20), nullable=True)
    status = Column(String(16), nullable=False, default="ACTIVE")
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    owner = relationship("User", back_populates="properties")
    units = relationship("Unit", back_populates="property",
                         cascade="all, delete-orphan",
                         order_by="Unit.unit_number")
    expenses = relationship("Expense", back_populates="property")
    late_fee_config = relationship(
        "LateFeeConfig", back_populates="property", uselist=False)

    @property
    def short_address(self):
        return f"{self.address}, {self.city}, {self.state}"

    @property
    def full_address(self):
        return f"{self.short_address} {self.zip_code or ''}".rstrip()
