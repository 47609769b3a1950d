import uuid
from sqlalchemy import Column, DateTime, String, Uuid, func
from sqlalchemy.orm import relationship
from shared.core.database import Base


class User(Base):
    __tablename__ = "users"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    name = Column(String(200), nullable=False)
    email = Column(String(200), unique=True, index=True, nullable=False)
    phone = Column(String(20), nullable=True)
    role = Column(String(16), nullable=False, default="TENANT")  # ADMIN|OWNER|TENANT
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    properties = relationship("Property", back_populates="owner")
    leases = relationship("Lease", back_populates="tenant")
