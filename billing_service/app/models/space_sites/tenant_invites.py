import uuid
from sqlalchemy import Column, DateTime, ForeignKey, String, Uuid, func
from sqlalchemy.orm import relationship
from shared.core.database import Base


class TenantInvite(Base):
    __tablename__ = "tenant_invites"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    unit_id = Column(Uuid(as_uuid=True), ForeignKey(
        "units.id", ondelete="CASCADE"), nullable=False)
    email = Column(String(200), nullable=False)
    token = Column(String(128), nullable=True, unique=True)
    status = Column(String(16), nullable=False, default="PENDING")
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    unit = relationship("Unit", back_populates="tenant_invites")
