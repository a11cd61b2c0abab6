"""Tenant model for multi-tenancy."""
import uuid
from datetime import datetime
from sqlalchemy import Column, String, DateTime, Uuid
from sqlalchemy.orm import relationship

from coupongen.database import Base


class Tenant(Base):
    """Tenant for multi-tenant isolation, addressed publicly by its slug."""

    __tablename__ = "tenants"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    slug = Column(String(100), nullable=False, unique=True)
    name = Column(String(255), nullable=True)
    email_from_name = Column(String(255), nullable=False, default="CouponGen")
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    users = relationship("User", back_populates="tenant")
    campaigns = relationship("Campaign", back_populates="tenant")
