"""Campaign model: a discount offer scoped to one tenant."""
import uuid
from datetime import datetime
from enum import Enum
from sqlalchemy import Column, String, DateTime, ForeignKey, Boolean, Text, JSON, Uuid
from sqlalchemy import UniqueConstraint, Index
from sqlalchemy.orm import relationship

from coupongen.database import Base


class DiscountType(str, Enum):
    """How discount_value is interpreted."""
    PERCENT = "percent"
    FIXED = "fixed"
    TEXT = "text"  # free-form offer, e.g. "free dessert"


def default_form_config() -> dict:
    return {
        "email": {"visible": True, "required": True},
        "firstName": {"visible": True, "required": True},
        "lastName": {"visible": True, "required": True},
        "phone": {"visible": False, "required": False},
        "address": {"visible": False, "required": False},
        "allergies": {"visible": False, "required": False},
        "customFields": [],
    }


class Campaign(Base):
    """Discount campaign definition."""

    __tablename__ = "campaigns"
    __table_args__ = (
        UniqueConstraint("tenant_id", "campaign_code", name="uq_campaigns_tenant_code"),
        UniqueConstraint("tenant_id", "name", name="uq_campaigns_tenant_name"),
        Index("ix_campaigns_tenant", "tenant_id"),
    )

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    tenant_id = Column(Uuid, ForeignKey("tenants.id"), nullable=False)

    campaign_code = Column(String(50), nullable=False)
    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)

    discount_type = Column(String(20), nullable=False, default=DiscountType.PERCENT.value)
    discount_value = Column(String(100), nullable=False)

    is_active = Column(Boolean, nullable=False, default=False)
    expiry_date = Column(DateTime, nullable=True)
    form_config = Column(JSON, nullable=False, default=default_form_config)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    # Relationships
    tenant = relationship("Tenant", back_populates="campaigns")
    form_links = relationship("FormLink", back_populates="campaign")
    coupons = relationship("Coupon", back_populates="campaign")

    def is_expired(self, now: datetime | None = None) -> bool:
        return self.expiry_date is not None and self.expiry_date < (now or datetime.utcnow())
