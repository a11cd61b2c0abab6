"""Customer and coupon models."""
import uuid
from datetime import datetime
from enum import Enum
from sqlalchemy import Column, String, DateTime, ForeignKey, Text, JSON, Uuid
from sqlalchemy import UniqueConstraint, Index
from sqlalchemy.orm import relationship

from coupongen.database import Base


class CouponStatus(str, Enum):
    """Coupon lifecycle status."""
    ACTIVE = "active"
    REDEEMED = "redeemed"


class Customer(Base):
    """End user who requested a coupon through the public form."""

    __tablename__ = "customers"
    __table_args__ = (
        UniqueConstraint("tenant_id", "email", name="uq_customers_tenant_email"),
    )

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    tenant_id = Column(Uuid, ForeignKey("tenants.id"), nullable=False)

    email = Column(String(255), nullable=False)
    first_name = Column(String(255), nullable=True)
    last_name = Column(String(255), nullable=True)
    phone = Column(String(50), nullable=True)
    address = Column(Text, nullable=True)
    allergies = Column(Text, nullable=True)
    custom_data = Column(JSON, nullable=False, default=dict)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    # Relationships
    coupons = relationship("Coupon", back_populates="customer")


class Coupon(Base):
    """Issued coupon; discount fields are a snapshot of the campaign."""

    __tablename__ = "coupons"
    __table_args__ = (
        Index("ix_coupons_tenant_status", "tenant_id", "status"),
    )

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    tenant_id = Column(Uuid, ForeignKey("tenants.id"), nullable=False)
    campaign_id = Column(Uuid, ForeignKey("campaigns.id"), nullable=False)
    customer_id = Column(Uuid, ForeignKey("customers.id"), nullable=False)

    code = Column(String(50), nullable=False, unique=True)
    status = Column(String(20), nullable=False, default=CouponStatus.ACTIVE.value)

    # Snapshot at issuance
    discount_type = Column(String(20), nullable=False)
    discount_value = Column(String(100), nullable=False)

    issued_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    redeemed_at = Column(DateTime, nullable=True)

    # Relationships
    campaign = relationship("Campaign", back_populates="coupons")
    customer = relationship("Customer", back_populates="coupons")
