"""Single-use form link gating one anonymous coupon request."""
import uuid
from datetime import datetime
from sqlalchemy import Column, String, DateTime, ForeignKey, Uuid, Index
from sqlalchemy.orm import relationship

from coupongen.database import Base


class FormLink(Base):
    """A bearer token that allows exactly one form submission.

    ``used_at`` is only ever written by a conditional update
    (``... WHERE used_at IS NULL``); see services.submissions.
    """

    __tablename__ = "form_links"
    __table_args__ = (
        Index("ix_form_links_tenant_campaign", "tenant_id", "campaign_id"),
    )

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    tenant_id = Column(Uuid, ForeignKey("tenants.id"), nullable=False)
    campaign_id = Column(Uuid, ForeignKey("campaigns.id"), nullable=False)

    token = Column(String(64), nullable=False, unique=True)
    used_at = Column(DateTime, nullable=True)
    coupon_id = Column(Uuid, ForeignKey("coupons.id"), nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    # Relationships
    campaign = relationship("Campaign", back_populates="form_links")
    coupon = relationship("Coupon")

    @property
    def is_used(self) -> bool:
        return self.used_at is not None
