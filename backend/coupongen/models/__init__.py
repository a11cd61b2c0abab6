"""Database models."""
from coupongen.models.tenant import Tenant
from coupongen.models.user import User, UserRole
from coupongen.models.campaign import Campaign, DiscountType, default_form_config
from coupongen.models.form_link import FormLink
from coupongen.models.coupon import Coupon, CouponStatus, Customer

__all__ = [
    "Tenant",
    "User",
    "UserRole",
    "Campaign",
    "DiscountType",
    "default_form_config",
    "FormLink",
    "Coupon",
    "CouponStatus",
    "Customer",
]
