"""Coupon and public submission schemas."""
from uuid import UUID
from datetime import datetime
from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

from coupongen.models.coupon import CouponStatus
from coupongen.models.campaign import DiscountType


def _blank_to_none(value):
    if isinstance(value, str):
        value = value.strip()
        return value or None
    return value


class SubmissionCreate(BaseModel):
    """Public coupon request form."""
    email: EmailStr
    first_name: str | None = Field(default=None, max_length=100)
    last_name: str | None = Field(default=None, max_length=100)
    phone: str | None = Field(default=None, max_length=30, pattern=r"^[0-9+()\s.-]*$")
    address: str | None = Field(default=None, max_length=500)
    allergies: str | None = Field(default=None, max_length=500)
    campaign_code: str | None = Field(default=None, max_length=50)
    form_token: str | None = Field(default=None, max_length=200)
    custom_fields: dict[str, str] = {}
    captcha_token: str | None = None

    @field_validator(
        "first_name", "last_name", "phone", "address", "allergies",
        "campaign_code", "form_token", mode="before",
    )
    @classmethod
    def strip_blank(cls, value):
        return _blank_to_none(value)

    @field_validator("email", mode="before")
    @classmethod
    def normalize_email(cls, value):
        return value.strip().lower() if isinstance(value, str) else value


class CouponRead(BaseModel):
    """Issued coupon response."""
    id: UUID
    code: str
    campaign_id: UUID
    status: CouponStatus
    discount_type: DiscountType
    discount_value: str
    issued_at: datetime
    redeemed_at: datetime | None = None

    model_config = ConfigDict(from_attributes=True)


class CouponDetail(CouponRead):
    """Coupon as shown at the store desk."""
    customer_email: str | None = None
    customer_name: str | None = None
    campaign_name: str | None = None
