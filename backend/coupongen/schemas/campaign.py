"""Campaign schemas."""
from uuid import UUID
from datetime import datetime, timezone
from pydantic import BaseModel, ConfigDict, Field, field_validator

from coupongen.models.campaign import DiscountType


def _naive_utc(value: datetime | None) -> datetime | None:
    # stored columns are naive UTC
    if value is not None and value.tzinfo is not None:
        return value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


class CustomField(BaseModel):
    """Extra question shown on the public form."""
    id: str = Field(min_length=1, max_length=50, pattern=r"^[A-Za-z0-9_-]+$")
    label: str = Field(min_length=1, max_length=200)
    type: str = "text"
    required: bool = False


class FieldRule(BaseModel):
    """Visibility and requirement of a standard form field."""
    visible: bool = True
    required: bool = False


class FormConfig(BaseModel):
    """Public form layout for a campaign."""
    email: FieldRule = FieldRule(visible=True, required=True)
    firstName: FieldRule = FieldRule(visible=True, required=True)
    lastName: FieldRule = FieldRule(visible=True, required=True)
    phone: FieldRule = FieldRule(visible=False, required=False)
    address: FieldRule = FieldRule(visible=False, required=False)
    allergies: FieldRule = FieldRule(visible=False, required=False)
    customFields: list[CustomField] = []


class CampaignCreate(BaseModel):
    """Create campaign request."""
    name: str = Field(min_length=1, max_length=255)
    description: str | None = None
    discount_type: DiscountType
    discount_value: str = Field(min_length=1, max_length=100)
    expiry_date: datetime | None = None

    @field_validator("expiry_date")
    @classmethod
    def naive_utc(cls, value):
        return _naive_utc(value)


class CampaignUpdate(BaseModel):
    """Update campaign request."""
    name: str | None = Field(default=None, min_length=1, max_length=255)
    description: str | None = None
    discount_type: DiscountType | None = None
    discount_value: str | None = Field(default=None, min_length=1, max_length=100)
    expiry_date: datetime | None = None

    @field_validator("expiry_date")
    @classmethod
    def naive_utc(cls, value):
        return _naive_utc(value)


class CampaignRead(BaseModel):
    """Campaign response for the admin dashboard."""
    id: UUID
    tenant_id: UUID
    campaign_code: str
    name: str
    description: str | None = None
    discount_type: DiscountType
    discount_value: str
    is_active: bool
    expiry_date: datetime | None = None
    form_config: dict
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class CampaignPublic(BaseModel):
    """Campaign fields needed to render the public form.

    ``form_token`` is serialized as ``_form_token`` and only set when the
    form was opened through a single-use link.
    """
    id: UUID
    campaign_code: str
    name: str
    description: str | None = None
    discount_type: DiscountType
    discount_value: str
    form_config: dict
    form_token: str | None = Field(default=None, alias="_form_token")

    model_config = ConfigDict(from_attributes=True, populate_by_name=True)
