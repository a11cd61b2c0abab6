"""Tenant schemas."""
from uuid import UUID
from datetime import datetime
from pydantic import BaseModel, ConfigDict, Field

SLUG_PATTERN = r"^[a-z0-9-]+$"


class TenantBase(BaseModel):
    """Base tenant schema."""
    slug: str = Field(min_length=1, max_length=100, pattern=SLUG_PATTERN)
    name: str | None = None
    email_from_name: str = "CouponGen"


class TenantCreate(TenantBase):
    """Create tenant request."""
    pass


class TenantRead(TenantBase):
    """Tenant response."""
    id: UUID
    created_at: datetime
    updated_at: datetime | None = None

    model_config = ConfigDict(from_attributes=True)


class TenantPurgeResult(BaseModel):
    """Row counts removed by a tenant purge."""
    tenant_id: UUID
    deleted: dict[str, int]
