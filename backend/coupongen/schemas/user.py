"""User and auth schemas."""
from uuid import UUID
from datetime import datetime
from pydantic import BaseModel, ConfigDict, Field

from coupongen.models.user import UserRole


class UserBase(BaseModel):
    """Base user schema."""
    username: str = Field(min_length=3, max_length=255)
    first_name: str | None = None
    last_name: str | None = None
    email: str | None = None
    role: UserRole = UserRole.STORE


class UserCreate(UserBase):
    """Create tenant user request."""
    password: str = Field(min_length=8, max_length=128)


class UserRead(UserBase):
    """User response."""
    id: UUID
    tenant_id: UUID | None = None
    is_active: bool
    created_at: datetime
    last_login: datetime | None = None

    model_config = ConfigDict(from_attributes=True)


class Token(BaseModel):
    """JWT token response."""
    access_token: str
    token_type: str = "bearer"


class TokenData(BaseModel):
    """JWT token payload."""
    user_id: UUID | None = None
    tenant_id: UUID | None = None
    role: str | None = None
