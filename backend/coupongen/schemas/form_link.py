"""Form link schemas."""
from uuid import UUID
from datetime import datetime
from pydantic import BaseModel, ConfigDict, Field


class FormLinkGenerate(BaseModel):
    """Generate links request; range is enforced by the service."""
    count: int


class FormLinkRead(BaseModel):
    """Link entry in the admin list."""
    id: UUID
    token: str
    used_at: datetime | None = None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class FormLinkBatch(BaseModel):
    """Generate links response."""
    links: list[FormLinkRead]
    count: int


class FormLinkStatistics(BaseModel):
    """Derived counters; available + used == total."""
    total: int = Field(ge=0)
    used: int = Field(ge=0)
    available: int = Field(ge=0)


class FormLinkList(BaseModel):
    """List links response."""
    links: list[FormLinkRead]
    statistics: FormLinkStatistics
