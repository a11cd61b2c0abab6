"""Pydantic schemas for API request/response."""
from coupongen.schemas.tenant import TenantCreate, TenantRead, TenantPurgeResult
from coupongen.schemas.user import UserCreate, UserRead, Token, TokenData
from coupongen.schemas.campaign import (
    CampaignCreate, CampaignRead, CampaignUpdate, CampaignPublic,
    FormConfig, CustomField, FieldRule,
)
from coupongen.schemas.form_link import (
    FormLinkGenerate, FormLinkRead, FormLinkBatch, FormLinkStatistics, FormLinkList
)
from coupongen.schemas.coupon import SubmissionCreate, CouponRead, CouponDetail

__all__ = [
    "TenantCreate", "TenantRead", "TenantPurgeResult",
    "UserCreate", "UserRead", "Token", "TokenData",
    "CampaignCreate", "CampaignRead", "CampaignUpdate", "CampaignPublic",
    "FormConfig", "CustomField", "FieldRule",
    "FormLinkGenerate", "FormLinkRead", "FormLinkBatch", "FormLinkStatistics", "FormLinkList",
    "SubmissionCreate", "CouponRead", "CouponDetail",
]
