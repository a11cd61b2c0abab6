"""Tenant admin router: campaigns, form links and issued coupons."""
from uuid import UUID
from typing import List

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from coupongen.database import get_db
from coupongen.models.coupon import CouponStatus
from coupongen.models.tenant import Tenant
from coupongen.models.user import User, UserRole
from coupongen.routers.auth import get_path_tenant, require_tenant_role
from coupongen.schemas.campaign import CampaignCreate, CampaignRead, CampaignUpdate, FormConfig
from coupongen.schemas.coupon import CouponRead
from coupongen.schemas.form_link import (
    FormLinkBatch, FormLinkGenerate, FormLinkList, FormLinkRead, FormLinkStatistics
)
from coupongen.services.campaigns import CampaignService
from coupongen.services.coupons import CouponService
from coupongen.services.form_links import FormLinkService

router = APIRouter(prefix="/t/{tenant_slug}/admin", tags=["campaigns"])

admin_only = require_tenant_role(UserRole.ADMIN)


@router.get("/campaigns", response_model=List[CampaignRead])
async def list_campaigns(
    tenant: Tenant = Depends(get_path_tenant),
    current_user: User = Depends(admin_only),
    db: Session = Depends(get_db)
):
    """List campaigns, newest first."""
    return CampaignService(db, tenant.id).list_campaigns()


@router.post("/campaigns", response_model=CampaignRead, status_code=status.HTTP_201_CREATED)
async def create_campaign(
    data: CampaignCreate,
    tenant: Tenant = Depends(get_path_tenant),
    current_user: User = Depends(admin_only),
    db: Session = Depends(get_db)
):
    """Create an inactive campaign with a generated code."""
    return CampaignService(db, tenant.id).create(data)


@router.get("/campaigns/{campaign_id}", response_model=CampaignRead)
async def get_campaign(
    campaign_id: UUID,
    tenant: Tenant = Depends(get_path_tenant),
    current_user: User = Depends(admin_only),
    db: Session = Depends(get_db)
):
    return CampaignService(db, tenant.id).get(campaign_id)


@router.put("/campaigns/{campaign_id}", response_model=CampaignRead)
async def update_campaign(
    campaign_id: UUID,
    data: CampaignUpdate,
    tenant: Tenant = Depends(get_path_tenant),
    current_user: User = Depends(admin_only),
    db: Session = Depends(get_db)
):
    return CampaignService(db, tenant.id).update(campaign_id, data)


@router.put("/campaigns/{campaign_id}/activate", response_model=CampaignRead)
async def activate_campaign(
    campaign_id: UUID,
    tenant: Tenant = Depends(get_path_tenant),
    current_user: User = Depends(admin_only),
    db: Session = Depends(get_db)
):
    return CampaignService(db, tenant.id).set_active(campaign_id, True)


@router.put("/campaigns/{campaign_id}/deactivate", response_model=CampaignRead)
async def deactivate_campaign(
    campaign_id: UUID,
    tenant: Tenant = Depends(get_path_tenant),
    current_user: User = Depends(admin_only),
    db: Session = Depends(get_db)
):
    return CampaignService(db, tenant.id).set_active(campaign_id, False)


@router.delete("/campaigns/{campaign_id}")
async def delete_campaign(
    campaign_id: UUID,
    tenant: Tenant = Depends(get_path_tenant),
    current_user: User = Depends(admin_only),
    db: Session = Depends(get_db)
):
    CampaignService(db, tenant.id).delete(campaign_id)
    return {"ok": True}


@router.get("/campaigns/{campaign_id}/form-config", response_model=FormConfig)
async def get_form_config(
    campaign_id: UUID,
    tenant: Tenant = Depends(get_path_tenant),
    current_user: User = Depends(admin_only),
    db: Session = Depends(get_db)
):
    return CampaignService(db, tenant.id).get_form_config(campaign_id)


@router.put("/campaigns/{campaign_id}/form-config", response_model=FormConfig)
async def update_form_config(
    campaign_id: UUID,
    config: FormConfig,
    tenant: Tenant = Depends(get_path_tenant),
    current_user: User = Depends(admin_only),
    db: Session = Depends(get_db)
):
    return CampaignService(db, tenant.id).update_form_config(campaign_id, config)


# ============ Form links ============

@router.post("/campaigns/{campaign_id}/form-links", response_model=FormLinkBatch)
async def generate_form_links(
    campaign_id: UUID,
    request: FormLinkGenerate,
    tenant: Tenant = Depends(get_path_tenant),
    current_user: User = Depends(admin_only),
    db: Session = Depends(get_db)
):
    """Generate a batch of single-use form links."""
    links = FormLinkService(db, tenant.id).generate_links(campaign_id, request.count)
    return FormLinkBatch(
        links=[FormLinkRead.model_validate(link) for link in links],
        count=len(links),
    )


@router.get("/campaigns/{campaign_id}/form-links", response_model=FormLinkList)
async def list_form_links(
    campaign_id: UUID,
    tenant: Tenant = Depends(get_path_tenant),
    current_user: User = Depends(admin_only),
    db: Session = Depends(get_db)
):
    """List form links with total/used/available counters."""
    result = FormLinkService(db, tenant.id).get_links_with_stats(campaign_id)
    return FormLinkList(
        links=[FormLinkRead.model_validate(link) for link in result.links],
        statistics=FormLinkStatistics(
            total=result.statistics.total,
            used=result.statistics.used,
            available=result.statistics.available,
        ),
    )


# ============ Coupons ============

@router.get("/coupons", response_model=List[CouponRead])
async def list_coupons(
    skip: int = Query(0, ge=0),
    limit: int = Query(50, ge=1, le=200),
    coupon_status: CouponStatus | None = Query(None, alias="status"),
    tenant: Tenant = Depends(get_path_tenant),
    current_user: User = Depends(admin_only),
    db: Session = Depends(get_db)
):
    """Issued coupons, newest first."""
    return CouponService(db, tenant.id).list_coupons(coupon_status, skip=skip, limit=limit)
