"""Public router: campaign forms and coupon requests."""
import logging

from fastapi import APIRouter, Depends, Query, Request, status
from sqlalchemy.orm import Session

from coupongen.config import get_settings
from coupongen.database import get_db
from coupongen.models.tenant import Tenant
from coupongen.rate_limit import client_ip, per_identifier_limiter
from coupongen.routers.auth import get_path_tenant
from coupongen.schemas.campaign import CampaignPublic
from coupongen.schemas.coupon import CouponRead, SubmissionCreate
from coupongen.services import captcha
from coupongen.services.campaigns import CampaignService
from coupongen.services.form_links import FormLinkService
from coupongen.services.submissions import SubmissionService

logger = logging.getLogger(__name__)
settings = get_settings()

router = APIRouter(prefix="/t/{tenant_slug}", tags=["public"])

submit_rate_limit = per_identifier_limiter(
    client_ip, settings.submit_rate_limit, settings.submit_rate_window_seconds, key="public:submit"
)


@router.get(
    "/campaigns/{code}",
    response_model=CampaignPublic,
    response_model_exclude_none=True,
)
async def get_public_campaign(
    code: str,
    form: str | None = Query(None, max_length=200),
    tenant: Tenant = Depends(get_path_tenant),
    db: Session = Depends(get_db)
):
    """Campaign shown on the public form.

    With ``?form=TOKEN`` the single-use link decides the campaign and the
    response carries ``_form_token``; the code in the path is ignored.
    """
    if form:
        return FormLinkService(db, tenant.id).resolve_campaign_for_token(form)
    campaign = CampaignService(db, tenant.id).get_public(code.strip().upper())
    return CampaignPublic.model_validate(campaign)


@router.post(
    "/submit",
    response_model=CouponRead,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(submit_rate_limit)],
)
async def submit_form(
    data: SubmissionCreate,
    request: Request,
    tenant: Tenant = Depends(get_path_tenant),
    db: Session = Depends(get_db)
):
    """Request a coupon, consuming the form token when one is supplied."""
    await captcha.verify(data.captcha_token, remote_ip=client_ip(request))
    if data.campaign_code:
        data.campaign_code = data.campaign_code.upper()
    return SubmissionService(db, tenant.id).submit_form(data)
