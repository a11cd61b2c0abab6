"""Store desk router: coupon lookup and redemption."""
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from coupongen.database import get_db
from coupongen.models.coupon import Coupon
from coupongen.models.tenant import Tenant
from coupongen.models.user import User, UserRole
from coupongen.routers.auth import get_path_tenant, require_tenant_role
from coupongen.schemas.coupon import CouponDetail, CouponRead
from coupongen.services.coupons import CouponService

router = APIRouter(prefix="/t/{tenant_slug}/store", tags=["store"])

store_staff = require_tenant_role(UserRole.STORE, UserRole.ADMIN)


def _detail(coupon: Coupon) -> CouponDetail:
    detail = CouponDetail.model_validate(coupon)
    if coupon.customer:
        detail.customer_email = coupon.customer.email
        name = " ".join(p for p in (coupon.customer.first_name, coupon.customer.last_name) if p)
        detail.customer_name = name or None
    if coupon.campaign:
        detail.campaign_name = coupon.campaign.name
    return detail


@router.get("/coupons/{code}", response_model=CouponDetail)
async def get_coupon(
    code: str,
    tenant: Tenant = Depends(get_path_tenant),
    current_user: User = Depends(store_staff),
    db: Session = Depends(get_db)
):
    """Look up a coupon presented at the counter."""
    return _detail(CouponService(db, tenant.id).get_by_code(code))


@router.post("/coupons/{code}/redeem", response_model=CouponRead)
async def redeem_coupon(
    code: str,
    tenant: Tenant = Depends(get_path_tenant),
    current_user: User = Depends(store_staff),
    db: Session = Depends(get_db)
):
    """Redeem a coupon once."""
    return CouponService(db, tenant.id).redeem(code)
