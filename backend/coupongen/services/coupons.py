"""Coupon desk: lookup and one-time redemption by store staff."""
import logging
from datetime import datetime
from uuid import UUID

from sqlalchemy.orm import Session

from coupongen.errors import AlreadyUsedError, NotFoundError
from coupongen.models.coupon import Coupon, CouponStatus


logger = logging.getLogger(__name__)


class CouponService:
    """Coupon reads and redemption for one tenant."""

    def __init__(self, db: Session, tenant_id: UUID):
        self.db = db
        self.tenant_id = tenant_id

    def _query(self):
        return self.db.query(Coupon).filter(Coupon.tenant_id == self.tenant_id)

    def get_by_code(self, code: str) -> Coupon:
        coupon = self._query().filter(Coupon.code == code.strip().upper()).first()
        if not coupon:
            raise NotFoundError("Coupon not found")
        return coupon

    def list_coupons(self, status: CouponStatus | None = None,
                     skip: int = 0, limit: int = 50) -> list[Coupon]:
        query = self._query()
        if status:
            query = query.filter(Coupon.status == CouponStatus(status).value)
        return query.order_by(Coupon.issued_at.desc()).offset(skip).limit(limit).all()

    def redeem(self, code: str) -> Coupon:
        """Mark an active coupon redeemed; a second redemption fails."""
        code = code.strip().upper()
        redeemed = self._query().filter(
            Coupon.code == code,
            Coupon.status == CouponStatus.ACTIVE.value
        ).update(
            {Coupon.status: CouponStatus.REDEEMED.value, Coupon.redeemed_at: datetime.utcnow()},
            synchronize_session=False
        )

        if redeemed != 1:
            self.db.rollback()
            coupon = self.get_by_code(code)
            logger.warning(f"Coupon {coupon.code} redeemed twice (status {coupon.status})")
            raise AlreadyUsedError("Coupon already redeemed")

        self.db.commit()
        coupon = self.get_by_code(code)
        logger.info(f"Coupon {coupon.code} redeemed")
        return coupon
