"""Public form submissions: coupon issuance and form link consumption."""
import logging
from datetime import datetime
from uuid import UUID

from sqlalchemy.orm import Session

from coupongen.config import get_settings
from coupongen.errors import (
    FormLinkAlreadyUsedError,
    FormLinkInvalidError,
    ValidationError,
)
from coupongen.models.campaign import Campaign, default_form_config
from coupongen.models.coupon import Coupon, CouponStatus, Customer
from coupongen.models.form_link import FormLink
from coupongen.schemas.campaign import FormConfig
from coupongen.schemas.coupon import SubmissionCreate
from coupongen.services.codes import generate_code
from coupongen.services.form_links import FormLinkService

logger = logging.getLogger(__name__)
settings = get_settings()

COUPON_UNAVAILABLE = "This coupon does not exist or has expired"
CODE_ATTEMPTS = 10

# form_config key -> SubmissionCreate attribute
STANDARD_FIELDS = {
    "firstName": "first_name",
    "lastName": "last_name",
    "phone": "phone",
    "address": "address",
    "allergies": "allergies",
}


def validate_submission(form_config: dict | None, data: SubmissionCreate) -> dict[str, str]:
    """Check required fields against the campaign form; return accepted custom values.

    Custom values for fields the campaign does not define are dropped.
    """
    config = FormConfig.model_validate(form_config or default_form_config())

    missing = []
    for key, attr in STANDARD_FIELDS.items():
        rule = getattr(config, key)
        if rule.visible and rule.required and not getattr(data, attr):
            missing.append(key)

    custom = {}
    for field in config.customFields:
        value = (data.custom_fields.get(field.id) or "").strip()
        if value:
            custom[field.id] = value[:500]
        elif field.required:
            missing.append(field.id)

    if missing:
        raise ValidationError(f"Missing required fields: {', '.join(missing)}")
    return custom


class SubmissionService:
    """Turns a public form submission into a coupon for one tenant."""

    def __init__(self, db: Session, tenant_id: UUID):
        self.db = db
        self.tenant_id = tenant_id

    def _campaign_by_code(self, code: str) -> Campaign | None:
        return self.db.query(Campaign).filter(
            Campaign.campaign_code == code,
            Campaign.tenant_id == self.tenant_id
        ).first()

    def _campaign_by_id(self, campaign_id: UUID) -> Campaign | None:
        return self.db.query(Campaign).filter(
            Campaign.id == campaign_id,
            Campaign.tenant_id == self.tenant_id
        ).first()

    def _new_coupon_code(self) -> str:
        for _ in range(CODE_ATTEMPTS):
            code = generate_code(settings.coupon_code_length)
            if not self.db.query(Coupon.id).filter(Coupon.code == code).first():
                return code
        raise RuntimeError(f"Could not generate a unique coupon code after {CODE_ATTEMPTS} attempts")

    def _upsert_customer(self, data: SubmissionCreate, custom: dict[str, str]) -> Customer:
        customer = self.db.query(Customer).filter(
            Customer.email == data.email,
            Customer.tenant_id == self.tenant_id
        ).first()

        if customer is None:
            customer = Customer(tenant_id=self.tenant_id, email=data.email, custom_data={})
            self.db.add(customer)

        for attr in STANDARD_FIELDS.values():
            value = getattr(data, attr)
            if value:
                setattr(customer, attr, value)
        if custom:
            customer.custom_data = {**(customer.custom_data or {}), **custom}

        self.db.flush()
        return customer

    def _issue_coupon(self, campaign: Campaign, data: SubmissionCreate,
                      custom: dict[str, str]) -> Coupon:
        """Stage customer and coupon rows; the caller owns the commit."""
        customer = self._upsert_customer(data, custom)
        coupon = Coupon(
            tenant_id=self.tenant_id,
            campaign_id=campaign.id,
            customer_id=customer.id,
            code=self._new_coupon_code(),
            status=CouponStatus.ACTIVE.value,
            discount_type=campaign.discount_type,
            discount_value=campaign.discount_value,
        )
        self.db.add(coupon)
        self.db.flush()
        return coupon

    def submit_form(self, form_data: SubmissionCreate, form_token: str | None = None) -> Coupon:
        """Issue a coupon; with a form token the link is consumed in the same transaction."""
        form_token = form_token or form_data.form_token
        if form_token:
            return self._submit_with_token(form_data, form_token)
        return self._submit_untokened(form_data)

    def _submit_untokened(self, form_data: SubmissionCreate) -> Coupon:
        if not form_data.campaign_code:
            raise ValidationError(COUPON_UNAVAILABLE)

        campaign = self._campaign_by_code(form_data.campaign_code)
        if campaign is None or not campaign.is_active:
            raise ValidationError(COUPON_UNAVAILABLE)
        if campaign.is_expired():
            campaign.is_active = False
            self.db.commit()
            logger.info(f"Campaign {campaign.campaign_code} expired, deactivated")
            raise ValidationError(COUPON_UNAVAILABLE)

        custom = validate_submission(campaign.form_config, form_data)

        try:
            coupon = self._issue_coupon(campaign, form_data, custom)
            self.db.commit()
        except Exception:
            self.db.rollback()
            logger.exception(f"Coupon issuance failed for campaign {campaign.campaign_code}")
            raise

        self.db.refresh(coupon)
        logger.info(f"Issued coupon {coupon.code} for campaign {campaign.campaign_code}")
        return coupon

    def _submit_with_token(self, form_data: SubmissionCreate, form_token: str) -> Coupon:
        links = FormLinkService(self.db, self.tenant_id)

        campaign_id = None
        if form_data.campaign_code:
            pinned = self._campaign_by_code(form_data.campaign_code)
            if pinned is None:
                logger.warning(f"Form token submitted with unknown campaign code {form_data.campaign_code!r}")
                links.log_rejected_token(form_token)
                raise FormLinkInvalidError()
            campaign_id = pinned.id

        # Re-check right before writing; the visitor's earlier resolve may be stale.
        link = links.find_link(form_token, campaign_id=campaign_id)
        if link is None:
            links.log_rejected_token(form_token)
            raise FormLinkInvalidError()
        if link.is_used:
            logger.warning(f"Resubmission with used form link {link.id}")
            raise FormLinkAlreadyUsedError()

        campaign = self._campaign_by_id(link.campaign_id)
        if campaign is None:
            raise FormLinkInvalidError()

        custom = validate_submission(campaign.form_config, form_data)
        link_id = link.id

        try:
            consumed = self.db.query(FormLink).filter(
                FormLink.id == link_id,
                FormLink.tenant_id == self.tenant_id,
                FormLink.used_at.is_(None)
            ).update({FormLink.used_at: datetime.utcnow()}, synchronize_session=False)
            if consumed != 1:
                raise FormLinkAlreadyUsedError()

            coupon = self._issue_coupon(campaign, form_data, custom)
            self.db.query(FormLink).filter(
                FormLink.id == link_id,
                FormLink.tenant_id == self.tenant_id
            ).update({FormLink.coupon_id: coupon.id}, synchronize_session=False)
            self.db.commit()
        except FormLinkAlreadyUsedError:
            self.db.rollback()
            logger.warning(f"Form link {link_id} consumed by a concurrent submission")
            raise
        except Exception:
            self.db.rollback()
            logger.exception(f"Token submission failed for form link {link_id}, link left unused")
            raise

        self.db.refresh(coupon)
        logger.info(f"Form link {link_id} consumed, issued coupon {coupon.code}")
        return coupon
