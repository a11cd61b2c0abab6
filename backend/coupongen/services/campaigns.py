"""Campaign store: tenant-scoped campaign definitions."""
import logging
from datetime import datetime
from uuid import UUID

from sqlalchemy.orm import Session

from coupongen.config import get_settings
from coupongen.errors import NotFoundError, ValidationError
from coupongen.models.campaign import Campaign, DiscountType, default_form_config
from coupongen.models.coupon import Coupon
from coupongen.models.form_link import FormLink
from coupongen.schemas.campaign import CampaignCreate, CampaignUpdate, FormConfig
from coupongen.services.codes import generate_code

logger = logging.getLogger(__name__)
settings = get_settings()

CODE_ATTEMPTS = 10
NON_NULLABLE_FIELDS = ("name", "discount_type", "discount_value")


def validate_discount(discount_type: DiscountType | str, discount_value: str) -> None:
    """Numeric values for percent/fixed; percent must lie in (0, 100]."""
    discount_type = DiscountType(discount_type)
    if discount_type == DiscountType.TEXT:
        return
    try:
        value = float(discount_value)
    except (TypeError, ValueError):
        raise ValidationError("Invalid discount value")
    if value <= 0:
        raise ValidationError("Invalid discount value")
    if discount_type == DiscountType.PERCENT and value > 100:
        raise ValidationError("Percent discount cannot exceed 100")


def deactivate_expired_campaigns(db: Session, now: datetime | None = None) -> int:
    """Maintenance sweep over all tenants; returns how many were switched off."""
    now = now or datetime.utcnow()
    count = db.query(Campaign).filter(
        Campaign.is_active.is_(True),
        Campaign.expiry_date.is_not(None),
        Campaign.expiry_date < now,
    ).update({Campaign.is_active: False}, synchronize_session=False)
    db.commit()
    if count:
        logger.info(f"Deactivated {count} expired campaigns")
    return count


class CampaignService:
    """Campaign CRUD for one tenant."""

    def __init__(self, db: Session, tenant_id: UUID):
        self.db = db
        self.tenant_id = tenant_id

    def _query(self):
        return self.db.query(Campaign).filter(Campaign.tenant_id == self.tenant_id)

    def _new_code(self) -> str:
        for _ in range(CODE_ATTEMPTS):
            code = generate_code(settings.campaign_code_length)
            if not self._query().filter(Campaign.campaign_code == code).first():
                return code
        raise RuntimeError(f"Could not generate a unique campaign code after {CODE_ATTEMPTS} attempts")

    def _name_taken(self, name: str, exclude_id: UUID | None = None) -> bool:
        query = self._query().filter(Campaign.name == name)
        if exclude_id is not None:
            query = query.filter(Campaign.id != exclude_id)
        return query.first() is not None

    def _deactivate_if_expired(self, campaign: Campaign) -> bool:
        if campaign.is_active and campaign.is_expired():
            campaign.is_active = False
            self.db.commit()
            logger.info(f"Campaign {campaign.campaign_code} expired, deactivated")
            return True
        return False

    def get(self, campaign_id: UUID) -> Campaign:
        campaign = self._query().filter(Campaign.id == campaign_id).first()
        if not campaign:
            raise NotFoundError("Campaign not found")
        return campaign

    def list_campaigns(self) -> list[Campaign]:
        """All campaigns, newest first; expired ones are switched off on the way."""
        campaigns = self._query().order_by(Campaign.created_at.desc()).all()
        for campaign in campaigns:
            self._deactivate_if_expired(campaign)
        return campaigns

    def create(self, data: CampaignCreate) -> Campaign:
        name = data.name.strip()
        if not name:
            raise ValidationError("Invalid campaign name")
        validate_discount(data.discount_type, data.discount_value)
        if self._name_taken(name):
            raise ValidationError("A campaign with this name already exists")

        campaign = Campaign(
            tenant_id=self.tenant_id,
            campaign_code=self._new_code(),
            name=name,
            description=data.description,
            discount_type=DiscountType(data.discount_type).value,
            discount_value=data.discount_value.strip(),
            expiry_date=data.expiry_date,
            is_active=False,
            form_config=default_form_config(),
        )
        self.db.add(campaign)
        self.db.commit()
        self.db.refresh(campaign)
        logger.info(f"Created campaign {campaign.campaign_code} for tenant {self.tenant_id}")
        return campaign

    def update(self, campaign_id: UUID, data: CampaignUpdate) -> Campaign:
        campaign = self.get(campaign_id)
        changes = data.model_dump(exclude_unset=True)
        # null only clears nullable columns
        for key in NON_NULLABLE_FIELDS:
            if key in changes and changes[key] is None:
                del changes[key]
        if not changes:
            raise ValidationError("No fields to update")

        if "name" in changes:
            changes["name"] = changes["name"].strip()
            if not changes["name"]:
                raise ValidationError("Invalid campaign name")
            if self._name_taken(changes["name"], exclude_id=campaign.id):
                raise ValidationError("A campaign with this name already exists")

        discount_type = changes.get("discount_type", campaign.discount_type)
        discount_value = changes.get("discount_value", campaign.discount_value)
        validate_discount(discount_type, discount_value)
        if "discount_type" in changes:
            changes["discount_type"] = DiscountType(changes["discount_type"]).value

        for key, value in changes.items():
            setattr(campaign, key, value)

        self.db.commit()
        self.db.refresh(campaign)
        return campaign

    def set_active(self, campaign_id: UUID, active: bool) -> Campaign:
        campaign = self.get(campaign_id)
        if active and campaign.is_expired():
            raise ValidationError("Campaign has expired")
        campaign.is_active = active
        self.db.commit()
        self.db.refresh(campaign)
        logger.info(f"Campaign {campaign.campaign_code} {'activated' if active else 'deactivated'}")
        return campaign

    def delete(self, campaign_id: UUID) -> None:
        """Delete a campaign that never issued coupons or links."""
        campaign = self.get(campaign_id)
        in_use = (
            self.db.query(Coupon.id).filter(
                Coupon.tenant_id == self.tenant_id, Coupon.campaign_id == campaign.id
            ).first()
            or self.db.query(FormLink.id).filter(
                FormLink.tenant_id == self.tenant_id, FormLink.campaign_id == campaign.id
            ).first()
        )
        if in_use:
            raise ValidationError("Campaign has issued coupons or form links; deactivate it instead")
        self.db.delete(campaign)
        self.db.commit()

    def get_public(self, code: str) -> Campaign:
        """Campaign behind a public form URL; must be active and not expired."""
        campaign = self._query().filter(Campaign.campaign_code == code).first()
        if not campaign or not campaign.is_active:
            raise NotFoundError("Campaign not found")
        if self._deactivate_if_expired(campaign):
            raise NotFoundError("Campaign expired")
        return campaign

    def get_form_config(self, campaign_id: UUID) -> FormConfig:
        campaign = self.get(campaign_id)
        return FormConfig.model_validate(campaign.form_config or default_form_config())

    def update_form_config(self, campaign_id: UUID, config: FormConfig) -> FormConfig:
        if len(config.customFields) > settings.max_custom_fields:
            raise ValidationError(
                f"At most {settings.max_custom_fields} custom fields per campaign"
            )
        ids = [f.id for f in config.customFields]
        if len(ids) != len(set(ids)):
            raise ValidationError("Custom field ids must be unique")

        campaign = self.get(campaign_id)
        payload = config.model_dump()
        # email is the coupon delivery address
        payload["email"] = {"visible": True, "required": True}
        campaign.form_config = payload
        self.db.commit()
        return FormConfig.model_validate(payload)
