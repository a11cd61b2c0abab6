"""Single-use form links: generation, validation and statistics.

A form link is a bearer capability: whoever holds the token may submit the
public coupon form once. Every lookup is filtered by tenant; a token that
exists under another tenant is reported exactly like an unknown token and
only the log line tells the two apart.
"""
import logging
from dataclasses import dataclass
from uuid import UUID

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from coupongen.config import get_settings
from coupongen.errors import AlreadyUsedError, NotFoundError, RetryableStorageError, ValidationError
from coupongen.models.campaign import Campaign
from coupongen.models.form_link import FormLink
from coupongen.schemas.campaign import CampaignPublic
from coupongen.services.codes import FormToken, generate_form_token

logger = logging.getLogger(__name__)
settings = get_settings()

LINK_NOT_FOUND = "Link not found or expired"
LINK_ALREADY_USED = "Link already used"


@dataclass
class LinkStatistics:
    """Counters derived from the link rows; never stored."""
    total: int
    used: int
    available: int

    @classmethod
    def from_links(cls, links: list[FormLink]) -> "LinkStatistics":
        total = len(links)
        used = sum(1 for link in links if link.is_used)
        return cls(total=total, used=used, available=total - used)


@dataclass
class LinksWithStats:
    links: list[FormLink]
    statistics: LinkStatistics


class FormLinkService:
    """Form link operations for one tenant."""

    def __init__(self, db: Session, tenant_id: UUID):
        self.db = db
        self.tenant_id = tenant_id

    def _get_campaign(self, campaign_id: UUID) -> Campaign:
        campaign = self.db.query(Campaign).filter(
            Campaign.id == campaign_id,
            Campaign.tenant_id == self.tenant_id
        ).first()
        if not campaign:
            raise NotFoundError("Campaign not found")
        return campaign

    def _token_exists_elsewhere(self, token: str) -> bool:
        """Existence check for log classification only; returns no row data."""
        return self.db.query(FormLink.id).filter(
            FormLink.token == token,
            FormLink.tenant_id != self.tenant_id
        ).first() is not None

    def log_rejected_token(self, token: str) -> None:
        if self._token_exists_elsewhere(token):
            logger.warning(f"Form token of another tenant presented to tenant {self.tenant_id}")
        else:
            logger.warning(f"Unknown form token presented to tenant {self.tenant_id}")

    def find_link(self, token: str, campaign_id: UUID | None = None) -> FormLink | None:
        """Tenant-scoped lookup; optionally pinned to a campaign."""
        if not token:
            return None
        query = self.db.query(FormLink).filter(
            FormLink.token == token,
            FormLink.tenant_id == self.tenant_id
        )
        if campaign_id is not None:
            query = query.filter(FormLink.campaign_id == campaign_id)
        return query.first()

    def generate_links(self, campaign_id: UUID, count: int) -> list[FormLink]:
        """Create ``count`` unused links for a campaign in one transaction."""
        max_batch = settings.form_link_max_batch
        if isinstance(count, bool) or not isinstance(count, int) or not 1 <= count <= max_batch:
            raise ValidationError(f"Count must be an integer between 1 and {max_batch}")

        campaign = self._get_campaign(campaign_id)

        links = [
            FormLink(
                tenant_id=self.tenant_id,
                campaign_id=campaign.id,
                token=generate_form_token(settings.form_token_bytes),
            )
            for _ in range(count)
        ]
        try:
            self.db.add_all(links)
            self.db.commit()
        except IntegrityError as e:
            self.db.rollback()
            logger.error(f"Form token collision while generating {count} links: {e}")
            raise RetryableStorageError("Could not store form links, please retry")

        for link in links:
            self.db.refresh(link)
        logger.info(f"Generated {count} form links for campaign {campaign.campaign_code}")
        return links

    def get_links_with_stats(self, campaign_id: UUID) -> LinksWithStats:
        """All links of a campaign, newest first, with derived counters."""
        campaign = self._get_campaign(campaign_id)
        links = self.db.query(FormLink).filter(
            FormLink.tenant_id == self.tenant_id,
            FormLink.campaign_id == campaign.id
        ).order_by(FormLink.created_at.desc()).all()
        return LinksWithStats(links=links, statistics=LinkStatistics.from_links(links))

    def resolve_campaign_for_token(self, token: FormToken | str) -> CampaignPublic:
        """Campaign view for a visitor opening a single-use link. Read only."""
        link = self.find_link(token)
        if link is None:
            self.log_rejected_token(token)
            raise NotFoundError(LINK_NOT_FOUND)

        if link.is_used:
            logger.warning(f"Used form link {link.id} reopened")
            raise AlreadyUsedError(LINK_ALREADY_USED)

        campaign = self._get_campaign(link.campaign_id)
        view = CampaignPublic.model_validate(campaign)
        view.form_token = link.token
        return view
