"""Tenant registry and superadmin tenant management."""
import logging
import re
from dataclasses import dataclass, field
from uuid import UUID

from sqlalchemy.orm import Session

from coupongen.errors import NotFoundError, ValidationError
from coupongen.models.campaign import Campaign
from coupongen.models.coupon import Coupon, Customer
from coupongen.models.form_link import FormLink
from coupongen.models.tenant import Tenant
from coupongen.models.user import User, UserRole

logger = logging.getLogger(__name__)

SLUG_RE = re.compile(r"^[a-z0-9-]{1,100}$")


@dataclass
class PurgeResult:
    """Rows removed by purge_tenant, per table."""
    tenant_id: UUID
    deleted: dict[str, int] = field(default_factory=dict)


def get_tenant_by_slug(db: Session, slug: str) -> Tenant:
    """Resolve a URL slug to its tenant."""
    tenant = db.query(Tenant).filter(Tenant.slug == slug).first()
    if not tenant:
        logger.warning(f"Tenant not found: {slug!r}")
        raise NotFoundError("Tenant not found")
    return tenant


def get_tenant(db: Session, tenant_id: UUID) -> Tenant:
    tenant = db.query(Tenant).filter(Tenant.id == tenant_id).first()
    if not tenant:
        raise NotFoundError("Tenant not found")
    return tenant


def list_tenants(db: Session) -> list[Tenant]:
    return db.query(Tenant).order_by(Tenant.created_at.desc()).all()


def create_tenant(db: Session, slug: str, name: str | None = None,
                  email_from_name: str = "CouponGen") -> Tenant:
    """Create a tenant; slugs are lowercase letters, digits and hyphens."""
    slug = (slug or "").strip().lower()
    if not SLUG_RE.match(slug):
        raise ValidationError("Tenant slug may only contain lowercase letters, digits and hyphens")

    if db.query(Tenant).filter(Tenant.slug == slug).first():
        raise ValidationError("Tenant slug already exists")

    tenant = Tenant(slug=slug, name=name or slug, email_from_name=email_from_name)
    db.add(tenant)
    db.commit()
    db.refresh(tenant)
    logger.info(f"Created tenant {tenant.slug} ({tenant.id})")
    return tenant


def ensure_default_tenant(db: Session, slug: str, name: str) -> Tenant:
    tenant = db.query(Tenant).filter(Tenant.slug == slug).first()
    if tenant:
        return tenant
    return create_tenant(db, slug, name)


def create_tenant_user(db: Session, tenant_id: UUID, username: str, hashed_password: str,
                       role: UserRole = UserRole.STORE, first_name: str | None = None,
                       last_name: str | None = None, email: str | None = None) -> User:
    """Create a back-office account bound to a tenant."""
    get_tenant(db, tenant_id)

    if UserRole(role) == UserRole.SUPERADMIN:
        raise ValidationError("Superadmin accounts cannot belong to a tenant")
    if db.query(User).filter(User.username == username).first():
        raise ValidationError("Username already registered")

    user = User(
        tenant_id=tenant_id,
        username=username,
        hashed_password=hashed_password,
        role=UserRole(role).value,
        first_name=first_name,
        last_name=last_name,
        email=email,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def purge_tenant(db: Session, tenant_id: UUID) -> PurgeResult:
    """Delete a tenant and every row it owns, dependants first, in one transaction."""
    tenant = get_tenant(db, tenant_id)
    result = PurgeResult(tenant_id=tenant.id)

    try:
        # form_links -> coupons -> customers, campaigns; order follows the FKs
        for label, model in (
            ("form_links", FormLink),
            ("coupons", Coupon),
            ("customers", Customer),
            ("campaigns", Campaign),
            ("users", User),
        ):
            result.deleted[label] = db.query(model).filter(
                model.tenant_id == tenant.id
            ).delete(synchronize_session=False)

        db.query(Tenant).filter(Tenant.id == tenant.id).delete(synchronize_session=False)
        db.commit()
    except Exception:
        db.rollback()
        logger.exception(f"Tenant purge failed for {tenant_id}")
        raise

    result.deleted["tenants"] = 1
    logger.info(f"Purged tenant {tenant_id}: {result.deleted}")
    return result
