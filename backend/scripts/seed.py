"""Seed script to create the default tenant, demo users and a demo campaign."""
import sys
import os

# Add backend to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from coupongen.config import get_settings
from coupongen.database import SessionLocal, init_db
from coupongen.models.campaign import Campaign, DiscountType, default_form_config
from coupongen.models.user import User, UserRole
from coupongen.routers.auth import get_password_hash
from coupongen.services.codes import generate_code
from coupongen.services.tenants import ensure_default_tenant


DEMO_USERS = [
    # username, password, role, tenant-bound
    ("superadmin", "superadmin123", UserRole.SUPERADMIN, False),
    ("admin", "admin123", UserRole.ADMIN, True),
    ("store", "store123", UserRole.STORE, True),
]


def seed_database():
    """Create default tenant, demo users and one active campaign."""
    settings = get_settings()
    init_db()
    db = SessionLocal()

    try:
        tenant = ensure_default_tenant(db, settings.default_tenant_slug, settings.default_tenant_name)
        print(f"Using tenant: {tenant.slug} ({tenant.id})")

        for username, password, role, tenant_bound in DEMO_USERS:
            user = db.query(User).filter(User.username == username).first()
            if user:
                print(f"User already exists: {username}")
                continue
            user = User(
                tenant_id=tenant.id if tenant_bound else None,
                username=username,
                hashed_password=get_password_hash(password),
                role=role.value,
                is_active=True,
            )
            db.add(user)
            db.commit()
            print(f"Created {role.value} user: {user.id}")
            print(f"  Username: {username}")
            print(f"  Password: {password}")

        campaign = db.query(Campaign).filter(
            Campaign.tenant_id == tenant.id,
            Campaign.name == "Demo campaign"
        ).first()
        if not campaign:
            campaign = Campaign(
                tenant_id=tenant.id,
                campaign_code=generate_code(settings.campaign_code_length),
                name="Demo campaign",
                description="Welcome discount",
                discount_type=DiscountType.PERCENT.value,
                discount_value=str(settings.default_discount_percent),
                is_active=True,
                form_config=default_form_config(),
            )
            db.add(campaign)
            db.commit()
            print(f"Created campaign: {campaign.name} (code {campaign.campaign_code})")
        else:
            print(f"Campaign already exists: {campaign.campaign_code}")

        print("\nSeed completed successfully!")

    except Exception as e:
        print(f"Error: {e}")
        db.rollback()
        raise
    finally:
        db.close()


if __name__ == "__main__":
    seed_database()
