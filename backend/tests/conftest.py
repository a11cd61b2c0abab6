"""Pytest configuration and fixtures."""
import os

# Must be set before coupongen reads its settings.
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ["REDIS_URL"] = ""

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

import coupongen.models  # noqa: F401  registers mappers
from coupongen.database import Base, get_db
from coupongen.config import Settings


@pytest.fixture(scope="session")
def settings():
    """Test settings."""
    return Settings(
        database_url="sqlite://",
        redis_url="",
        secret_key="test-secret-key",
        debug=True,
    )


@pytest.fixture(scope="function")
def db_session(settings):
    """Create a test database session."""
    engine = create_engine(
        settings.database_url,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)

    TestSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    session = TestSessionLocal()

    yield session

    session.close()
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture(autouse=True)
def reset_submit_limiter():
    """Rate limiter buckets are process-wide; start every test empty."""
    from coupongen.routers.public import submit_rate_limit

    submit_rate_limit.buckets.clear()
    yield
    submit_rate_limit.buckets.clear()


def _make_tenant(db_session, slug):
    from coupongen.models.tenant import Tenant

    tenant = Tenant(slug=slug, name=slug.title())
    db_session.add(tenant)
    db_session.commit()
    db_session.refresh(tenant)
    return tenant


@pytest.fixture
def sample_tenant(db_session):
    """Create a sample tenant."""
    return _make_tenant(db_session, "acme")


@pytest.fixture
def other_tenant(db_session):
    """A second tenant for isolation checks."""
    return _make_tenant(db_session, "globex")


def _make_campaign(db_session, tenant, code, name="Spring promo", **overrides):
    from coupongen.models.campaign import Campaign, default_form_config

    values = dict(
        tenant_id=tenant.id,
        campaign_code=code,
        name=name,
        description="10% off the next visit",
        discount_type="percent",
        discount_value="10",
        is_active=True,
        form_config=default_form_config(),
    )
    values.update(overrides)
    campaign = Campaign(**values)
    db_session.add(campaign)
    db_session.commit()
    db_session.refresh(campaign)
    return campaign


@pytest.fixture
def make_campaign(db_session):
    """Factory for extra campaigns."""
    def factory(tenant, code, name="Spring promo", **overrides):
        return _make_campaign(db_session, tenant, code, name=name, **overrides)
    return factory


@pytest.fixture
def sample_campaign(db_session, sample_tenant):
    """Active percent campaign of the sample tenant."""
    return _make_campaign(db_session, sample_tenant, "SPRING2026AB")


@pytest.fixture
def make_user(db_session):
    """Factory for back-office users."""
    from coupongen.models.user import User
    from coupongen.routers.auth import get_password_hash

    def factory(username, role, tenant=None, password="testpass123"):
        user = User(
            tenant_id=tenant.id if tenant else None,
            username=username,
            hashed_password=get_password_hash(password),
            role=role.value,
            is_active=True,
        )
        db_session.add(user)
        db_session.commit()
        db_session.refresh(user)
        return user
    return factory


@pytest.fixture
def sample_user(make_user, sample_tenant):
    """Tenant admin of the sample tenant."""
    from coupongen.models.user import UserRole

    return make_user("acme-admin", UserRole.ADMIN, sample_tenant)


@pytest.fixture
def store_user(make_user, sample_tenant):
    from coupongen.models.user import UserRole

    return make_user("acme-store", UserRole.STORE, sample_tenant)


@pytest.fixture
def superadmin(make_user):
    from coupongen.models.user import UserRole

    return make_user("root", UserRole.SUPERADMIN)


@pytest.fixture
def auth_headers():
    """Build a bearer header for a user."""
    from coupongen.routers.auth import token_for_user

    def build(user):
        return {"Authorization": f"Bearer {token_for_user(user)}"}
    return build


@pytest.fixture
def client(db_session):
    """API client bound to the test session; lifespan (init_db) is not run."""
    from coupongen.main import app

    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()
