"""Tests for tenant management."""
import pytest

from coupongen.errors import NotFoundError, ValidationError
from coupongen.models.campaign import Campaign
from coupongen.models.coupon import Coupon, Customer
from coupongen.models.form_link import FormLink
from coupongen.models.tenant import Tenant
from coupongen.models.user import UserRole
from coupongen.schemas.coupon import SubmissionCreate
from coupongen.services import tenants as tenant_service
from coupongen.services.form_links import FormLinkService
from coupongen.services.submissions import SubmissionService


class TestTenantRegistry:

    def test_create_and_resolve(self, db_session):
        tenant = tenant_service.create_tenant(db_session, "Pizzeria-Uno")

        assert tenant.slug == "pizzeria-uno"
        assert tenant_service.get_tenant_by_slug(db_session, "pizzeria-uno").id == tenant.id

    @pytest.mark.parametrize("slug", ["", "with space", "under_score", "x" * 101])
    def test_invalid_slug(self, db_session, slug):
        with pytest.raises(ValidationError):
            tenant_service.create_tenant(db_session, slug)

    def test_duplicate_slug(self, db_session, sample_tenant):
        with pytest.raises(ValidationError):
            tenant_service.create_tenant(db_session, sample_tenant.slug)

    def test_unknown_slug(self, db_session):
        with pytest.raises(NotFoundError):
            tenant_service.get_tenant_by_slug(db_session, "nobody")

    def test_ensure_default_is_idempotent(self, db_session):
        first = tenant_service.ensure_default_tenant(db_session, "default", "Default")
        second = tenant_service.ensure_default_tenant(db_session, "default", "Default")

        assert first.id == second.id

    def test_user_roles(self, db_session, sample_tenant):
        user = tenant_service.create_tenant_user(db_session, sample_tenant.id, "cashier", "hash", UserRole.STORE)
        assert user.role == "store"

        with pytest.raises(ValidationError):
            tenant_service.create_tenant_user(db_session, sample_tenant.id, "boss", "hash", UserRole.SUPERADMIN)
        with pytest.raises(ValidationError):
            tenant_service.create_tenant_user(db_session, sample_tenant.id, "cashier", "hash", UserRole.ADMIN)


class TestPurgeTenant:

    def test_purge_removes_only_that_tenant(self, db_session, sample_tenant, sample_campaign,
                                            other_tenant, make_campaign, sample_user):
        other_campaign = make_campaign(other_tenant, "OTHER2026ABC")
        token = FormLinkService(db_session, sample_tenant.id).generate_links(sample_campaign.id, 2)[0].token
        SubmissionService(db_session, sample_tenant.id).submit_form(
            SubmissionCreate(email="a@example.com", first_name="A", last_name="B", form_token=token)
        )
        FormLinkService(db_session, other_tenant.id).generate_links(other_campaign.id, 1)

        result = tenant_service.purge_tenant(db_session, sample_tenant.id)

        assert result.deleted["form_links"] == 2
        assert result.deleted["coupons"] == 1
        assert result.deleted["customers"] == 1
        assert result.deleted["campaigns"] == 1
        assert result.deleted["users"] == 1
        assert db_session.query(Tenant).count() == 1
        assert db_session.query(FormLink).count() == 1
        assert db_session.query(Campaign).count() == 1
        assert db_session.query(Coupon).count() == 0
        assert db_session.query(Customer).count() == 0

    def test_purge_unknown(self, db_session):
        import uuid

        with pytest.raises(NotFoundError):
            tenant_service.purge_tenant(db_session, uuid.uuid4())
