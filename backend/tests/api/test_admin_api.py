"""API tests for auth, superadmin and tenant admin endpoints."""
from coupongen.models.user import UserRole

API = "/api/v1"


class TestAuth:

    def test_login_and_me(self, client, sample_user):
        response = client.post(f"{API}/auth/token", data={"username": "acme-admin", "password": "testpass123"})
        assert response.status_code == 200
        token = response.json()["access_token"]

        me = client.get(f"{API}/auth/me", headers={"Authorization": f"Bearer {token}"})
        assert me.status_code == 200
        assert me.json()["username"] == "acme-admin"
        assert me.json()["role"] == "admin"

    def test_wrong_password(self, client, sample_user):
        response = client.post(f"{API}/auth/token", data={"username": "acme-admin", "password": "nope"})

        assert response.status_code == 401

    def test_garbage_token(self, client):
        response = client.get(f"{API}/auth/me", headers={"Authorization": "Bearer garbage"})

        assert response.status_code == 401


class TestSuperadmin:

    def test_create_and_list_tenants(self, client, superadmin, auth_headers):
        headers = auth_headers(superadmin)

        created = client.post(f"{API}/admin/tenants", json={"slug": "bistro", "name": "Bistro"}, headers=headers)
        assert created.status_code == 201

        slugs = [t["slug"] for t in client.get(f"{API}/admin/tenants", headers=headers).json()]
        assert "bistro" in slugs

    def test_invalid_slug(self, client, superadmin, auth_headers):
        response = client.post(f"{API}/admin/tenants", json={"slug": "Bad Slug"}, headers=auth_headers(superadmin))

        assert response.status_code == 422

    def test_tenant_admin_forbidden(self, client, sample_user, auth_headers):
        response = client.get(f"{API}/admin/tenants", headers=auth_headers(sample_user))

        assert response.status_code == 403

    def test_create_tenant_user(self, client, sample_tenant, superadmin, auth_headers):
        response = client.post(
            f"{API}/admin/tenants/{sample_tenant.id}/users",
            json={"username": "cashier", "password": "longenough", "role": "store"},
            headers=auth_headers(superadmin),
        )

        assert response.status_code == 201
        assert response.json()["tenant_id"] == str(sample_tenant.id)

    def test_purge_tenant(self, client, sample_tenant, sample_campaign, superadmin, auth_headers):
        response = client.delete(f"{API}/admin/tenants/{sample_tenant.id}", headers=auth_headers(superadmin))

        assert response.status_code == 200
        assert response.json()["deleted"]["campaigns"] == 1


class TestTenantAdminCampaigns:

    def _url(self, tenant, suffix=""):
        return f"{API}/t/{tenant.slug}/admin/campaigns{suffix}"

    def test_campaign_lifecycle(self, client, sample_tenant, sample_user, auth_headers):
        headers = auth_headers(sample_user)

        created = client.post(self._url(sample_tenant), headers=headers, json={
            "name": "Happy hour", "discount_type": "fixed", "discount_value": "3",
        })
        assert created.status_code == 201
        campaign = created.json()
        assert campaign["is_active"] is False

        activated = client.put(self._url(sample_tenant, f"/{campaign['id']}/activate"), headers=headers)
        assert activated.json()["is_active"] is True

        public = client.get(f"{API}/t/{sample_tenant.slug}/campaigns/{campaign['campaign_code']}")
        assert public.status_code == 200

        config = client.put(self._url(sample_tenant, f"/{campaign['id']}/form-config"), headers=headers, json={
            "phone": {"visible": True, "required": True},
            "customFields": [{"id": "table", "label": "Table number", "required": False}],
        })
        assert config.status_code == 200
        assert config.json()["phone"]["required"] is True

        listed = client.get(self._url(sample_tenant), headers=headers).json()
        assert [c["id"] for c in listed] == [campaign["id"]]

        deleted = client.delete(self._url(sample_tenant, f"/{campaign['id']}"), headers=headers)
        assert deleted.status_code == 200

    def test_update_with_nulls_and_blank_name(self, client, sample_tenant, sample_campaign, sample_user,
                                              auth_headers):
        headers = auth_headers(sample_user)
        url = self._url(sample_tenant, f"/{sample_campaign.id}")

        nulls = client.put(url, headers=headers, json={"discount_type": None})
        blank = client.put(url, headers=headers, json={"name": "   "})

        assert nulls.status_code == 400
        assert blank.status_code == 400
        assert blank.json()["detail"] == "Invalid campaign name"

    def test_invalid_discount(self, client, sample_tenant, sample_user, auth_headers):
        response = client.post(self._url(sample_tenant), headers=auth_headers(sample_user), json={
            "name": "Too much", "discount_type": "percent", "discount_value": "150",
        })

        assert response.status_code == 400

    def test_list_coupons(self, client, sample_tenant, sample_campaign, sample_user, auth_headers):
        client.post(f"{API}/t/{sample_tenant.slug}/submit", json={
            "email": "anna@example.com", "first_name": "Anna", "last_name": "Rossi",
            "campaign_code": sample_campaign.campaign_code,
        })

        response = client.get(f"{API}/t/{sample_tenant.slug}/admin/coupons?status=active",
                              headers=auth_headers(sample_user))

        assert response.status_code == 200
        assert len(response.json()) == 1


class TestStoreDesk:

    def test_lookup_and_redeem(self, client, sample_tenant, sample_campaign, store_user, auth_headers):
        issued = client.post(f"{API}/t/{sample_tenant.slug}/submit", json={
            "email": "anna@example.com", "first_name": "Anna", "last_name": "Rossi",
            "campaign_code": sample_campaign.campaign_code,
        }).json()
        headers = auth_headers(store_user)
        base = f"{API}/t/{sample_tenant.slug}/store/coupons/{issued['code']}"

        detail = client.get(base, headers=headers)
        assert detail.status_code == 200
        assert detail.json()["customer_email"] == "anna@example.com"
        assert detail.json()["customer_name"] == "Anna Rossi"
        assert detail.json()["campaign_name"] == sample_campaign.name

        first = client.post(f"{base}/redeem", headers=headers)
        second = client.post(f"{base}/redeem", headers=headers)
        assert first.status_code == 200
        assert first.json()["status"] == "redeemed"
        assert second.status_code == 400
        assert second.json()["detail"] == "Coupon already redeemed"

    def test_store_of_other_tenant(self, client, sample_tenant, other_tenant, make_user, auth_headers):
        outsider = make_user("globex-store", UserRole.STORE, other_tenant)

        response = client.get(f"{API}/t/{sample_tenant.slug}/store/coupons/ABC", headers=auth_headers(outsider))

        assert response.status_code == 403


class TestHealth:

    def test_health(self, client):
        assert client.get(f"{API}/health").json() == {"status": "healthy"}

    def test_ready(self, client):
        response = client.get(f"{API}/health/ready")

        assert response.status_code == 200
        assert response.json()["checks"]["database"] == "ok"
