"""
Tests for the users client, the partner helpers and the dashboard summary.
"""
import pytest

from ekraf_admin import config
from ekraf_admin.common.errors import ApiValidationError, AuthorizationError, NotFoundError
from ekraf_admin.dashboard.services import load_dashboard
from ekraf_admin.users.schemas import PartnerFilter, User
from ekraf_admin.users.services import filter_partners, summarize_partners


def _partner(user_id, name, verified):
    return User.model_validate({
        "id": user_id,
        "name": name,
        "email": f"{name.lower()}@umkm.test",
        "level": "umkm",
        "verifiedAt": "2024-03-01T08:00:00Z" if verified else None,
    })


class TestPartnerHelpers:
    """Test filtering and counting partners without the backend."""

    @pytest.fixture
    def partners(self):
        return [
            _partner(1, "Sari", True),
            _partner(2, "Budi", False),
            _partner(3, "Sarah", False),
        ]

    def test_active_is_derived_from_verification(self, partners):
        assert [p.is_active for p in partners] == [True, False, False]

    def test_filter_by_status(self, partners):
        assert [p.name for p in filter_partners(partners, PartnerFilter.ACTIVE)] == ["Sari"]
        assert [p.name for p in filter_partners(partners, "inactive")] == ["Budi", "Sarah"]
        assert len(filter_partners(partners, "all")) == 3

    def test_filter_by_name_is_case_insensitive(self, partners):
        assert [p.name for p in filter_partners(partners, query="  SAR ")] == ["Sari", "Sarah"]

    def test_filter_combines_status_and_query(self, partners):
        assert [p.name for p in filter_partners(partners, "inactive", "sar")] == ["Sarah"]

    def test_unknown_status(self, partners):
        with pytest.raises(ValueError):
            filter_partners(partners, "banned")

    def test_summary(self, partners):
        stats = summarize_partners(partners)
        assert (stats.total, stats.active, stats.inactive) == (3, 1, 2)


class TestUserSchema:
    def test_legacy_fields(self):
        user = User.model_validate({
            "id_user": 12,
            "nama_user": "Ani",
            "email": "ani@umkm.test",
            "id_level": 3,
            "tbl_level": {"level": "user"},
            "nohp": "0813",
        })

        assert user.id == "12"
        assert user.level_id == "3"
        assert user.phone_number == "0813"
        assert user.is_partner

    def test_admins_are_not_partners(self):
        admin = User(id="2", name="Admin", email="admin@ekraf.test", levels={"id": 2, "name": "admin"})
        assert not admin.is_partner

    def test_naive_verification_time_is_localized(self):
        user = User.model_validate({"id": 1, "name": "Ani", "email": "a@b.c",
                                    "verifiedAt": "2024-03-01 08:00:00"})
        assert user.verified_at.tzinfo is not None
        assert user.verified_at.hour == 8


class TestUsersService:
    """Test the users endpoints through the sandbox."""

    @pytest.mark.asyncio
    async def test_list_partners(self, admin_api):
        partners = await admin_api.users.list_partners()

        assert sorted(p.name for p in partners) == ["Budi Santoso", "Sari Wulandari"]
        sari = next(p for p in partners if p.name == "Sari Wulandari")
        assert sari.is_active
        assert sari.product_count == 3

    @pytest.mark.asyncio
    async def test_partner_screen_counts(self, admin_api):
        partners = await admin_api.users.list_partners()

        stats = summarize_partners(partners)
        inactive = filter_partners(partners, PartnerFilter.INACTIVE)

        assert (stats.total, stats.active, stats.inactive) == (2, 1, 1)
        assert [p.email for p in inactive] == ["budi@umkm.test"]

    @pytest.mark.asyncio
    async def test_partial_update_keeps_other_fields(self, admin_api, sandbox_state):
        response = await admin_api.users.update("3", {"business_name": "Kopi Sari Nusantara"})

        assert response.message == "User updated"
        stored = sandbox_state.users["3"]
        assert stored.business_name == "Kopi Sari Nusantara"
        assert stored.email == "sari@umkm.test"
        assert stored.phone_number == "081234567890"
        assert stored.is_partner

    @pytest.mark.asyncio
    async def test_update_with_blank_name(self, admin_api):
        with pytest.raises(ApiValidationError):
            await admin_api.users.update("3", {"name": ""})

    @pytest.mark.asyncio
    async def test_get_missing_user(self, admin_api):
        with pytest.raises(NotFoundError) as exc_info:
            await admin_api.users.get("999")
        assert exc_info.value.context == "fetching user #999"

    @pytest.mark.asyncio
    async def test_delete_user(self, admin_api, sandbox_state):
        await admin_api.users.delete("4")

        assert "4" not in sandbox_state.users
        with pytest.raises(NotFoundError):
            await admin_api.users.delete("4")

    @pytest.mark.asyncio
    async def test_partner_products(self, admin_api):
        products = await admin_api.users.list_products("3")
        assert len(products) == 3

    @pytest.mark.asyncio
    async def test_partner_articles(self, admin_api, sandbox_state):
        sandbox_state.add_article("3", title="Cerita Kopi Sari", content="Dari kebun ke cangkir")

        articles = await admin_api.users.list_articles("3")

        assert [a.title for a in articles] == ["Cerita Kopi Sari"]

    @pytest.mark.asyncio
    async def test_partners_cannot_list_users(self, api):
        await api.auth.login("sari@umkm.test", "sari12345", "umkm")

        with pytest.raises(AuthorizationError) as exc_info:
            await api.users.list()
        assert exc_info.value.status_code == 403


class TestDashboard:
    @pytest.mark.asyncio
    async def test_summary(self, admin_api):
        summary = await load_dashboard(admin_api)

        assert summary.partner_count == 2
        assert summary.product_count == 4
        assert summary.category_count == 3
        assert len(summary.recent_products) == 4
        assert len(summary.recent_partners) == 2
        assert summary.current_user.email == "admin@ekraf.test"

    @pytest.mark.asyncio
    async def test_product_page_follows_the_configured_size(self, admin_api, monkeypatch):
        monkeypatch.setattr(config, "DEFAULT_PAGE_SIZE", 2)

        summary = await load_dashboard(admin_api)

        assert summary.product_count == 2

    @pytest.mark.asyncio
    async def test_requires_admin_session(self, api):
        with pytest.raises(AuthorizationError):
            await load_dashboard(api)
