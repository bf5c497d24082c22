"""Page services: dashboards, groups, members, bulk import, portal, search."""

import httpx
import pytest
from fastapi import HTTPException

from maisha_console.core.api_client import ApiError
from maisha_console.core.auth import AuthContext
from maisha_console.core.storage import USER_KEY
from maisha_console.repositories.deduction_repo import DeductionRepository
from maisha_console.repositories.group_repo import GroupRepository, group_from_server
from maisha_console.repositories.member_repo import MemberRepository
from maisha_console.repositories.report_repo import ReportRepository
from maisha_console.repositories.wallet_repo import WalletRepository
from maisha_console.repositories.withdrawal_repo import WithdrawalRepository
from maisha_console.schemas.auth import AuthUser
from maisha_console.schemas.member import MemberWrite
from maisha_console.services.dashboard_service import DashboardService, select_dashboard
from maisha_console.services.group_service import GroupService, filter_and_sort_groups
from maisha_console.services.member_service import MemberService
from maisha_console.services.portal_service import MemberPortalService
from maisha_console.services.scope import FormError
from maisha_console.services.search_service import SearchService
from maisha_console.services.upload_service import UploadService


def _auth(storage, api, role, group_id=None, email="admin@maisha.rw"):
    storage.set(
        USER_KEY,
        AuthUser(id=1, name="Admin", email=email, role=role, group_id=group_id).model_dump_json(),
    )
    auth = AuthContext(storage, api)
    auth.restore()
    return auth


def _member(mid, group_id, first="Aline", last="Uwase", phone="250788000111"):
    return {
        "id": mid, "first_name": first, "last_name": last, "gender": "FEMALE",
        "is_active": True, "phone": phone, "group_id": group_id,
        "created_at": "2024-01-01T00:00:00Z",
    }


def _dashboards():
    return DashboardService(
        GroupRepository(), MemberRepository(), WalletRepository(),
        WithdrawalRepository(), DeductionRepository(), ReportRepository(),
    )


class TestDashboard:
    @pytest.mark.parametrize(
        "role,variant",
        [("super_admin", "super_admin"), ("group_admin", "group_admin"),
         ("group_user", "group_user"), ("member", "member"), (None, "fallback"), ("owner", "fallback")],
    )
    def test_one_variant_per_role(self, role, variant):
        assert select_dashboard(role) == variant

    @pytest.mark.asyncio
    async def test_super_admin_counts(self, storage, api, backend):
        backend.on("GET", "/api/groups", [{"id": 1, "name": "A"}, {"id": 2, "name": "B"}])
        backend.on("GET", "/api/members", [_member(1, 1), _member(2, 2), _member(3, 2)])
        view = await _dashboards().build(api, _auth(storage, api, "super_admin"))
        assert view.stats == {"total_groups": 2, "total_members": 3}

    @pytest.mark.asyncio
    async def test_group_admin_stats(self, storage, api, backend):
        backend.on("GET", "/api/members", [_member(1, 3), _member(2, 3)])
        backend.on("GET", "/api/wallets/group/3", [{"member_id": 1, "balance": 1500}, {"member_id": 2, "balance": 500.5}])
        backend.on("GET", "/api/withdrawals/group/3", [
            {"id": 1, "amount": 100, "status": "pending"},
            {"id": 2, "amount": 100, "status": "approved"},
        ])
        backend.on("GET", "/api/deductions/group/3", [
            {"id": 1, "group_id": 3, "name": "Rent", "amount": 10, "account_number": "1", "is_active": True},
            {"id": 2, "group_id": 3, "name": "Old", "amount": 10, "account_number": "2", "is_active": False},
        ])
        view = await _dashboards().build(api, _auth(storage, api, "group_admin", 3))
        assert view.stats == {
            "group_members": 2,
            "total_wallet_balance": 2000.5,
            "pending_withdrawals": 1,
            "active_deductions": 1,
        }

    @pytest.mark.asyncio
    async def test_partial_wallet_rows_still_load(self, storage, api, backend):
        backend.on("GET", "/api/members", [_member(1, 1)])
        backend.on("GET", "/api/wallets/group/1", [{"id": 1, "balance": None}, {"member_id": 1, "balance": 300}])
        backend.on("GET", "/api/withdrawals/group/1", [{"status": "pending"}])
        backend.on("GET", "/api/deductions/group/1", [{"id": 1, "amount": None}])
        view = await _dashboards().build(api, _auth(storage, api, "group_admin", 1))
        assert view.stats["total_wallet_balance"] == 300
        assert view.stats["pending_withdrawals"] == 1
        assert view.stats["active_deductions"] == 1

    @pytest.mark.asyncio
    async def test_one_failed_call_fails_the_view(self, storage, api, backend):
        backend.on("GET", "/api/members", [_member(1, 3)])
        backend.on("GET", "/api/wallets/group/3", httpx.Response(500, text="boom"))
        with pytest.raises(ApiError):
            await _dashboards().build(api, _auth(storage, api, "group_user", 3))

    @pytest.mark.asyncio
    async def test_fallback_makes_no_calls(self, storage, api, backend):
        view = await _dashboards().build(api, _auth(storage, api, None))
        assert view.template == "dashboard/fallback.html"
        assert backend.calls == []


class TestGroups:
    def _groups(self):
        return [
            group_from_server({"id": 1, "name": "beta", "description": "farmers", "created_at": "2024-01-01"}),
            group_from_server({"id": 2, "name": "Alpha", "description": "", "created_at": "2024-03-01"}),
        ]

    def test_search_and_sort(self):
        groups = self._groups()
        groups[0].member_count = 5
        assert [g.name for g in filter_and_sort_groups(groups)] == ["Alpha", "beta"]
        assert [g.name for g in filter_and_sort_groups(groups, sort="members")] == ["beta", "Alpha"]
        assert [g.name for g in filter_and_sort_groups(groups, sort="newest")] == ["Alpha", "beta"]
        assert [g.name for g in filter_and_sort_groups(groups, query="FARM")] == ["beta"]

    @pytest.mark.asyncio
    async def test_list_counts_members_and_wallets_within_scope(self, storage, api, backend):
        backend.on("GET", "/api/groups", [{"id": 1, "name": "Mine"}, {"id": 2, "name": "Other"}])
        backend.on("GET", "/api/members", [_member(1, 1), _member(2, 1), _member(3, 2)])
        backend.on("GET", "/api/wallets/group/1", [{"member_id": 1, "balance": 100}, {"member_id": 2, "balance": 50}])
        service = GroupService(GroupRepository(), MemberRepository(), WalletRepository())

        groups = await service.list_groups(api, _auth(storage, api, "group_admin", 1))

        assert [(g.name, g.member_count, g.total_wallet_balance) for g in groups] == [("Mine", 2, 150)]

    @pytest.mark.asyncio
    async def test_create_records_session_email(self, storage, api, backend):
        backend.on("POST", "/api/groups", {"id": 7, "name": "New", "created_at": "2024-01-01"})
        service = GroupService(GroupRepository(), MemberRepository(), WalletRepository())
        await service.create_group(api, _auth(storage, api, "super_admin"), " New ", "")
        assert backend.body("POST", "/api/groups") == {
            "name": "New", "description": None, "created_by": "admin@maisha.rw",
        }


class TestMembers:
    @pytest.mark.asyncio
    async def test_add_prefills_from_lookup(self, storage, api, backend):
        backend.on("GET", "/api/customer-info", {"firstName": "Jean", "lastName": "Mugabo", "birthDate": "1985-02-03", "gender": "MALE"})
        backend.on("POST", "/api/members", _member(9, 3, "Jean", "Mugabo"))

        await MemberService(MemberRepository()).add_member(
            api, _auth(storage, api, "group_admin", 3), phone="250788000999", group_id=3
        )

        body = backend.body("POST", "/api/members")
        assert body["first_name"] == "Jean"
        assert body["last_name"] == "Mugabo"
        assert body["birth_date"] == "1985-02-03"
        assert body["gender"] == "MALE"
        assert body["group_id"] == 3
        assert body["national_id"].startswith("ID")

    @pytest.mark.asyncio
    async def test_add_without_lookup_or_names_is_rejected(self, storage, api, backend):
        backend.on("GET", "/api/customer-info", httpx.Response(204))
        with pytest.raises(FormError):
            await MemberService(MemberRepository()).add_member(
                api, _auth(storage, api, "group_admin", 3), phone="0788", group_id=3
            )
        assert ("POST", "/api/members") not in [(c.method, c.url.path) for c in backend.calls]

    @pytest.mark.asyncio
    async def test_add_to_foreign_group_is_rejected(self, storage, api, backend):
        with pytest.raises(FormError):
            await MemberService(MemberRepository()).add_member(
                api, _auth(storage, api, "group_user", 3), phone="0788", group_id=4,
                first_name="A", last_name="B",
            )
        assert backend.calls == []

    @pytest.mark.asyncio
    async def test_update_of_member_from_another_group_is_refused(self, storage, api, backend):
        backend.on("GET", "/api/members", [_member(5, 1)])
        payload = MemberWrite(first_name="A", last_name="B", group_id=1)
        with pytest.raises(HTTPException) as exc:
            await MemberService(MemberRepository()).update_member(
                api, _auth(storage, api, "group_admin", 1), "77", payload
            )
        assert exc.value.status_code == 403
        assert ("PUT", "/api/members/77") not in [(c.method, c.url.path) for c in backend.calls]

    @pytest.mark.asyncio
    async def test_update_of_own_member(self, storage, api, backend):
        backend.on("GET", "/api/members", [_member(5, 1)])
        backend.on("PUT", "/api/members/5", _member(5, 1, first="Alice"))
        payload = MemberWrite(first_name="Alice", last_name="Uwase", group_id=1)
        member = await MemberService(MemberRepository()).update_member(
            api, _auth(storage, api, "group_admin", 1), "5", payload
        )
        assert member.first_name == "Alice"
        assert backend.body("PUT", "/api/members/5")["group_id"] == 1
        assert backend.calls == []


class TestBulkImport:
    @pytest.mark.asyncio
    async def test_failures_are_collected_per_row(self, api, backend):
        def lookup(request):
            if request.url.params["phone"] == "250711111111":
                return httpx.Response(200, json={"firstName": "", "lastName": "", "birthDate": "1990-01-01T00:00:00Z", "gender": "Female"})
            return httpx.Response(404, text="Customer not found")

        backend.on("GET", "/api/customer-info", lookup)
        backend.on("POST", "/api/members", _member(1, 2))

        result = await UploadService(MemberRepository()).import_members(
            api, "Phone Numbers\n0711111111\n0722222222\n", 2
        )

        assert result.success == 1
        assert result.failed == ["0722222222"]
        body = backend.body("POST", "/api/members")
        assert body["first_name"] == "Unknown"
        assert body["last_name"] == "User"
        assert body["gender"] == "FEMALE"
        assert body["phone"] == "250711111111"
        assert body["birth_date"] == "1990-01-01"

    @pytest.mark.asyncio
    async def test_unusable_lookup_answers_fail_only_their_row(self, api, backend):
        def lookup(request):
            phone = request.url.params["phone"]
            if phone == "250711111111":
                return httpx.Response(200, json=["not", "an", "object"])
            if phone == "250722222222":
                return httpx.Response(200, json={"firstName": "A" * 150, "lastName": "B"})
            return httpx.Response(200, json={"firstName": "Eric", "lastName": "Mugisha"})

        backend.on("GET", "/api/customer-info", lookup)
        backend.on("POST", "/api/members", _member(1, 2))

        result = await UploadService(MemberRepository()).import_members(
            api, "0711111111\n0722222222\n0733333333\n", 2
        )

        assert result.success == 1
        assert result.failed == ["0711111111", "0722222222"]
        assert backend.body("POST", "/api/members")["first_name"] == "Eric"

    @pytest.mark.asyncio
    async def test_requires_group_and_numbers(self, api):
        service = UploadService(MemberRepository())
        with pytest.raises(FormError):
            await service.import_members(api, "0711111111", None)
        with pytest.raises(FormError):
            await service.import_members(api, "Phone Numbers\n", 1)


class TestMemberPortal:
    @pytest.mark.asyncio
    async def test_phone_defaults_to_member_phone(self, api, backend):
        backend.on("GET", "/api/reports/my", {"member": {"id": 4, "phone": "250788123456"}})
        backend.on("POST", "/api/withdrawals", {"id": 1})

        await MemberPortalService(ReportRepository(), WithdrawalRepository()).request_withdrawal(api, 2000)

        assert backend.body("POST", "/api/withdrawals") == {
            "member_id": 4, "amount": 2000.0, "phone": "250788123456",
        }


class TestSearch:
    @pytest.mark.asyncio
    async def test_caps_results_at_five(self, storage, api, backend):
        backend.on("GET", "/api/groups", [{"id": i, "name": f"Group {i}"} for i in range(8)])
        backend.on("GET", "/api/members", [_member(i, 1, first=f"Gro{i}") for i in range(8)])
        results = await SearchService(GroupRepository(), MemberRepository()).search(
            api, _auth(storage, api, "super_admin"), "gro"
        )
        assert len(results.groups) == 5
        assert len(results.members) == 5
        assert [p.key for p in results.pages] == ["groups"]

    @pytest.mark.asyncio
    async def test_member_role_gets_pages_only(self, storage, api, backend):
        results = await SearchService(GroupRepository(), MemberRepository()).search(
            api, _auth(storage, api, "member"), "wallet"
        )
        assert [p.key for p in results.pages] == ["member_portal"]
        assert backend.calls == []
