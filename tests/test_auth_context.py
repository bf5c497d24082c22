"""Auth Context: session lifecycle and role/group predicates."""

import json

import httpx
import pytest

from maisha_console.core.auth import AuthContext, AuthState
from maisha_console.core.storage import TOKEN_KEY, USER_KEY, ClientStorage
from maisha_console.schemas.auth import AuthUser


def _context(storage, api, user=None):
    ctx = AuthContext(storage, api)
    if user is not None:
        storage.set(USER_KEY, json.dumps(user))
    ctx.restore()
    return ctx


class TestRestore:
    def test_empty_storage_is_anonymous_and_ready(self, storage, api):
        ctx = AuthContext(storage, api)
        assert ctx.state is AuthState.UNINITIALIZED
        assert not ctx.is_ready
        ctx.restore()
        assert ctx.state is AuthState.ANONYMOUS
        assert ctx.is_ready
        assert ctx.user is None

    def test_stored_user_is_restored(self, storage, api):
        ctx = _context(storage, api, {"id": 4, "email": "a@b.rw", "role": "group_admin", "group_id": 2})
        assert ctx.state is AuthState.AUTHENTICATED
        assert ctx.user.group_id == 2

    def test_malformed_stored_user_is_discarded(self, storage, api):
        storage.set(USER_KEY, "{not json")
        ctx = AuthContext(storage, api)
        ctx.restore()
        assert ctx.user is None
        assert ctx.state is AuthState.ANONYMOUS

    def test_unknown_role_is_dropped(self, storage, api):
        ctx = _context(storage, api, {"id": 1, "role": "owner"})
        assert ctx.user.role is None
        assert not ctx.can("dashboard")


class TestLogin:
    @pytest.mark.asyncio
    async def test_success_persists_user_and_token(self, storage, api, backend):
        backend.on(
            "POST",
            "/api/auth/login",
            {"user": {"id": 9, "name": "Eric", "email": "eric@maisha.rw", "role": "super_admin"}, "token": "jwt"},
        )
        ctx = _context(storage, api)

        assert await ctx.login("eric@maisha.rw", "pw") is True
        assert ctx.is_authenticated
        assert storage.get(TOKEN_KEY) == "jwt"
        assert AuthUser.model_validate_json(storage.get(USER_KEY)).email == "eric@maisha.rw"
        assert backend.body("POST", "/api/auth/login") == {"email": "eric@maisha.rw", "password": "pw"}

    @pytest.mark.asyncio
    async def test_failure_returns_false_and_changes_nothing(self, storage, api, backend):
        backend.on("POST", "/api/auth/login", httpx.Response(401, text="Invalid credentials"))
        ctx = _context(storage, api)

        assert await ctx.login("bad@x.com", "wrong") is False
        assert ctx.user is None
        assert storage.get(USER_KEY) is None
        assert storage.get(TOKEN_KEY) is None

    @pytest.mark.asyncio
    async def test_body_without_user_is_a_failure(self, storage, api, backend):
        backend.on("POST", "/api/auth/login", {"token": "jwt"})
        ctx = _context(storage, api)
        assert await ctx.login("a@b.rw", "pw") is False
        assert storage.get(TOKEN_KEY) is None

    @pytest.mark.asyncio
    async def test_network_failure_never_raises(self, storage, api, backend):
        def boom(request):
            raise httpx.ConnectError("down", request=request)

        backend.on("POST", "/api/auth/login", boom)
        ctx = _context(storage, api)
        assert await ctx.login("a@b.rw", "pw") is False

    @pytest.mark.asyncio
    async def test_register_success(self, storage, api, backend):
        backend.on(
            "POST",
            "/api/auth/register",
            {"user": {"id": 2, "name": "New", "email": "new@maisha.rw"}, "token": "t2"},
        )
        ctx = _context(storage, api)
        assert await ctx.register("New", "new@maisha.rw", "secret1") is True
        assert ctx.user.role is None
        assert storage.get(TOKEN_KEY) == "t2"


class TestLogout:
    def test_clears_both_slots(self, storage, api):
        storage.set(TOKEN_KEY, "t")
        ctx = _context(storage, api, {"id": 1, "role": "member"})
        ctx.logout()
        assert ctx.user is None
        assert storage.get(USER_KEY) is None
        assert storage.get(TOKEN_KEY) is None

    def test_idempotent_when_anonymous(self, storage, api):
        ctx = _context(storage, api)
        ctx.logout()
        ctx.logout()
        assert ctx.state is AuthState.ANONYMOUS


class TestHasRole:
    def test_empty_roles_is_false(self, storage, api):
        ctx = _context(storage, api, {"id": 1, "role": "super_admin"})
        assert ctx.has_role([]) is False

    def test_no_session_is_false(self, storage, api):
        assert _context(storage, api).has_role(["super_admin", "member"]) is False

    def test_membership(self, storage, api):
        ctx = _context(storage, api, {"id": 1, "role": "group_user", "group_id": 3})
        assert ctx.has_role(["group_user"])
        assert not ctx.has_role(["group_admin", "super_admin"])


class TestCanAccessGroup:
    @pytest.mark.parametrize("group_id", [1, "1", 2, "99", None])
    def test_super_admin_any_group(self, api, group_id):
        ctx = _context(ClientStorage({}), api, {"id": 1, "role": "super_admin", "group_id": 1})
        assert ctx.can_access_group(group_id) is True

    @pytest.mark.parametrize("role", ["group_admin", "group_user"])
    def test_staff_only_own_group(self, api, role):
        ctx = _context(ClientStorage({}), api, {"id": 1, "role": role, "group_id": 3})
        assert ctx.can_access_group(3)
        assert ctx.can_access_group("3")
        assert not ctx.can_access_group(4)
        assert not ctx.can_access_group(None)

    def test_staff_without_group_sees_nothing(self, storage, api):
        ctx = _context(storage, api, {"id": 1, "role": "group_admin"})
        assert not ctx.can_access_group(1)

    def test_member_never(self, storage, api):
        ctx = _context(storage, api, {"id": 1, "role": "member", "group_id": 3})
        assert not ctx.can_access_group(3)

    def test_anonymous_never(self, storage, api):
        assert not _context(storage, api).can_access_group(1)
