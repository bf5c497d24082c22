# maisha_console/services/scope.py
from collections.abc import Awaitable, Callable, Iterable
from typing import Any

from fastapi import HTTPException, status

from maisha_console.core.api_client import ApiClient
from maisha_console.core.auth import AuthContext
from maisha_console.repositories.deduction_repo import DeductionRepository
from maisha_console.repositories.group_repo import GroupRepository
from maisha_console.repositories.member_repo import MemberRepository
from maisha_console.repositories.withdrawal_repo import WithdrawalRepository
from maisha_console.schemas.group import Group

_groups = GroupRepository()
_members = MemberRepository()
_deductions = DeductionRepository()
_withdrawals = WithdrawalRepository()


class FormError(ValueError):
    """A form failed validation before any backend call was made."""


def scoped_group_id(auth: AuthContext, requested: int | str | None = None) -> int | None:
    """
    Resolve which group a group-scoped page works on.

    Rules:
      - an explicit `requested` group must pass `can_access_group`
      - otherwise the session's own group_id
      - None when neither exists (a super_admin without a home group must
        pick one)

    Raises:
        HTTPException(403): if `requested` is outside the user's scope.
    """
    if requested not in (None, ""):
        if not auth.can_access_group(requested):
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="You cannot access this group",
            )
        try:
            return int(requested)
        except (TypeError, ValueError):
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Invalid group id",
            )
    if auth.user is not None and auth.user.group_id is not None:
        return auth.user.group_id
    return None


def initiated_by(auth: AuthContext) -> str:
    """Acting role recorded on wallet operations."""
    role = auth.user.role if auth.user else None
    if role in ("super_admin", "group_user"):
        return role
    return "group_admin"


async def group_choices(api: ApiClient, auth: AuthContext) -> list[Group]:
    """Groups offered in the group selector; only super_admin gets one."""
    if not auth.has_role({"super_admin"}):
        return []
    return await _groups.list(api)


def _forbidden(detail: str) -> HTTPException:
    return HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=detail)


async def _require_listed(
    auth: AuthContext,
    group_id: int | None,
    record_id: int | str,
    load: Callable[[], Awaitable[Iterable[Any]]],
    detail: str,
) -> None:
    if auth.has_role({"super_admin"}):
        return
    if group_id is None or not auth.can_access_group(group_id):
        raise _forbidden(detail)
    records = await load()
    if not any(str(r.id) == str(record_id) for r in records):
        raise _forbidden(detail)


async def require_member_in_scope(
    api: ApiClient, auth: AuthContext, group_id: int | None, member_id: int | str
) -> None:
    """
    Guard for operations addressed by member id.

    super_admin passes; anyone else needs the member to be listed in
    `group_id`, which must itself be within their scope.

    Raises:
        HTTPException(403): the member is outside the user's groups.
    """
    await _require_listed(
        auth,
        group_id,
        member_id,
        lambda: _members.list(api, group_id),
        "You cannot access this member",
    )


async def require_deduction_in_scope(
    api: ApiClient, auth: AuthContext, group_id: int | None, deduction_id: int
) -> None:
    await _require_listed(
        auth,
        group_id,
        deduction_id,
        lambda: _deductions.list(api, group_id),
        "You cannot access this deduction",
    )


async def require_withdrawal_in_scope(
    api: ApiClient, auth: AuthContext, group_id: int | None, withdrawal_id: int
) -> None:
    await _require_listed(
        auth,
        group_id,
        withdrawal_id,
        lambda: _withdrawals.list_by_group(api, group_id),
        "You cannot access this withdrawal",
    )
