# maisha_console/services/member_service.py
import logging
import time
from datetime import date

from maisha_console.core.api_client import ApiClient
from maisha_console.core.auth import AuthContext
from maisha_console.repositories.member_repo import MemberRepository, parse_date
from maisha_console.schemas.member import (
    CustomerInfo,
    Member,
    MemberWrite,
    gender_code,
)
from maisha_console.services.scope import FormError, require_member_in_scope

logger = logging.getLogger(__name__)


def info_gender_code(info: CustomerInfo | None) -> str:
    """The lookup may answer with a wire code or a label; accept both."""
    if info is None:
        return "OTHER"
    if info.gender in ("MALE", "FEMALE", "OTHER"):
        return info.gender
    return gender_code(info.gender)


def generated_national_id() -> str:
    return f"ID{int(time.time() * 1000)}"


class MemberService:
    """Members page: scoped listing, add (with phone lookup), edit."""

    def __init__(self, repo: MemberRepository):
        self.repo = repo

    async def list_members(
        self,
        api: ApiClient,
        auth: AuthContext,
        group_id: int | None,
    ) -> list[Member]:
        """
        Members visible to the session.

        super_admin without a selected group sees everyone; other staff are
        always restricted to their group.
        """
        if group_id is None and not auth.has_role({"super_admin"}):
            return []
        return await self.repo.list(api, group_id)

    async def lookup(self, api: ApiClient, phone: str) -> CustomerInfo | None:
        if not phone.strip():
            return None
        return await self.repo.customer_info(api, phone.strip())

    async def add_member(
        self,
        api: ApiClient,
        auth: AuthContext,
        *,
        phone: str,
        group_id: int | None,
        first_name: str = "",
        last_name: str = "",
        birth_date: date | None = None,
        gender: str | None = None,
        national_id: str = "",
        is_active: bool = True,
    ) -> Member:
        """
        Create a member, pre-filling blanks from the phone lookup.

        Raises:
            FormError: no group selected, or names missing and the lookup
                found nobody.
            ApiError: the backend rejected the lookup or the creation.
        """
        if group_id is None:
            raise FormError("Please select a group")
        if not auth.can_access_group(group_id):
            raise FormError("You cannot add members to this group")

        info = await self.lookup(api, phone)
        if info is None and not (first_name and last_name):
            raise FormError(
                "No member found with this phone number. Please fill name fields."
            )

        payload = MemberWrite(
            first_name=first_name or (info.first_name if info else ""),
            last_name=last_name or (info.last_name if info else ""),
            birth_date=birth_date or parse_date(info.birth_date if info else None),
            gender_code=gender or info_gender_code(info),
            is_active=is_active,
            national_id=national_id or generated_national_id(),
            phone=phone.strip(),
            group_id=group_id,
        )
        member = await self.repo.create(api, payload)
        logger.info("Member %s added to group %s", member.id, group_id)
        return member

    async def update_member(
        self,
        api: ApiClient,
        auth: AuthContext,
        member_id: str,
        payload: MemberWrite,
    ) -> Member:
        """
        Save an edited member.

        Staff may only edit members currently in their own group, and only
        keep them there.

        Raises:
            FormError: the target group is outside the user's scope.
            HTTPException(403): the member is not in the user's group.
        """
        if not auth.can_access_group(payload.group_id):
            raise FormError("You cannot move members into this group")
        await require_member_in_scope(api, auth, payload.group_id, member_id)
        return await self.repo.update(api, member_id, payload)
