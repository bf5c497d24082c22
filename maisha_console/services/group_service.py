# maisha_console/services/group_service.py
import asyncio
import logging

from maisha_console.core.api_client import ApiClient
from maisha_console.core.auth import AuthContext
from maisha_console.repositories.group_repo import GroupRepository
from maisha_console.repositories.member_repo import MemberRepository
from maisha_console.repositories.wallet_repo import WalletRepository
from maisha_console.schemas.group import Group, GroupCreate
from maisha_console.schemas.member import Member

logger = logging.getLogger(__name__)

SORT_KEYS = ("name", "members", "newest")


def filter_and_sort_groups(groups: list[Group], query: str = "", sort: str = "name") -> list[Group]:
    """
    Client-side search and ordering for the groups table.

    - query matches name or description, case-insensitive
    - sort: "name" (A-Z), "members" (most first), "newest" (created_at desc)
    """
    q = query.strip().lower()
    if q:
        groups = [g for g in groups if q in g.name.lower() or q in g.description.lower()]
    if sort == "members":
        return sorted(groups, key=lambda g: g.member_count, reverse=True)
    if sort == "newest":
        return sorted(groups, key=lambda g: g.created_at, reverse=True)
    return sorted(groups, key=lambda g: g.name.lower())


class GroupService:
    """Groups page: scoped listing with member counts and wallet totals."""

    def __init__(
        self,
        repo: GroupRepository,
        members: MemberRepository,
        wallets: WalletRepository,
    ):
        self.repo = repo
        self.members = members
        self.wallets = wallets

    async def list_groups(
        self,
        api: ApiClient,
        auth: AuthContext,
        query: str = "",
        sort: str = "name",
    ) -> list[Group]:
        groups, members = await asyncio.gather(
            self.repo.list(api),
            self.members.list(api),
        )
        groups = [g for g in groups if auth.can_access_group(g.id)]
        wallet_lists = await asyncio.gather(
            *(self.wallets.list_group_wallets(api, int(g.id)) for g in groups)
        )
        for group, wallets in zip(groups, wallet_lists):
            group.member_count = sum(1 for m in members if m.group_id == group.id)
            group.total_wallet_balance = sum(w.balance for w in wallets)
        return filter_and_sort_groups(groups, query, sort)

    async def create_group(
        self,
        api: ApiClient,
        auth: AuthContext,
        name: str,
        description: str | None,
    ) -> Group:
        payload = GroupCreate(
            name=name,
            description=description or None,
            created_by=auth.user.email,
        )
        group = await self.repo.create(api, payload)
        logger.info("Group %s created by %s", group.id, auth.user.email)
        return group

    async def delete_group(self, api: ApiClient, auth: AuthContext, group_id: str) -> None:
        await self.repo.delete(api, group_id)
        logger.info("Group %s deleted by %s", group_id, auth.user.email)

    async def group_members(self, api: ApiClient, group_id: str) -> list[Member]:
        return await self.members.list(api, group_id)
