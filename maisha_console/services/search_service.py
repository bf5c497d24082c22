# maisha_console/services/search_service.py
import asyncio
from dataclasses import dataclass, field

from maisha_console.core.api_client import ApiClient
from maisha_console.core.auth import AuthContext
from maisha_console.core.permissions import Feature, navigation_for
from maisha_console.repositories.group_repo import GroupRepository
from maisha_console.repositories.member_repo import MemberRepository
from maisha_console.schemas.group import Group
from maisha_console.schemas.member import Member

MAX_RESULTS = 5


@dataclass
class SearchResults:
    pages: list[Feature] = field(default_factory=list)
    groups: list[Group] = field(default_factory=list)
    members: list[Member] = field(default_factory=list)


class SearchService:
    """Command palette: pages, groups and members matching a query."""

    def __init__(self, groups: GroupRepository, members: MemberRepository):
        self.groups = groups
        self.members = members

    async def search(self, api: ApiClient, auth: AuthContext, query: str) -> SearchResults:
        q = query.strip().lower()
        pages = [f for f in navigation_for(auth.user) if not q or q in f.title.lower()]
        results = SearchResults(pages=pages)
        if not q:
            return results

        want_groups = auth.can("groups")
        want_members = auth.can("members")
        if not (want_groups or want_members):
            return results

        # members of another group never show up for scoped staff
        member_scope = None if auth.has_role({"super_admin"}) else auth.user.group_id
        if want_members and member_scope is None and not auth.has_role({"super_admin"}):
            want_members = False

        groups, members = await asyncio.gather(
            self.groups.list(api) if want_groups else _empty(),
            self.members.list(api, member_scope) if want_members else _empty(),
        )
        results.groups = [
            g for g in groups
            if auth.can_access_group(g.id) and q in g.name.lower()
        ][:MAX_RESULTS]
        results.members = [
            m for m in members
            if q in m.full_name.lower() or q in (m.phone or "")
        ][:MAX_RESULTS]
        return results


async def _empty() -> list:
    return []
