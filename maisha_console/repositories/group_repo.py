# maisha_console/repositories/group_repo.py
from datetime import datetime, timezone
from typing import Any

from maisha_console.core.api_client import ApiClient
from maisha_console.repositories.member_repo import parse_datetime
from maisha_console.schemas.group import Group, GroupCreate


def group_from_server(g: dict[str, Any]) -> Group:
    """Server group -> client Group."""
    return Group(
        id=str(g.get("id")),
        name=g.get("name") or "",
        description=g.get("description") or "",
        created_by=g.get("created_by"),
        created_at=parse_datetime(g.get("created_at")) or datetime.now(timezone.utc),
        member_count=0,
    )


def group_to_server(payload: GroupCreate) -> dict[str, Any]:
    return {
        "name": payload.name,
        "description": payload.description,
        "created_by": payload.created_by,
    }


class GroupRepository:
    """Group endpoints."""

    async def list(self, api: ApiClient) -> list[Group]:
        data = await api.get_list("groups")
        return [group_from_server(g) for g in data if isinstance(g, dict)]

    async def create(self, api: ApiClient, payload: GroupCreate) -> Group:
        g = await api.post("groups", group_to_server(payload))
        return group_from_server(g or {})

    async def delete(self, api: ApiClient, group_id: str) -> None:
        await api.delete(f"groups/{group_id}")
