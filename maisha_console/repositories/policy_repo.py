# maisha_console/repositories/policy_repo.py
from maisha_console.core.api_client import ApiClient
from maisha_console.schemas.policy import GroupPolicy, GroupPolicyUpdate


class GroupPolicyRepository:
    async def get(self, api: ApiClient, group_id: int) -> GroupPolicy:
        data = await api.get(f"group-policy/{group_id}")
        if not isinstance(data, dict):
            data = {}
        return GroupPolicy.model_validate({**data, "group_id": group_id})

    async def update(self, api: ApiClient, group_id: int, payload: GroupPolicyUpdate) -> None:
        await api.put(f"group-policy/{group_id}", payload.to_payload())
