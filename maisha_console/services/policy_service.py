# maisha_console/services/policy_service.py
from maisha_console.core.api_client import ApiClient
from maisha_console.repositories.policy_repo import GroupPolicyRepository
from maisha_console.schemas.policy import GroupPolicy, GroupPolicyUpdate


class GroupPolicyService:
    def __init__(self, repo: GroupPolicyRepository):
        self.repo = repo

    async def get(self, api: ApiClient, group_id: int) -> GroupPolicy:
        return await self.repo.get(api, group_id)

    async def update(self, api: ApiClient, group_id: int, payload: GroupPolicyUpdate) -> None:
        await self.repo.update(api, group_id, payload)
