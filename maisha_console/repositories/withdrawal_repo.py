# maisha_console/repositories/withdrawal_repo.py
from maisha_console.core.api_client import ApiClient
from maisha_console.schemas.withdrawal import (
    WithdrawalCreate,
    WithdrawalDecision,
    WithdrawalRequest,
)


class WithdrawalRepository:
    """Withdrawal request endpoints. Approval rules live on the backend."""

    async def create(self, api: ApiClient, payload: WithdrawalCreate) -> None:
        await api.post("withdrawals", payload.model_dump(exclude_none=True))

    async def list_by_group(self, api: ApiClient, group_id: int) -> list[WithdrawalRequest]:
        data = await api.get_list(f"withdrawals/group/{group_id}")
        return [WithdrawalRequest.model_validate(w) for w in data if isinstance(w, dict)]

    async def approve(self, api: ApiClient, withdrawal_id: int, approved_by: str) -> None:
        await api.post(f"withdrawals/{withdrawal_id}/approve", {"approved_by": approved_by})

    async def reject(self, api: ApiClient, withdrawal_id: int, payload: WithdrawalDecision) -> None:
        await api.post(
            f"withdrawals/{withdrawal_id}/reject",
            payload.model_dump(exclude_none=True),
        )
