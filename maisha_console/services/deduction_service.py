# maisha_console/services/deduction_service.py
from maisha_console.core.api_client import ApiClient
from maisha_console.core.auth import AuthContext
from maisha_console.repositories.deduction_repo import DeductionRepository
from maisha_console.schemas.deduction import (
    DeductionCreate,
    DeductionUpdate,
    MonthlyDeduction,
)


class DeductionService:
    """Monthly deductions of one group. Processing runs on the backend."""

    def __init__(self, repo: DeductionRepository):
        self.repo = repo

    async def list(self, api: ApiClient, group_id: int) -> list[MonthlyDeduction]:
        return await self.repo.list(api, group_id)

    async def create(
        self,
        api: ApiClient,
        auth: AuthContext,
        group_id: int,
        *,
        name: str,
        amount: float,
        account_number: str,
        day_of_month: int = 1,
    ) -> None:
        payload = DeductionCreate(
            group_id=group_id,
            name=name,
            amount=amount,
            account_number=account_number,
            day_of_month=day_of_month,
            created_by=auth.user.email,
        )
        await self.repo.create(api, payload)

    async def update(self, api: ApiClient, deduction_id: int, payload: DeductionUpdate) -> None:
        await self.repo.update(api, deduction_id, payload)

    async def set_active(self, api: ApiClient, deduction_id: int, is_active: bool) -> None:
        await self.repo.update(api, deduction_id, DeductionUpdate(is_active=is_active))

    async def delete(self, api: ApiClient, deduction_id: int) -> None:
        await self.repo.delete(api, deduction_id)
