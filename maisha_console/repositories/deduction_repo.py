# maisha_console/repositories/deduction_repo.py
from maisha_console.core.api_client import ApiClient
from maisha_console.schemas.deduction import (
    DeductionCreate,
    DeductionUpdate,
    MonthlyDeduction,
)


class DeductionRepository:
    """Monthly deduction endpoints."""

    async def list(self, api: ApiClient, group_id: int) -> list[MonthlyDeduction]:
        data = await api.get_list(f"deductions/group/{group_id}")
        return [MonthlyDeduction.model_validate(d) for d in data if isinstance(d, dict)]

    async def create(self, api: ApiClient, payload: DeductionCreate) -> None:
        await api.post("deductions", payload.model_dump())

    async def update(self, api: ApiClient, deduction_id: int, payload: DeductionUpdate) -> None:
        await api.put(f"deductions/{deduction_id}", payload.model_dump(exclude_unset=True))

    async def delete(self, api: ApiClient, deduction_id: int) -> None:
        await api.delete(f"deductions/{deduction_id}")
