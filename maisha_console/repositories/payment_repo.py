# maisha_console/repositories/payment_repo.py
from typing import Any

from maisha_console.core.api_client import ApiClient
from maisha_console.schemas.payment import (
    PaymentInitiate,
    PaymentStatus,
    PaymentTransaction,
)


class PaymentRepository:
    """Mobile-money payment endpoints."""

    async def initiate(self, api: ApiClient, payload: PaymentInitiate) -> dict[str, Any]:
        data = await api.post("payments/initiate", payload.model_dump(exclude_none=True))
        return data if isinstance(data, dict) else {}

    async def check_status(self, api: ApiClient, transaction_id: str) -> PaymentStatus:
        data = await api.get(f"payments/check-status/{transaction_id}")
        return PaymentStatus.model_validate(data or {})

    async def list_transactions(self, api: ApiClient) -> list[PaymentTransaction]:
        data = await api.get_list("payments/transactions")
        return [PaymentTransaction.model_validate(t) for t in data if isinstance(t, dict)]

    async def get_transaction(self, api: ApiClient, transaction_id: str) -> PaymentTransaction:
        data = await api.get(f"payments/transactions/{transaction_id}")
        return PaymentTransaction.model_validate(data or {})
