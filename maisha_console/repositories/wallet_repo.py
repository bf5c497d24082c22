# maisha_console/repositories/wallet_repo.py
from typing import Any

from maisha_console.core.api_client import ApiClient
from maisha_console.schemas.wallet import (
    CashoutRequest,
    TopupRequest,
    Wallet,
    WalletTransaction,
)


class WalletRepository:
    """Wallet endpoints. Balances only ever change on the backend."""

    async def get_member_wallet(self, api: ApiClient, member_id: int) -> Wallet | None:
        data = await api.get(f"wallets/member/{member_id}")
        return Wallet.model_validate(data) if isinstance(data, dict) else None

    async def list_group_wallets(self, api: ApiClient, group_id: int) -> list[Wallet]:
        data = await api.get_list(f"wallets/group/{group_id}")
        return [Wallet.model_validate(w) for w in data if isinstance(w, dict)]

    async def topup(self, api: ApiClient, payload: TopupRequest) -> Any:
        return await api.post("wallets/topup", payload.model_dump(exclude_none=True))

    async def cashout(self, api: ApiClient, payload: CashoutRequest) -> Any:
        return await api.post("wallets/cashout", payload.model_dump(exclude_none=True))

    async def list_transactions(self, api: ApiClient, member_id: int) -> list[WalletTransaction]:
        data = await api.get_list(f"wallets/transactions/{member_id}")
        return [WalletTransaction.model_validate(t) for t in data if isinstance(t, dict)]
