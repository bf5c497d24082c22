# maisha_console/services/wallet_service.py
import asyncio
import logging

from maisha_console.core.api_client import ApiClient
from maisha_console.core.auth import AuthContext
from maisha_console.repositories.member_repo import MemberRepository
from maisha_console.repositories.wallet_repo import WalletRepository
from maisha_console.schemas.member import Member
from maisha_console.schemas.wallet import (
    CashoutRequest,
    TopupRequest,
    Wallet,
    WalletTransaction,
)
from maisha_console.services.scope import initiated_by

logger = logging.getLogger(__name__)

DEFAULT_TOPUP_DESCRIPTION = "Wallet top-up"
DEFAULT_CASHOUT_DESCRIPTION = "Wallet cash-out"


class WalletService:
    """
    Wallets page.

    Responsibilities:
      - list a group's wallets next to their members
      - top-up / cash-out with the acting role recorded
      - per-member transaction history
    """

    def __init__(self, repo: WalletRepository, members: MemberRepository):
        self.repo = repo
        self.members = members

    async def group_wallets(
        self, api: ApiClient, group_id: int
    ) -> tuple[list[Wallet], list[Member]]:
        wallets, members = await asyncio.gather(
            self.repo.list_group_wallets(api, group_id),
            self.members.list(api, group_id),
        )
        return wallets, members

    async def topup(
        self,
        api: ApiClient,
        auth: AuthContext,
        *,
        member_id: int,
        amount: float,
        source: str | None = None,
        reference: str | None = None,
        description: str | None = None,
        notes: str | None = None,
    ) -> None:
        payload = TopupRequest(
            member_id=member_id,
            amount=amount,
            description=description or DEFAULT_TOPUP_DESCRIPTION,
            source=source or None,
            reference=reference or None,
            notes=notes or None,
            created_by=auth.user.email,
            initiated_by=initiated_by(auth),
        )
        await self.repo.topup(api, payload)
        logger.info("Top-up of %s for member %s by %s", amount, member_id, auth.user.email)

    async def cashout(
        self,
        api: ApiClient,
        auth: AuthContext,
        *,
        member_id: int,
        amount: float,
        method: str | None = None,
        reference: str | None = None,
        description: str | None = None,
        notes: str | None = None,
    ) -> None:
        role = initiated_by(auth)
        payload = CashoutRequest(
            member_id=member_id,
            amount=amount,
            description=description or DEFAULT_CASHOUT_DESCRIPTION,
            method=method or None,
            reference=reference or None,
            notes=notes or None,
            created_by=auth.user.email,
            user_role=role,
            initiated_by=role,
        )
        await self.repo.cashout(api, payload)
        logger.info("Cash-out of %s for member %s by %s", amount, member_id, auth.user.email)

    async def transactions(self, api: ApiClient, member_id: int) -> list[WalletTransaction]:
        return await self.repo.list_transactions(api, member_id)
