# maisha_console/services/withdrawal_service.py
import logging

from maisha_console.core.api_client import ApiClient
from maisha_console.core.auth import AuthContext
from maisha_console.repositories.withdrawal_repo import WithdrawalRepository
from maisha_console.schemas.withdrawal import WithdrawalDecision, WithdrawalRequest

logger = logging.getLogger(__name__)

REJECTION_NOTE = "Rejected by admin"


class WithdrawalService:
    """Admin side of withdrawal requests: list, approve, reject."""

    def __init__(self, repo: WithdrawalRepository):
        self.repo = repo

    async def list(self, api: ApiClient, group_id: int) -> list[WithdrawalRequest]:
        return await self.repo.list_by_group(api, group_id)

    async def approve(self, api: ApiClient, auth: AuthContext, withdrawal_id: int) -> None:
        await self.repo.approve(api, withdrawal_id, auth.user.email)
        logger.info("Withdrawal %s approved by %s", withdrawal_id, auth.user.email)

    async def reject(self, api: ApiClient, auth: AuthContext, withdrawal_id: int) -> None:
        await self.repo.reject(
            api,
            withdrawal_id,
            WithdrawalDecision(approved_by=auth.user.email, notes=REJECTION_NOTE),
        )
        logger.info("Withdrawal %s rejected by %s", withdrawal_id, auth.user.email)
