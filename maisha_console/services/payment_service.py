# maisha_console/services/payment_service.py
import logging
from typing import Any

from maisha_console.core.api_client import ApiClient, ApiError
from maisha_console.core.config import get_settings
from maisha_console.repositories.payment_repo import PaymentRepository
from maisha_console.schemas.payment import (
    PaymentInitiate,
    PaymentStatus,
    PaymentTransaction,
    Transfer,
)

settings = get_settings()

logger = logging.getLogger(__name__)


def build_transfers(rows: list[dict[str, Any]]) -> list[Transfer] | None:
    """
    Transfer rows from the payment form.

    Rows without an amount or a phone are dropped; an empty result means
    "no transfers" (None), not an empty list.
    """
    transfers = []
    for row in rows:
        amount = row.get("amount")
        phone = (row.get("phone") or "").strip()
        if not amount or not phone:
            continue
        transfers.append(
            Transfer(
                amount=float(amount),
                phone=phone,
                message=row.get("message") or "Transfer transaction",
            )
        )
    return transfers or None


class PaymentService:
    """
    Mobile-money payments.

    Responsibilities:
      - build the initiate payload with the console defaults
      - treat a response without a transaction id as a failed payment
      - status checks and transaction history
    """

    def __init__(self, repo: PaymentRepository):
        self.repo = repo

    async def initiate(
        self,
        api: ApiClient,
        *,
        amount: float,
        phone: str,
        currency: str | None = None,
        payment_mode: str | None = None,
        message: str | None = None,
        transfers: list[dict[str, Any]] | None = None,
    ) -> str:
        """
        Start a payment and return its transaction id.

        Raises:
            ValidationError: bad amount or missing phone (before any call).
            ApiError: the backend failed or returned no transaction id.
        """
        payload = PaymentInitiate(
            amount=amount,
            phone=phone,
            currency=currency or settings.CURRENCY,
            payment_mode=payment_mode or "MOBILE",
            message=message or "Payment transaction",
            transfers=build_transfers(transfers or []),
        )
        result = await self.repo.initiate(api, payload)
        transaction_id = result.get("transactionId")
        if not transaction_id:
            raise ApiError(str(result.get("error") or "Failed to initiate payment"))
        logger.info("Payment %s initiated", transaction_id)
        return str(transaction_id)

    async def check_status(self, api: ApiClient, transaction_id: str) -> PaymentStatus:
        return await self.repo.check_status(api, transaction_id.strip())

    async def transactions(self, api: ApiClient) -> list[PaymentTransaction]:
        return await self.repo.list_transactions(api)

    async def transaction(self, api: ApiClient, transaction_id: str) -> PaymentTransaction:
        return await self.repo.get_transaction(api, transaction_id)
