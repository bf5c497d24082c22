# maisha_console/schemas/wallet.py
from pydantic import ConfigDict
from sqlmodel import SQLModel, Field

from maisha_console.schemas.record import BackendRecord


class Wallet(BackendRecord):
    """A member's wallet as returned by the backend (server shape kept)."""

    id: int | None = None
    member_id: int | None = None
    balance: float = 0.0
    currency: str = "RWF"
    is_active: bool = True


class WalletTransaction(BackendRecord):
    """One ledger line of a wallet."""

    id: int | None = None
    transaction_type: str = ""
    amount: float = 0.0
    balance_before: float | None = None
    balance_after: float | None = None
    description: str | None = None
    source: str | None = None
    method: str | None = None
    reference: str | None = None
    status: str = ""
    created_at: str | None = None


class TopupRequest(SQLModel):
    """Wallet top-up payload (the backend mutates the balance)."""

    model_config = ConfigDict(extra="forbid")

    member_id: int
    amount: float = Field(gt=0)
    description: str | None = None
    source: str | None = None
    reference: str | None = None
    notes: str | None = None
    created_by: str
    initiated_by: str | None = None


class CashoutRequest(SQLModel):
    """Wallet cash-out payload."""

    model_config = ConfigDict(extra="forbid")

    member_id: int
    amount: float = Field(gt=0)
    description: str | None = None
    method: str | None = None
    reference: str | None = None
    notes: str | None = None
    created_by: str
    user_role: str | None = None
    initiated_by: str | None = None
