# maisha_console/schemas/withdrawal.py
from pydantic import ConfigDict
from sqlmodel import SQLModel, Field

from maisha_console.schemas.record import BackendRecord


class WithdrawalMember(BackendRecord):
    model_config = ConfigDict(extra="ignore")

    first_name: str = ""
    last_name: str = ""
    phone: str | None = None


class WithdrawalRequest(BackendRecord):
    """A member's request to move wallet funds to mobile money."""

    id: int | None = None
    member_id: int | None = None
    wallet_id: int | None = None
    amount: float = 0.0
    phone: str | None = None
    status: str = "pending"
    notes: str | None = None
    approved_by: str | None = None
    approved_at: str | None = None
    mopay_transaction_id: str | None = None
    created_at: str | None = None
    member: WithdrawalMember | None = None

    @property
    def member_name(self) -> str:
        if self.member is None:
            return f"Member #{self.member_id}"
        return f"{self.member.first_name} {self.member.last_name}".strip()


class WithdrawalCreate(SQLModel):
    model_config = ConfigDict(extra="forbid")

    member_id: int
    amount: float = Field(gt=0)
    phone: str
    notes: str | None = None


class WithdrawalDecision(SQLModel):
    """Approve/reject payload; `approved_by` is the acting admin's email."""

    model_config = ConfigDict(extra="forbid")

    approved_by: str
    notes: str | None = None
