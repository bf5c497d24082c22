# maisha_console/schemas/policy.py
from pydantic import ConfigDict
from sqlmodel import SQLModel, Field

from maisha_console.schemas.record import BackendRecord


class GroupPolicy(BackendRecord):
    """Per-group permission switches and limits."""

    id: int | None = None
    group_id: int
    allow_group_user_cashout: bool = False
    allow_member_withdrawal: bool = False
    max_cashout_amount: float | None = None
    max_withdrawal_amount: float | None = None
    require_approval_for_withdrawal: bool = True


class GroupPolicyUpdate(SQLModel):
    """
    Policy update payload.

    Empty limits are left out of the request (see `to_payload`).
    """

    model_config = ConfigDict(extra="forbid")

    allow_group_user_cashout: bool = False
    allow_member_withdrawal: bool = False
    max_cashout_amount: float | None = Field(default=None, ge=0)
    max_withdrawal_amount: float | None = Field(default=None, ge=0)
    require_approval_for_withdrawal: bool = False

    def to_payload(self) -> dict:
        payload = self.model_dump()
        for key in ("max_cashout_amount", "max_withdrawal_amount"):
            if not payload[key]:
                payload.pop(key)
        return payload
