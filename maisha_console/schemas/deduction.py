# maisha_console/schemas/deduction.py
from pydantic import ConfigDict, field_validator
from sqlmodel import SQLModel, Field

from maisha_console.schemas.record import BackendRecord


class MonthlyDeduction(BackendRecord):
    """A recurring debit rule of a group. Processing is backend-owned."""

    id: int | None = None
    group_id: int | None = None
    name: str = ""
    amount: float = 0.0
    account_number: str = ""
    day_of_month: int = 1
    is_active: bool = True
    created_by: str | None = None
    created_at: str | None = None


class DeductionCreate(SQLModel):
    """Payload for a new monthly deduction."""

    model_config = ConfigDict(extra="forbid")

    group_id: int
    name: str = Field(max_length=100)
    amount: float = Field(gt=0)
    account_number: str
    day_of_month: int = Field(default=1, ge=1, le=31)
    created_by: str

    @field_validator("name", "account_number")
    @classmethod
    def not_empty(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("field cannot be empty")
        return v


class DeductionUpdate(SQLModel):
    """
    Partial update for a monthly deduction.
    Only fields that are set are sent.
    """

    model_config = ConfigDict(extra="forbid")

    name: str | None = Field(default=None, max_length=100)
    amount: float | None = Field(default=None, gt=0)
    account_number: str | None = None
    day_of_month: int | None = Field(default=None, ge=1, le=31)
    is_active: bool | None = None
