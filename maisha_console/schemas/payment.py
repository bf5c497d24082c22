# maisha_console/schemas/payment.py
from pydantic import ConfigDict, field_validator
from pydantic.alias_generators import to_camel
from sqlmodel import SQLModel, Field

from maisha_console.schemas.record import BackendRecord

# Domain status codes carried in a 200 body (not HTTP statuses).
PAYMENT_STATUS_LABELS: dict[int, str] = {
    200: "Success",
    201: "Pending",
    202: "Processing",
    400: "Failed",
    404: "Not Found",
    500: "Error",
}


def payment_status_text(status: int | None) -> str:
    """Label for a payment status code; unknown codes show as 'Status N', a missing one as 'Unknown'."""
    if status is None:
        return "Unknown"
    if status in PAYMENT_STATUS_LABELS:
        return PAYMENT_STATUS_LABELS[status]
    return f"Status {status}"


def payment_status_tone(status: int | None) -> str:
    """CSS tone used by templates for a status code."""
    if status == 200:
        return "success"
    if status == 201:
        return "warning"
    if status == 202:
        return "info"
    if status in (400, 404, 500):
        return "danger"
    return "muted"


class Transfer(SQLModel):
    model_config = ConfigDict(extra="forbid")

    amount: float = Field(gt=0)
    phone: str
    message: str = "Transfer transaction"


class PaymentInitiate(SQLModel):
    """Mobile-money payment request."""

    model_config = ConfigDict(extra="forbid")

    amount: float = Field(gt=0)
    currency: str = "RWF"
    phone: str
    payment_mode: str = "MOBILE"
    message: str = "Payment transaction"
    callback_url: str = ""
    transfers: list[Transfer] | None = None

    @field_validator("phone")
    @classmethod
    def phone_required(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("phone is required")
        return v


class TransferStatus(BackendRecord):
    model_config = ConfigDict(
        extra="allow", alias_generator=to_camel, populate_by_name=True
    )

    transaction_id: str | None = None
    amount: float | None = None
    phone: str | None = None
    status: int | None = None


class PaymentStatus(BackendRecord):
    """Status-check result for one transaction."""

    model_config = ConfigDict(
        extra="allow", alias_generator=to_camel, populate_by_name=True
    )

    transaction_id: str | None = None
    phone: str | None = None
    amount: float | None = None
    status: int | None = None
    transfers: list[TransferStatus] = []


class PaymentTransaction(BackendRecord):
    """A tracked payment as listed by the backend."""

    id: int | None = None
    transaction_id: str | None = None
    amount: float = 0.0
    currency: str = "RWF"
    phone: str | int | None = None
    payment_mode: str | None = None
    message: str | None = None
    status: int | None = None
    created_at: str | None = None
    transfers: list | None = None
