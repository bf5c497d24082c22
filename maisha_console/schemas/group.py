# maisha_console/schemas/group.py
from datetime import datetime

from pydantic import ConfigDict, field_validator
from pydantic.alias_generators import to_camel
from sqlmodel import SQLModel, Field


class Group(SQLModel):
    """
    Client-side group record (camelCase via aliases).

    `member_count` and `total_wallet_balance` are filled in by the groups
    page; the backend does not send them.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: str
    name: str
    description: str = ""
    created_by: str | None = None
    created_at: datetime
    member_count: int = 0
    total_wallet_balance: float = 0.0


class GroupCreate(SQLModel):
    """Payload for creating a group."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    name: str = Field(max_length=100)
    description: str | None = None
    created_by: str

    @field_validator("name")
    @classmethod
    def normalize_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("name cannot be empty")
        return v
