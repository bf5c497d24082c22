# maisha_console/schemas/auth.py
from typing import Literal

from pydantic import ConfigDict, EmailStr, field_validator
from sqlmodel import SQLModel, Field

# Closed role set. A session without a role has no privileges at all.
Role = Literal["super_admin", "group_admin", "group_user", "member"]

ROLES: tuple[str, ...] = ("super_admin", "group_admin", "group_user", "member")


class GroupSummary(SQLModel):
    """Home-group summary embedded in the session user."""

    model_config = ConfigDict(extra="ignore")

    id: int
    name: str


class AuthUser(SQLModel):
    """
    The session user, as persisted in client storage.

    Built from the backend's login/register response; unknown keys are
    dropped so only the normalized fields are ever stored.
    """

    model_config = ConfigDict(extra="ignore")

    id: int | str
    name: str = ""
    email: str = ""
    role: Role | None = None
    group_id: int | None = None
    group: GroupSummary | None = None

    @field_validator("role", mode="before")
    @classmethod
    def unknown_role_is_none(cls, v):
        # Unknown roles fail closed instead of rejecting the whole session.
        return v if v in ROLES else None


class LoginForm(SQLModel):
    """Login form payload. Validated before any network call."""

    model_config = ConfigDict(extra="forbid")

    email: EmailStr
    password: str = Field(min_length=1)


class RegisterForm(SQLModel):
    """Registration form payload."""

    model_config = ConfigDict(extra="forbid")

    name: str = Field(max_length=100)
    email: EmailStr
    password: str = Field(min_length=6)

    @field_validator("name")
    @classmethod
    def normalize_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("name cannot be empty")
        return v
