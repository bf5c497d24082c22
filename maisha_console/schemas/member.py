# maisha_console/schemas/member.py
from datetime import date, datetime
from typing import Literal

from pydantic import ConfigDict
from pydantic.alias_generators import to_camel
from sqlmodel import SQLModel, Field

# Wire codes are the source of truth; labels are for display only.
GenderCode = Literal["MALE", "FEMALE", "OTHER"]

_LABEL_BY_CODE = {"MALE": "Male", "FEMALE": "Female"}
_CODE_BY_LABEL = {"Male": "MALE", "Female": "FEMALE"}


def gender_label(code: str | None) -> str:
    """MALE -> Male, FEMALE -> Female, anything else -> Other."""
    return _LABEL_BY_CODE.get(code or "", "Other")


def gender_code(label: str | None) -> str:
    """Male -> MALE, Female -> FEMALE, anything else -> OTHER."""
    return _CODE_BY_LABEL.get(label or "", "OTHER")


def normalize_gender_code(code: str | None) -> str:
    """Collapse any unknown wire code to OTHER."""
    return code if code in _LABEL_BY_CODE else "OTHER"


class Member(SQLModel):
    """
    Client-side member record.

    Attributes are snake_case in Python; `model_dump(by_alias=True)` gives the
    camelCase client shape (fullName, genderCode, ...).
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: str
    full_name: str
    first_name: str = ""
    last_name: str = ""
    birth_date: date | None = None
    gender_code: str = "OTHER"
    gender: str = "Other"
    is_active: bool = False
    national_id: str | None = None
    phone: str | None = None
    group_id: str
    created_at: datetime


class MemberWrite(SQLModel):
    """
    Payload for creating or updating a member.

    `gender_code` wins over `gender` (label) when both are supplied.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    first_name: str = Field(default="", max_length=100)
    last_name: str = Field(default="", max_length=100)
    birth_date: date | None = None
    gender_code: GenderCode | None = None
    gender: str | None = None
    is_active: bool = True
    national_id: str | None = None
    phone: str | None = None
    group_id: str | int

    def resolved_gender_code(self) -> str:
        if self.gender_code:
            return self.gender_code
        return gender_code(self.gender)

    @classmethod
    def from_member(cls, member: Member) -> "MemberWrite":
        """Edit form seed: everything the backend lets us write back."""
        return cls(
            first_name=member.first_name,
            last_name=member.last_name,
            birth_date=member.birth_date,
            gender_code=normalize_gender_code(member.gender_code),
            is_active=member.is_active,
            national_id=member.national_id,
            phone=member.phone,
            group_id=member.group_id,
        )


class CustomerInfo(SQLModel):
    """Result of the third-party phone lookup, used to pre-fill member forms."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    first_name: str = ""
    last_name: str = ""
    birth_date: str = ""
    gender: str = "OTHER"
    is_active: bool = True
