# maisha_console/schemas/record.py
from typing import Any

from pydantic import ConfigDict, ValidationInfo, field_validator
from sqlmodel import SQLModel


class BackendRecord(SQLModel):
    """
    Base for records read from the backend.

    A null sent for a field that has a default falls back to that default, so
    a partly filled record still loads instead of failing the page.
    """

    model_config = ConfigDict(extra="allow")

    @field_validator("*", mode="before")
    @classmethod
    def null_to_default(cls, v: Any, info: ValidationInfo) -> Any:
        if v is None:
            field = cls.model_fields[info.field_name]
            if not field.is_required():
                return field.get_default(call_default_factory=True)
        return v
