# maisha_console/repositories/member_repo.py
from datetime import date, datetime, timezone
from typing import Any

from maisha_console.core.api_client import ApiClient
from maisha_console.core.config import get_settings
from maisha_console.core.storage import CUSTOMER_INFO_TOKEN_KEY
from maisha_console.schemas.member import (
    CustomerInfo,
    Member,
    MemberWrite,
    gender_label,
)

settings = get_settings()

# Sent when a member is created without a birth date.
PLACEHOLDER_BIRTH_DATE = date(2000, 1, 1)


def parse_date(value: Any) -> date | None:
    """Parse an ISO-ish date or datetime string into a date."""
    parsed = parse_datetime(value)
    return parsed.date() if parsed else None


def parse_datetime(value: Any) -> datetime | None:
    """
    Parse an ISO-ish string ("2024-05-01", "2024-05-01T10:00:00Z", ...).

    Returns None for empty or unparseable input.
    """
    if not value:
        return None
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, date):
        parsed = datetime(value.year, value.month, value.day)
    else:
        text = str(value).strip().replace("Z", "+00:00")
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError:
            try:
                parsed = datetime.fromisoformat(text[:10])
            except ValueError:
                return None
    # naive values are UTC
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def _server_id(value: str | int | None) -> str | int | None:
    # Client ids are strings; numeric ones go back to the wire as ints.
    if isinstance(value, str) and value.isdigit():
        return int(value)
    return value


def member_from_server(m: dict[str, Any]) -> Member:
    """Server member (snake_case, split name) -> client Member."""
    first_name = m.get("first_name") or ""
    last_name = m.get("last_name") or ""
    code = m.get("gender")
    return Member(
        id=str(m.get("id")),
        full_name=f"{first_name} {last_name}".strip(),
        first_name=first_name,
        last_name=last_name,
        birth_date=parse_date(m.get("birth_date")),
        gender_code=code or "OTHER",
        gender=gender_label(code),
        is_active=bool(m.get("is_active")),
        national_id=m.get("national_id"),
        phone=m.get("phone"),
        group_id=str(m.get("group_id")),
        created_at=parse_datetime(m.get("created_at")) or datetime.now(timezone.utc),
    )


def member_to_server(payload: MemberWrite) -> dict[str, Any]:
    """Client member payload -> server mutation body."""
    return {
        "first_name": payload.first_name,
        "last_name": payload.last_name,
        "birth_date": payload.birth_date.isoformat() if payload.birth_date else None,
        "gender": payload.resolved_gender_code(),
        "is_active": payload.is_active,
        "national_id": payload.national_id,
        "phone": payload.phone,
        "group_id": _server_id(payload.group_id),
    }


class MemberRepository:
    """
    Member endpoints plus the customer-info phone lookup.

    All translation between the wire shape and `Member` happens here.
    """

    async def list(self, api: ApiClient, group_id: str | int | None = None) -> list[Member]:
        params = {"group_id": str(group_id)} if group_id else None
        data = await api.get_list("members", params=params)
        return [member_from_server(m) for m in data if isinstance(m, dict)]

    async def create(self, api: ApiClient, payload: MemberWrite) -> Member:
        body = member_to_server(payload)
        if not body["birth_date"]:
            body["birth_date"] = PLACEHOLDER_BIRTH_DATE.isoformat()
        m = await api.post("members", body)
        return member_from_server(m or {})

    async def update(self, api: ApiClient, member_id: str, payload: MemberWrite) -> Member:
        m = await api.put(f"members/{member_id}", member_to_server(payload))
        return member_from_server(m or {})

    async def customer_info(self, api: ApiClient, phone: str) -> CustomerInfo | None:
        """
        Look a phone number up with the third-party credential.

        The credential comes from client storage, else from settings. The
        session token is never sent on this call.
        """
        token = api.storage.get(CUSTOMER_INFO_TOKEN_KEY) or settings.MOPAY_TOKEN
        headers = {}
        if token:
            headers = {"X-Mopay-Token": token, "Authorization": f"Bearer {token}"}
        data = await api.get(
            "customer-info",
            params={"phone": phone},
            use_session_token=False,
            headers=headers,
        )
        if not data or not isinstance(data, dict):
            return None
        return CustomerInfo(
            first_name=data.get("firstName") or "",
            last_name=data.get("lastName") or "",
            birth_date=data.get("birthDate") or "",
            gender=data.get("gender") or "OTHER",
            is_active=data.get("isActive") if data.get("isActive") is not None else True,
        )
