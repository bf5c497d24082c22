# maisha_console/repositories/auth_repo.py
from typing import Any

from maisha_console.core.api_client import ApiClient


class AuthRepository:
    """
    Backend auth endpoints.

    Returns the raw response body; normalizing it into a session is the
    job of AuthContext.
    """

    async def login(self, api: ApiClient, email: str, password: str) -> Any:
        return await api.post("auth/login", {"email": email, "password": password})

    async def register(
        self,
        api: ApiClient,
        name: str,
        email: str,
        password: str,
        role: str | None = None,
        group_id: int | None = None,
    ) -> Any:
        payload: dict[str, Any] = {"name": name, "email": email, "password": password}
        if role is not None:
            payload["role"] = role
        if group_id is not None:
            payload["group_id"] = group_id
        return await api.post("auth/register", payload)

    async def me(self, api: ApiClient) -> Any:
        return await api.get("auth/me")
