# maisha_console/core/api_client.py
import logging
from typing import Any

import httpx
from fastapi import Depends, Request

from maisha_console.core.config import get_settings
from maisha_console.core.storage import TOKEN_KEY, ClientStorage

settings = get_settings()

logger = logging.getLogger(__name__)


class ApiError(Exception):
    """
    Any failed backend call.

    Pages catch this one type and show `message` to the user; they never
    branch on `status_code`.
    """

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class ApiTransportError(ApiError):
    """The request never produced an HTTP response (DNS, refused, reset...)."""


class ApiResponseError(ApiError):
    """The backend answered with a non-2xx status."""


def create_http_client() -> httpx.AsyncClient:
    """
    Build the shared HTTP client used for every backend call.

    Created once in the application lifespan and closed on shutdown.
    """
    return httpx.AsyncClient(base_url=settings.API_BASE, timeout=settings.API_TIMEOUT)


def get_http_client(request: Request) -> httpx.AsyncClient:
    """FastAPI dependency returning the application's shared HTTP client."""
    return request.app.state.http_client


def get_storage(request: Request) -> ClientStorage:
    """FastAPI dependency exposing the session cookie as client storage."""
    return ClientStorage(request.session)


class ApiClient:
    """
    The only component that talks to the backend.

    Responsibilities:
      - prefix every path with /api/
      - attach JSON content type and the session bearer token (if stored)
      - turn non-2xx responses and transport failures into ApiError
      - normalize 204 No Content to None

    No retries, no caching: every call is a fresh request.
    """

    def __init__(self, http: httpx.AsyncClient, storage: ClientStorage):
        self.http = http
        self.storage = storage

    def _headers(
        self,
        use_session_token: bool = True,
        extra: dict[str, str] | None = None,
    ) -> dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if use_session_token:
            token = self.storage.get(TOKEN_KEY)
            if token:
                headers["Authorization"] = f"Bearer {token}"
        if extra:
            headers.update(extra)
        return headers

    async def request(
        self,
        method: str,
        path: str,
        *,
        json: Any = None,
        params: dict[str, Any] | None = None,
        use_session_token: bool = True,
        headers: dict[str, str] | None = None,
    ) -> Any:
        """
        Perform one backend call and return the decoded JSON body.

        Args:
            method: HTTP verb.
            path: resource path relative to /api/ (e.g. "groups/5").
            json: optional request body.
            params: optional query parameters.
            use_session_token: attach the session bearer token when stored.
            headers: extra headers, applied last.

        Returns:
            Decoded JSON, or None for 204 No Content.

        Raises:
            ApiTransportError: network failure.
            ApiResponseError: non-2xx status (message = body text).
        """
        url = f"{settings.API_PREFIX}/{path.lstrip('/')}"
        try:
            response = await self.http.request(
                method,
                url,
                json=json,
                params=params,
                headers=self._headers(use_session_token, headers),
            )
        except httpx.HTTPError as e:
            logger.error("Backend unreachable: %s %s (%s)", method, url, e)
            raise ApiTransportError(f"Network error: {e}") from e

        if not response.is_success:
            text = response.text
            logger.warning("Backend error: %s %s -> %s", method, url, response.status_code)
            raise ApiResponseError(
                text or f"Request failed: {response.status_code}",
                status_code=response.status_code,
            )

        if response.status_code == 204 or not response.content:
            return None

        try:
            return response.json()
        except ValueError as e:
            raise ApiResponseError(
                f"Malformed response from {url}", status_code=response.status_code
            ) from e

    async def get(self, path: str, **kwargs: Any) -> Any:
        return await self.request("GET", path, **kwargs)

    async def post(self, path: str, json: Any = None, **kwargs: Any) -> Any:
        return await self.request("POST", path, json=json, **kwargs)

    async def put(self, path: str, json: Any = None, **kwargs: Any) -> Any:
        return await self.request("PUT", path, json=json, **kwargs)

    async def delete(self, path: str, **kwargs: Any) -> Any:
        return await self.request("DELETE", path, **kwargs)

    async def get_list(self, path: str, **kwargs: Any) -> list[Any]:
        """GET a collection; anything but a JSON array degrades to []."""
        data = await self.get(path, **kwargs)
        if not isinstance(data, list):
            return []
        return data


def get_api_client(
    http: httpx.AsyncClient = Depends(get_http_client),
    storage: ClientStorage = Depends(get_storage),
) -> ApiClient:
    """FastAPI dependency: an ApiClient bound to this request's storage."""
    return ApiClient(http, storage)


def truthy_params(filters: dict[str, Any] | None) -> dict[str, str]:
    """
    Keep only filters with a truthy value, stringified.

    Empty strings, None, 0 and False are never sent as query parameters.
    """
    if not filters:
        return {}
    return {key: str(value) for key, value in filters.items() if value}
