"""Shared fixtures: a fake backend behind httpx.MockTransport and a console client."""

from __future__ import annotations

import json
import os
from collections.abc import Callable
from typing import Any

os.environ.setdefault("SESSION_SECRET_KEY", "test-secret")

import httpx  # noqa: E402
import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

from maisha_console.core.api_client import ApiClient, get_http_client  # noqa: E402
from maisha_console.core.storage import ClientStorage  # noqa: E402
from maisha_console.main import app  # noqa: E402

Handler = Callable[[httpx.Request], httpx.Response]


class FakeBackend:
    """
    Route table keyed by (method, path) answering like the real backend.

    Values are either a JSON-able body (returned with 200) or an
    `httpx.Response` or a callable taking the request. Every request is
    recorded in `calls`.
    """

    def __init__(self):
        self.routes: dict[tuple[str, str], Any] = {}
        self.calls: list[httpx.Request] = []

    def on(self, method: str, path: str, answer: Any) -> None:
        self.routes[(method.upper(), path)] = answer

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.calls.append(request)
        answer = self.routes.get((request.method, request.url.path))
        if answer is None:
            return httpx.Response(404, text="Not found")
        if callable(answer):
            answer = answer(request)
        if isinstance(answer, httpx.Response):
            return answer
        return httpx.Response(200, json=answer)

    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)

    def last(self, method: str, path: str) -> httpx.Request:
        for request in reversed(self.calls):
            if request.method == method and request.url.path == path:
                return request
        raise AssertionError(f"no {method} {path} call recorded")

    def body(self, method: str, path: str) -> Any:
        return json.loads(self.last(method, path).content)


@pytest.fixture
def backend() -> FakeBackend:
    return FakeBackend()


@pytest.fixture
def storage() -> ClientStorage:
    return ClientStorage({})


@pytest.fixture
def api(backend: FakeBackend, storage: ClientStorage) -> ApiClient:
    http = httpx.AsyncClient(transport=backend.transport(), base_url="http://backend.test")
    return ApiClient(http, storage)


@pytest.fixture
def client(backend: FakeBackend):
    """Console TestClient whose backend calls all go to `backend`."""
    http = httpx.AsyncClient(transport=backend.transport(), base_url="http://backend.test")
    app.dependency_overrides[get_http_client] = lambda: http
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


def make_user(role: str | None, group_id: int | None = None, **extra: Any) -> dict[str, Any]:
    user = {
        "id": 1,
        "name": f"{role or 'nobody'} user",
        "email": f"{role or 'nobody'}@maisha.rw",
        "role": role,
        "group_id": group_id,
    }
    user.update(extra)
    return user


@pytest.fixture
def login_as(client: TestClient, backend: FakeBackend):
    """Log the TestClient in with the given role through the real login form."""

    def _login(role: str | None, group_id: int | None = None, **extra: Any) -> dict[str, Any]:
        user = make_user(role, group_id, **extra)
        backend.on("POST", "/api/auth/login", {"user": user, "token": "tok-123"})
        response = client.post(
            "/login",
            data={"email": user["email"], "password": "secret"},
            follow_redirects=False,
        )
        assert response.status_code == 303
        return user

    return _login
