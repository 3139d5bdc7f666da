"""Shared fixtures: a scripted HTTP session and fully wired services."""

from __future__ import annotations

from typing import Any, Optional

import pytest

from portal.api_client import PortalApiClient
from portal.auth import SessionManager
from portal.config import AppConfig
from portal.logger import StructuredLogger
from portal.models.user import User
from portal.services import create_services
from portal.token_store import TokenStore

BASE_URL = "http://portal.test"


class FakeResponse:
    """Just enough of ``requests.Response`` for the API client."""

    def __init__(
        self,
        status_code: int = 200,
        body: Any = None,
        headers: Optional[dict[str, str]] = None,
        content: bytes = b"",
    ) -> None:
        self.status_code = status_code
        self._body = body
        self.headers = headers or {}
        self.content = content

    def json(self) -> Any:
        if self._body is None:
            raise ValueError("No JSON body")
        return self._body


class FakeHttpSession:
    """Stands in for ``requests.Session``; answers from a route table.

    Routes are keyed by ``(METHOD, path)`` with the path relative to
    ``/api``.  Unrouted requests answer 404.  Every call is recorded.
    """

    def __init__(self) -> None:
        self.routes: dict[tuple[str, str], FakeResponse] = {}
        self.calls: list[dict[str, Any]] = []
        self.error: Optional[Exception] = None
        self.closed = False

    def add(self, method: str, path: str, body: Any = None, status: int = 200, **kwargs: Any) -> None:
        self.routes[(method.upper(), path)] = FakeResponse(status, body, **kwargs)

    def request(self, method: str, url: str, **kwargs: Any) -> FakeResponse:
        path = url.removeprefix(f"{BASE_URL}/api")
        self.calls.append({"method": method, "path": path, **kwargs})
        if self.error is not None:
            raise self.error
        return self.routes.get(
            (method.upper(), path),
            FakeResponse(404, {"success": False, "message": f"No route for {method} {path}"}),
        )

    def close(self) -> None:
        self.closed = True

    @property
    def paths(self) -> list[str]:
        return [call["path"] for call in self.calls]


@pytest.fixture
def logger() -> StructuredLogger:
    return StructuredLogger(name="tests.portal", file_logging=False)


@pytest.fixture
def config(tmp_path) -> AppConfig:
    return AppConfig(
        API_BASE_URL=BASE_URL + "/",
        TOKEN_STORE_PATH=tmp_path / "session.json",
        DOWNLOAD_DIR=tmp_path / "downloads",
    )


@pytest.fixture
def http() -> FakeHttpSession:
    return FakeHttpSession()


@pytest.fixture
def token_store(config, logger) -> TokenStore:
    return TokenStore(config.TOKEN_STORE_PATH, logger)


@pytest.fixture
def api(config, token_store, logger, http) -> PortalApiClient:
    return PortalApiClient(config, token_store, logger, session=http)


@pytest.fixture
def session() -> SessionManager:
    return SessionManager()


@pytest.fixture
def services(config, session, http, token_store, logger):
    return create_services(
        config,
        session,
        http_session=http,
        token_store=token_store,
        logger=logger,
    )


def make_user(role: str = "psto", **overrides: Any) -> dict[str, Any]:
    """Raw camelCase user object, as the login endpoint returns it."""
    user = {
        "_id": "u-1",
        "email": "maria@example.com",
        "firstName": "Maria",
        "lastName": "Santos",
        "role": role,
        "province": "Romblon",
    }
    user.update(overrides)
    return user


@pytest.fixture
def sign_in(session, token_store):
    """Install a stored token and an in-memory user for *role*."""

    def _sign_in(role: str = "psto", **overrides: Any) -> User:
        raw = make_user(role, **overrides)
        token_store.save("tok-123", raw)
        user = User.model_validate({"_id": raw["_id"], "email": raw["email"], "role": role})
        session.set_current_user(user)
        return user

    return _sign_in


@pytest.fixture
def raw_user():
    """Factory for raw login-response user objects."""
    return make_user
