from __future__ import annotations

import os
from typing import Any, Iterator

import pytest
import requests

from msgraphsync.auth.token import Token
from msgraphsync.users.config import QuerySpec

USERS_URL = "https://graph.microsoft.com/v1.0/users"


@pytest.fixture(autouse=True)
def clear_msgraph_env(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    """Remove MSGRAPH_* vars to prevent cross-test leakage.

    Yields:
        Iterator[None]: Context manager semantics for pytest.
    """
    to_clear = [k for k in os.environ.keys() if k.upper().startswith("MSGRAPH_")]
    for k in to_clear:
        monkeypatch.delenv(k, raising=False)
    yield


class FakeResponse:
    """Stands in for :class:`requests.Response` inside a ``with`` block."""

    def __init__(self, status_code: int = 200, payload: Any = None, text: str = ""):
        self.status_code = status_code
        self._payload = payload
        self.text = text
        self.closed = False

    def json(self) -> Any:
        if self._payload is None:
            raise ValueError("No JSON object could be decoded")
        return self._payload

    def __enter__(self) -> "FakeResponse":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.closed = True


class FakeSession:
    """Records GET calls and replays canned responses per URL, in order."""

    def __init__(self) -> None:
        self.calls: list[dict[str, Any]] = []
        self.responses: list[FakeResponse] = []
        self.closed = False
        self._routes: dict[str, list[FakeResponse | Exception]] = {}

    def add(
        self,
        url: str,
        *,
        status: int = 200,
        json: Any = None,
        text: str = "",
        exc: Exception | None = None,
    ) -> None:
        outcome = exc if exc is not None else FakeResponse(status, json, text)
        self._routes.setdefault(url, []).append(outcome)

    def add_page(self, values: list[dict[str, Any]], next_link: str | None = None, *, url: str = USERS_URL) -> None:
        payload: dict[str, Any] = {"value": values}
        if next_link is not None:
            payload["@odata.nextLink"] = next_link
        self.add(url, json=payload)

    def get(self, url: str, headers=None, params=None, timeout=None) -> FakeResponse:
        self.calls.append(
            {"url": url, "headers": headers, "params": params, "timeout": timeout}
        )
        queue = self._routes.get(url)
        if not queue:
            raise AssertionError(f"Unexpected GET {url}")
        outcome = queue.pop(0)
        if isinstance(outcome, Exception):
            raise outcome
        self.responses.append(outcome)
        return outcome

    def close(self) -> None:
        self.closed = True


@pytest.fixture()
def session() -> FakeSession:
    return FakeSession()


@pytest.fixture()
def token() -> Token:
    return Token(access_token="header.payload.signature", expires_on=4102444800)


@pytest.fixture()
def query() -> QuerySpec:
    return QuerySpec()


@pytest.fixture()
def connection_error() -> requests.ConnectionError:
    return requests.ConnectionError("Name or service not known")
