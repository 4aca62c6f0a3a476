from __future__ import annotations

from typing import Any

import pytest
from azure.core.credentials import AccessToken

import msgraphsync.auth.factory as factory


@pytest.fixture()
def stub_credential(monkeypatch: pytest.MonkeyPatch) -> type:
    """Replace ClientSecretCredential with a recorder so no token endpoint is hit.

    Set ``outcome`` on the returned class to an exception to make
    ``get_token`` raise it.

    Returns:
        type: The recorder class, exposing init kwargs, requested scopes
        and whether the credential was closed.
    """

    class _Recorder:
        last_kwargs: dict[str, Any] | None = None
        call_count: int = 0
        requested_scopes: list[tuple[str, ...]] = []
        closed: bool = False
        outcome: AccessToken | Exception = AccessToken("header.payload.signature", 4102444800)

        def __init__(self, **kwargs: Any) -> None:
            type(self).last_kwargs = dict(kwargs)
            type(self).call_count += 1

        def get_token(self, *scopes: str) -> AccessToken:
            type(self).requested_scopes.append(scopes)
            if isinstance(self.outcome, Exception):
                raise self.outcome
            return self.outcome

        def __enter__(self) -> "_Recorder":
            return self

        def __exit__(self, *exc_info: Any) -> None:
            type(self).closed = True

    _Recorder.requested_scopes = []
    monkeypatch.setattr(factory, "ClientSecretCredential", _Recorder)
    return _Recorder
