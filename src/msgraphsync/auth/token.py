from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class Token:
    """Bearer token obtained from the client-credentials grant.

    ``expires_on`` is kept for diagnostics only; tokens are never renewed.
    """

    access_token: str = field(repr=False)
    expires_on: int | None = None

    @property
    def authorization_header(self) -> str:
        return f"Bearer {self.access_token}"
