from __future__ import annotations

from pydantic import AliasChoices, Field, SecretStr, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .scopes import authority_from_url


class ConnectionSettings(BaseSettings):
    """Connection settings for the Microsoft Graph tenant.

    Values are read from keyword arguments first, then from environment
    variables. Only the client-credentials grant is supported, so tenant,
    client id and client secret are all mandatory.

    Environment variables:
        - MSGRAPH_TENANT
        - MSGRAPH_CLIENT_ID
        - MSGRAPH_CLIENT_SECRET
        - MSGRAPH_AUTHENTICATION_URL
        - MSGRAPH_RESOURCE_URL (alias: MSGRAPH_SCOPE)
        - MSGRAPH_REQUEST_TIMEOUT
    """

    model_config = SettingsConfigDict(
        case_sensitive=False,
        extra="ignore",
        frozen=True,
    )

    # With validation_alias set, the field name is only accepted as input if it
    # is listed among the alias choices, hence the first entry of each.

    tenant: str | None = Field(
        default=None, validation_alias=AliasChoices("tenant", "MSGRAPH_TENANT")
    )
    client_id: str | None = Field(
        default=None,
        validation_alias=AliasChoices("client_id", "MSGRAPH_CLIENT_ID"),
    )
    client_secret: SecretStr | None = Field(
        default=None,
        validation_alias=AliasChoices("client_secret", "MSGRAPH_CLIENT_SECRET"),
    )
    authentication_url: str | None = Field(
        default=None,
        validation_alias=AliasChoices(
            "authentication_url", "MSGRAPH_AUTHENTICATION_URL"
        ),
    )
    resource_url: str | None = Field(
        default=None,
        validation_alias=AliasChoices(
            "resource_url", "MSGRAPH_RESOURCE_URL", "MSGRAPH_SCOPE"
        ),
    )
    request_timeout: float | None = Field(
        default=None,
        gt=0,
        validation_alias=AliasChoices("request_timeout", "MSGRAPH_REQUEST_TIMEOUT"),
    )

    @field_validator("tenant", "client_id", "authentication_url", "resource_url", mode="before")
    @classmethod
    def _blank_as_none(cls, v: str | None) -> str | None:
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @field_validator("authentication_url", "resource_url")
    @classmethod
    def _ensure_absolute_url(cls, v: str | None) -> str | None:
        """Endpoint overrides must be absolute URLs."""
        if v is not None:
            authority_from_url(v)
        return v

    @model_validator(mode="after")
    def _require_client_credentials(self) -> "ConnectionSettings":
        secret = self.client_secret.get_secret_value() if self.client_secret else ""
        if not (self.tenant and self.client_id and secret):
            raise ValueError(
                "client credentials require tenant, client_id and client_secret."
            )
        return self
