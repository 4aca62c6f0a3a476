from __future__ import annotations

from pydantic import AliasChoices, Field, PositiveInt, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

ID = "id"
DEFAULT_PIVOT = "mail"


class QuerySpec(BaseSettings):
    """How users are listed and looked up on Graph.

    Environment variables:
        - MSGRAPH_USERS_PIVOT (defaults to ``mail``)
        - MSGRAPH_USERS_FILTER (OData ``$filter`` applied to every listing)
        - MSGRAPH_USERS_PAGE_SIZE (``$top``; Graph rejects values above 999)
        - MSGRAPH_USERS_SELECT (``$select`` for single-user lookups)
    """

    model_config = SettingsConfigDict(
        case_sensitive=False,
        extra="ignore",
        frozen=True,
    )

    pivot: str = Field(
        default=DEFAULT_PIVOT,
        validation_alias=AliasChoices("pivot", "MSGRAPH_USERS_PIVOT"),
    )
    filter_: str | None = Field(
        default=None,
        validation_alias=AliasChoices("filter_", "filter", "MSGRAPH_USERS_FILTER"),
    )
    page_size: PositiveInt | None = Field(
        default=None,
        validation_alias=AliasChoices("page_size", "MSGRAPH_USERS_PAGE_SIZE"),
    )
    select: str | None = Field(
        default=None,
        validation_alias=AliasChoices("select", "MSGRAPH_USERS_SELECT"),
    )

    @field_validator("pivot", mode="before")
    @classmethod
    def _default_blank_pivot(cls, v: str | None) -> str:
        if v is None or (isinstance(v, str) and not v.strip()):
            return DEFAULT_PIVOT
        return v.strip()

    @field_validator("filter_", "select", "page_size", mode="before")
    @classmethod
    def _blank_as_none(cls, v):
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @property
    def list_select(self) -> str:
        """``$select`` used for listings: the id, plus the pivot when it differs."""
        if self.pivot == ID:
            return ID
        return f"{ID},{self.pivot}"
