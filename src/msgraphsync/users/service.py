from __future__ import annotations

import logging
from typing import Any, Mapping

import requests
from pydantic import ValidationError

from msgraphsync.auth.config import ConnectionSettings
from msgraphsync.auth.factory import authenticate_with
from msgraphsync.errors import (
    CommunicationError,
    ConfigurationError,
    NotFoundError,
    ProcessingError,
    ServiceError,
)

from .client import GraphUsersClient
from .config import ID, QuerySpec
from .interfaces import EntityFactory, SourceService
from .mapper import first_value, normalize
from .models import Entity, Failed, Found, LookupResult, NotFound, PivotIndex

logger = logging.getLogger(__name__)


class UsersSourceService(SourceService):
    """Microsoft Graph users exposed as a synchronization source.

    The service authenticates once at construction and keeps the token for
    its whole lifetime. Build a new service to get a fresh token.
    """

    def __init__(
        self,
        connection: ConnectionSettings,
        query: QuerySpec | None = None,
        *,
        entity_factory: EntityFactory = Entity,
        session: requests.Session | None = None,
    ) -> None:
        """Authenticate and prepare the users client.

        Args:
            connection: Tenant and client credentials.
            query: Listing and lookup configuration. Defaults are read from
                the environment when omitted.
            entity_factory: Called as ``entity_factory(id, attributes)`` to
                build the objects returned by lookups.
            session: HTTP session handed to :class:`GraphUsersClient`.

        Raises:
            AuthorizationError: The credentials were rejected.
        """
        self.query = query if query is not None else QuerySpec()
        self._entity_factory = entity_factory

        token = authenticate_with(connection)
        self._client = GraphUsersClient(
            token,
            self.query,
            resource_url=connection.resource_url,
            timeout=connection.request_timeout,
            session=session,
        )

    @classmethod
    def from_config(
        cls,
        connection: Mapping[str, Any] | None = None,
        query: Mapping[str, Any] | None = None,
        **kwargs: Any,
    ) -> "UsersSourceService":
        """Build the service from plain mappings, falling back to the environment.

        Raises:
            ConfigurationError: A setting is missing or invalid.
            AuthorizationError: The credentials were rejected.
        """
        try:
            connection_settings = ConnectionSettings(**(connection or {}))
            query_spec = QuerySpec(**(query or {}))
        except ValidationError as exc:
            raise ConfigurationError(str(exc)) from exc
        return cls(connection_settings, query_spec, **kwargs)

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> "UsersSourceService":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def resolve_by_id(self, user_id: str | None) -> LookupResult:
        """Fetch the full attribute set of a user known by its Graph id."""
        if user_id is None or not str(user_id).strip():
            return NotFound()
        try:
            record = self._client.get_by_id(str(user_id))
        except NotFoundError:
            logger.debug("User with id %s not found", user_id)
            return NotFound()
        except CommunicationError as exc:
            logger.error("Communication failure while getting user %s (%s)", user_id, exc)
            return Failed(exc)
        except ProcessingError as exc:
            logger.error("Graph rejected lookup of user %s (%s)", user_id, exc)
            return Failed(_service_error(exc))
        return Found(self._entity_factory(str(user_id), normalize(record)))

    def resolve_by_pivot_value(self, pivot_value: str | None) -> LookupResult:
        """Find the id of the user whose pivot attribute equals ``pivot_value``.

        Only the id is returned; use :meth:`resolve_by_id` for the details.
        """
        if pivot_value is None:
            return NotFound()
        try:
            record = self._client.get_first_by_pivot_value(str(pivot_value))
        except NotFoundError:
            logger.debug("%s/%s not found", self.query.pivot, pivot_value)
            return NotFound()
        except CommunicationError as exc:
            logger.error(
                "Communication failure while getting user %s/%s (%s)",
                self.query.pivot,
                pivot_value,
                exc,
            )
            return Failed(exc)
        except ProcessingError as exc:
            logger.error(
                "Graph rejected lookup of user %s/%s (%s)",
                self.query.pivot,
                pivot_value,
                exc,
            )
            return Failed(_service_error(exc))

        if record is None:
            return NotFound()
        user_id = str(record[ID])
        return Found(self._entity_factory(user_id, {ID: user_id}))

    def list_all_pivots(self) -> PivotIndex:
        """Return every listed user keyed by pivot value.

        A later user with the same pivot value replaces an earlier one.

        Raises:
            CommunicationError: Graph could not be reached.
            ServiceError: Graph rejected one of the page requests.
        """
        try:
            records = self._client.list_records()
        except CommunicationError as exc:
            logger.error("Communication failure while getting pivot list (%s)", exc)
            raise
        except (NotFoundError, ProcessingError) as exc:
            logger.error("Graph rejected pivot list request (%s)", exc)
            raise ServiceError(str(exc)) from exc

        pivots: PivotIndex = {}
        for record in records:
            attributes = normalize(record)
            pivots[str(first_value(record[self.query.pivot]))] = attributes
        return pivots

    def get_bean(
        self,
        pivot_attribute_name: str,
        pivot_attributes: Mapping[str, Any],
        from_same_service: bool,
    ) -> Any | None:
        logger.debug(
            "Call to get_bean(%s, %s, %s)",
            pivot_attribute_name,
            pivot_attributes,
            from_same_service,
        )
        if not pivot_attributes:
            return None

        if from_same_service:
            result = self.resolve_by_id(first_value(pivot_attributes.get(ID)))
        else:
            pivot_value = first_value(next(iter(pivot_attributes.values())))
            result = self.resolve_by_pivot_value(pivot_value)

        match result:
            case Found(entity=entity):
                return entity
            case NotFound():
                return None
            case Failed(error=error):
                raise error

    def get_list_pivots(self) -> Mapping[str, Any]:
        return self.list_all_pivots()


def _service_error(exc: Exception) -> ServiceError:
    error = ServiceError(str(exc))
    error.__cause__ = exc
    return error
