from __future__ import annotations

import logging
import urllib.parse
from typing import Any, Callable, Iterator, Mapping, TypeVar

import requests

from msgraphsync.auth.scopes import resource_url_or_default
from msgraphsync.auth.token import Token
from msgraphsync.errors import CommunicationError, NotFoundError, ProcessingError

from .config import ID, QuerySpec
from .models import Page, RawRecord

logger = logging.getLogger(__name__)

API_VERSION = "v1.0"
USERS_PATH = "users"

T = TypeVar("T")


def escape_filter_value(value: str) -> str:
    """Escape a string literal for an OData filter by doubling single quotes."""
    return value.replace("'", "''")


def combine_filters(configured: str | None, extra: str | None) -> str | None:
    """AND the configured filter with an extra clause.

    The configured filter is parenthesised so that ``or`` clauses inside it
    cannot swallow the extra clause.
    """
    if configured and extra:
        return f"({configured}) and {extra}"
    return configured or extra or None


class GraphUsersClient:
    """Read-only client for the Graph ``/users`` collection.

    The client owns its :class:`requests.Session` and releases it in
    :meth:`close`. It is also usable as a context manager.
    """

    def __init__(
        self,
        token: Token,
        query: QuerySpec,
        *,
        resource_url: str | None = None,
        timeout: float | None = None,
        session: requests.Session | None = None,
    ):
        """Initialize the users client.

        Args:
            token: Bearer token attached to every request.
            query: Pivot, filter, page size and select configuration.
            resource_url: Graph root; the public cloud endpoint when omitted.
            timeout: Per-request timeout in seconds, passed to ``requests``.
            session: Session to use instead of a new one. It is closed with
                the client.
        """
        self.query = query
        self.timeout = timeout
        self._headers = {
            "Authorization": token.authorization_header,
            "Accept": "application/json",
        }
        root = resource_url_or_default(resource_url).rstrip("/")
        self.users_url = f"{root}/{API_VERSION}/{USERS_PATH}"
        self._session = session if session is not None else requests.Session()

    def close(self) -> None:
        self._session.close()

    def __enter__(self) -> "GraphUsersClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    @staticmethod
    def _build_request_params(
        select: str | None = None,
        filter_: str | None = None,
        top: int | None = None,
    ) -> dict[str, Any]:
        """
        Build OData query parameters for Graph API requests.

        Args:
            select: Fields to select (e.g., "id,mail")
            filter_: OData filter expression (e.g., "accountEnabled eq true")
            top: Number of items per page

        Returns:
            Mapping of OData parameter name to value, absent parameters omitted
        """
        params: dict[str, Any] = {}

        if select:
            params["$select"] = select

        if filter_:
            params["$filter"] = filter_

        if top is not None:
            params["$top"] = top

        return params

    def _fetch(
        self,
        url: str,
        params: dict[str, Any] | None = None,
        decode: Callable[[Mapping[str, Any]], T] = dict,
    ) -> T:
        """GET ``url`` and return the decoded JSON object.

        Raises:
            NotFoundError: Graph answered 404.
            ProcessingError: Graph answered any other non-2xx status, or a
                2xx body that is not the expected JSON object.
            CommunicationError: No response was received.
        """
        logger.debug("GET %s %s", url, params or "")
        try:
            with self._session.get(
                url, headers=self._headers, params=params, timeout=self.timeout
            ) as response:
                if 200 <= response.status_code < 300:
                    try:
                        payload = response.json()
                        if not isinstance(payload, Mapping):
                            raise ValueError(
                                f"Expected a JSON object, got {type(payload).__name__}"
                            )
                        return decode(payload)
                    except ValueError as exc:
                        logger.debug("GET %s answered an unusable body: %s", url, exc)
                        raise ProcessingError(
                            response.status_code, response.text, url
                        ) from exc
                body = response.text
                status = response.status_code
        except requests.RequestException as exc:
            logger.debug("GET %s failed: %s", url, exc)
            raise CommunicationError(url, str(exc)) from exc

        logger.debug("GET %s answered %s: %s", url, status, body)
        if status == 404:
            raise NotFoundError(url, body)
        raise ProcessingError(status, body, url)

    def _paged_fetch(self, params: dict[str, Any]) -> Iterator[RawRecord]:
        """
        Fetch every page of the users collection.

        Args:
            params: OData parameters for the first request only

        Yields:
            Individual records from each page, in arrival order
        """
        page = self._fetch(self.users_url, params, Page.from_json)
        page_number = 1
        logger.info("Fetched page %s", page_number)

        while True:
            yield from page.values

            if not page.next_link:
                break

            # nextLink already contains all query params
            logger.debug("Fetching next page via @odata.nextLink")
            page = self._fetch(page.next_link, decode=Page.from_json)
            page_number += 1
            logger.info("Fetched page %s", page_number)

    def list_records(self, pivot_filter: str | None = None) -> list[RawRecord]:
        """List users matching the configured filter and ``pivot_filter``.

        Every record carries the id and the pivot attribute. Records lacking
        either one are skipped with a warning.

        Args:
            pivot_filter: Extra clause ANDed with the configured filter.

        Returns:
            Records from all pages, concatenated in page order.
        """
        params = self._build_request_params(
            select=self.query.list_select,
            filter_=combine_filters(self.query.filter_, pivot_filter),
            top=self.query.page_size,
        )

        records: list[RawRecord] = []
        for record in self._paged_fetch(params):
            if _is_blank(record.get(ID)) or _is_blank(record.get(self.query.pivot)):
                logger.warning(
                    "Skipping user without %s or %s: %s", ID, self.query.pivot, record
                )
                continue
            records.append(record)

        if not records:
            logger.info("No users were found for filter %s.", params.get("$filter"))

        return records

    def get_by_id(self, user_id: str) -> RawRecord:
        """Return one user by id, restricted to the configured ``select``."""
        url = f"{self.users_url}/{urllib.parse.quote(user_id, safe='')}"
        return self._fetch(url, self._build_request_params(select=self.query.select))

    def pivot_filter(self, pivot_value: str) -> str:
        return f"{self.query.pivot} eq '{escape_filter_value(pivot_value)}'"

    def get_first_by_pivot_value(self, pivot_value: str) -> RawRecord | None:
        """Return the first user whose pivot attribute equals ``pivot_value``."""
        records = self.list_records(self.pivot_filter(pivot_value))
        return records[0] if records else None


def _is_blank(value: Any) -> bool:
    # An object cannot serve as an id or pivot key.
    return value is None or value == "" or value == [] or isinstance(value, Mapping)
