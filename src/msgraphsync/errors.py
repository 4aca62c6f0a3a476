"""Exceptions raised by the Microsoft Graph users connector."""

from __future__ import annotations


class MsGraphSyncError(Exception):
    """Base exception for all connector operations."""


class AuthorizationError(MsGraphSyncError):
    """The token endpoint rejected the credentials or could not be reached.

    Attributes:
        body: Raw error text returned by the identity provider, or the
            transport error message when no response was received.
    """

    def __init__(self, body: str):
        self.body = body
        super().__init__(body)


class NotFoundError(MsGraphSyncError):
    """Graph answered 404 for the requested resource."""

    def __init__(self, url: str, body: str = ""):
        self.url = url
        self.body = body
        super().__init__(f"[404] {url}")


class ProcessingError(MsGraphSyncError):
    """Graph answered with a non-2xx status other than 404.

    Attributes:
        status_code: HTTP status code.
        body: Raw response body.
        url: URL of the failing request.
    """

    def __init__(self, status_code: int, body: str, url: str):
        self.status_code = status_code
        self.body = body
        self.url = url
        super().__init__(f"[{status_code}] {url}: {body}")


class CommunicationError(MsGraphSyncError):
    """The request never produced a response (DNS, TLS, timeout, reset...)."""

    def __init__(self, url: str, reason: str = ""):
        self.url = url
        self.reason = reason
        super().__init__(f"{url}: {reason}" if reason else url)


class ServiceError(MsGraphSyncError):
    """Graph rejected a lookup or listing; raised to the synchronization engine."""


class ConfigurationError(MsGraphSyncError):
    """Connection or service configuration is missing or inconsistent."""
