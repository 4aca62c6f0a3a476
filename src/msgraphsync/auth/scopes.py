from typing import Final
from urllib.parse import urlparse

DEFAULT_AUTHENTICATION_URL: Final[str] = "https://login.microsoftonline.com/"
DEFAULT_RESOURCE_URL: Final[str] = "https://graph.microsoft.com"
DEFAULT_SCOPE_SUFFIX: Final[str] = "/.default"

GRAPH_DEFAULT_SCOPE: Final[str] = DEFAULT_RESOURCE_URL + DEFAULT_SCOPE_SUFFIX


def authority_from_url(url: str) -> str:
    """Return the URL authority (scheme + host).

    Args:
        url: Absolute endpoint URL (e.g., "https://login.microsoftonline.com/").

    Returns:
        The "<scheme>://<host>" portion of the URL.

    Raises:
        ValueError: If ``url`` is not absolute or lacks a host.
    """
    parsed = urlparse(url)
    if not parsed.scheme or not parsed.netloc:
        raise ValueError("url must be an absolute URL")
    return f"{parsed.scheme}://{parsed.netloc}"


def authentication_url_or_default(authentication_url: str | None) -> str:
    return authentication_url or DEFAULT_AUTHENTICATION_URL


def resource_url_or_default(resource_url: str | None) -> str:
    return resource_url or DEFAULT_RESOURCE_URL


def scope_from_resource_url(resource_url: str | None) -> str:
    """Return the client-credentials scope for a resource endpoint.

    A single trailing slash is dropped before the ``/.default`` suffix is
    appended, so ``https://graph.microsoft.com/`` and
    ``https://graph.microsoft.com`` yield the same scope.
    """
    resource = resource_url_or_default(resource_url)
    if resource.endswith("/"):
        resource = resource[:-1]
    return resource + DEFAULT_SCOPE_SUFFIX
