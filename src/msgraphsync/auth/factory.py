from __future__ import annotations

import logging

from azure.core.exceptions import AzureError, ClientAuthenticationError
from azure.identity import ClientSecretCredential

from msgraphsync.errors import AuthorizationError

from .config import ConnectionSettings
from .scopes import authentication_url_or_default, scope_from_resource_url
from .token import Token

logger = logging.getLogger(__name__)


def get_credential(
    tenant: str,
    authentication_url: str | None,
    client_id: str,
    client_secret: str,
) -> ClientSecretCredential:
    """Construct the client-credentials :class:`ClientSecretCredential`.

    Args:
        tenant: Directory (tenant) id or domain.
        authentication_url: Authority host; the public cloud login endpoint
            is used when empty.
        client_id: Application (client) id.
        client_secret: Application secret.

    Returns:
        A credential that posts to ``<authority>/<tenant>/oauth2/v2.0/token``.
    """
    return ClientSecretCredential(
        tenant_id=tenant,
        client_id=client_id,
        client_secret=client_secret,
        authority=authentication_url_or_default(authentication_url),
    )


def authenticate(
    tenant: str,
    authentication_url: str | None,
    resource_url: str | None,
    client_id: str,
    client_secret: str,
) -> Token:
    """Exchange client credentials for a bearer token.

    A single attempt is made. The token is not refreshed: callers needing a
    fresh one must authenticate again.

    Raises:
        AuthorizationError: The token endpoint answered with an error, or
            could not be reached at all, or the tenant or authority was
            refused before any request was made.
    """
    scope = scope_from_resource_url(resource_url)
    try:
        with get_credential(
            tenant, authentication_url, client_id, client_secret
        ) as credential:
            access_token = credential.get_token(scope)
    except ClientAuthenticationError as exc:
        logger.debug("Token request for tenant %s rejected: %s", tenant, exc.message)
        raise AuthorizationError(exc.message or str(exc)) from exc
    except AzureError as exc:
        logger.debug("Token request for tenant %s failed: %s", tenant, exc)
        raise AuthorizationError(exc.message or str(exc)) from exc
    except ValueError as exc:
        # azure-identity rejects a malformed tenant or a non-https authority
        # while building the credential.
        logger.debug("Credential for tenant %s refused: %s", tenant, exc)
        raise AuthorizationError(str(exc)) from exc

    return Token(access_token=access_token.token, expires_on=access_token.expires_on)


def authenticate_with(settings: ConnectionSettings) -> Token:
    return authenticate(
        settings.tenant,
        settings.authentication_url,
        settings.resource_url,
        settings.client_id,
        settings.client_secret.get_secret_value(),
    )
