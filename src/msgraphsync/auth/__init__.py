"""Authentication helpers for the Microsoft Graph users connector.

Public API:
- authenticate(), authenticate_with() → Token
- get_credential() → ClientSecretCredential
- ConnectionSettings (settings)
- Token (bearer token)
- GRAPH_DEFAULT_SCOPE (constant for Microsoft Graph)
- scope_from_resource_url(), authority_from_url() (scope helpers)
"""

from .config import ConnectionSettings
from .factory import authenticate, authenticate_with, get_credential
from .scopes import GRAPH_DEFAULT_SCOPE, authority_from_url, scope_from_resource_url
from .token import Token

__all__ = [
    "ConnectionSettings",
    "Token",
    "authenticate",
    "authenticate_with",
    "get_credential",
    "GRAPH_DEFAULT_SCOPE",
    "scope_from_resource_url",
    "authority_from_url",
]
