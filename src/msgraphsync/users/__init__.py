"""Microsoft Graph users as a synchronization source.

Public API:
- UsersSourceService (pivot resolution for the synchronization engine)
- GraphUsersClient (paginated /users queries)
- QuerySpec (settings)
- normalize() (record flattening)
"""

from .client import GraphUsersClient
from .config import QuerySpec
from .mapper import normalize
from .models import Entity, Failed, Found, NotFound
from .service import UsersSourceService

__all__ = [
    "Entity",
    "Failed",
    "Found",
    "GraphUsersClient",
    "NotFound",
    "QuerySpec",
    "UsersSourceService",
    "normalize",
]
