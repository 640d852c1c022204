from .types import (
    RemoteObjectRecord,
    Found,
    NotFound,
    TransportError,
    LookupResult,
    ContentStoreError,
    StoreObjectNotFound,
)
from .github_client import ContentStoreClient

__all__ = [
    "RemoteObjectRecord", "Found", "NotFound", "TransportError", "LookupResult",
    "ContentStoreError", "StoreObjectNotFound",
    "ContentStoreClient",
]
