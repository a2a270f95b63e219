"""Core / service layer — pure business logic and data transformations.

Rules
-----
* No ``print()`` calls.
* No filesystem or network I/O.
* No imports from ``cli`` or ``infra``.
* Logging goes through loguru at debug level only.
"""

from blobdrive.core.catalog_query import query
from blobdrive.core.catalog_service import CatalogService
from blobdrive.core.models import (
    Capped,
    Exact,
    LimitPolicy,
    ObjectMetadata,
    SortKey,
    Unbounded,
    limit_policy_from_flags,
)
from blobdrive.core.ordering import order_objects
from blobdrive.core.protocols import StorageClient
from blobdrive.core.transfer_service import TransferService

__all__: list[str] = [
    "CatalogService",
    "Capped",
    "Exact",
    "LimitPolicy",
    "ObjectMetadata",
    "SortKey",
    "StorageClient",
    "TransferService",
    "Unbounded",
    "limit_policy_from_flags",
    "order_objects",
    "query",
]
