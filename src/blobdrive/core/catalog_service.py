"""Core catalog service — listing and name resolution.

This is the central service class consumed by the CLI layer.  It
depends on a :class:`~blobdrive.core.protocols.StorageClient` injected
at construction time (dependency inversion), keeping the core free of
any external-system imports.

Listings and name resolution share one path: resolution is a listing
with an ``Exact(1)`` limit, so there is a single "too many matches"
failure in the whole application.

Guarantees
----------
* Pure orchestration — no ``print()``, no filesystem access.
* Exactly one catalog fetch per call.
* Only :class:`~blobdrive.exceptions.BlobDriveError` subclasses escape.
"""

from __future__ import annotations

from loguru import logger

from blobdrive.core.catalog_query import query
from blobdrive.core.models import Exact, LimitPolicy, ObjectMetadata, Unbounded
from blobdrive.core.protocols import StorageClient
from blobdrive.exceptions import BlobDriveError, ObjectNotFoundError, StorageError


class CatalogService:
    """Stateless service that queries the remote catalog.

    Parameters
    ----------
    storage:
        Any object satisfying the :class:`StorageClient` protocol.
    """

    def __init__(self, storage: StorageClient) -> None:
        self._storage: StorageClient = storage

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def list_objects(
        self,
        name_filter: str | None = None,
        limit: LimitPolicy | None = None,
    ) -> list[ObjectMetadata]:
        """Fetch the catalog and return the filtered, limited subset.

        Objects come back in catalog order; sorting for display is the
        caller's job.

        Raises
        ------
        QueryLimitExceededError
            If *limit* is ``Exact(n)`` and more than ``n`` objects match.
        StorageError
            If the storage backend fails.
        """
        catalog = self._fetch()
        return query(catalog, name_filter, limit if limit is not None else Unbounded())

    def resolve(self, name_or_id: str, *, treat_as_id: bool = False) -> str:
        """Turn a user-supplied name into exactly one object identifier.

        With *treat_as_id* the input is returned unchanged and the
        catalog is not fetched.

        Raises
        ------
        ObjectNotFoundError
            If no object name contains *name_or_id*.
        QueryLimitExceededError
            If more than one object name contains *name_or_id*.  The
            error lists every candidate.
        StorageError
            If the storage backend fails.
        """
        if treat_as_id:
            return name_or_id

        matches = self.list_objects(name_or_id, Exact(1))
        if not matches:
            raise ObjectNotFoundError(name_or_id)

        object_id = matches[0].id
        logger.debug("Resolved {!r} to {}", name_or_id, object_id)
        return object_id

    # ------------------------------------------------------------------
    # Storage delegation (safe boundary)
    # ------------------------------------------------------------------

    def _fetch(self) -> list[ObjectMetadata]:
        """Call the backend and ensure only our exceptions escape."""
        try:
            catalog = self._storage.list()
        except BlobDriveError:
            raise
        except Exception as exc:
            raise StorageError(f"Unexpected storage error: {exc}") from exc
        logger.debug("Fetched catalog with {} objects", len(catalog))
        return catalog
