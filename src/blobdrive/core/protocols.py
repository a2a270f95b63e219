"""Protocols (interfaces) consumed by the core layer.

These define the contracts that infrastructure adapters must satisfy.
Core code depends ONLY on these protocols — never on concrete
implementations — preserving the dependency inversion principle.
"""

from __future__ import annotations

from typing import Protocol

from blobdrive.core.models import ObjectMetadata


class StorageClient(Protocol):
    """Contract for remote blob store backends.

    Every method blocks until the remote call completes.  Any object
    that implements these methods satisfies the protocol structurally
    (no explicit inheritance required).

    Implementations must map all backend-specific exceptions to
    :class:`~blobdrive.exceptions.StorageError` (or another
    :class:`~blobdrive.exceptions.BlobDriveError` subclass).
    """

    def list(self) -> list[ObjectMetadata]:
        """Return the full catalog of remote objects."""
        ...  # pragma: no cover

    def create(self, name: str) -> str:
        """Create an empty remote object called *name* and return its id."""
        ...  # pragma: no cover

    def update(self, object_id: str, data: bytes) -> None:
        """Replace the content of *object_id* with *data*."""
        ...  # pragma: no cover

    def get(self, object_id: str) -> bytes:
        """Return the content of *object_id*."""
        ...  # pragma: no cover

    def delete(self, object_id: str) -> None:
        """Remove *object_id* from the store."""
        ...  # pragma: no cover
