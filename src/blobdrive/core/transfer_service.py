"""Core transfer service — upload, download and removal of objects.

This service delegates every remote call to a
:class:`~blobdrive.core.protocols.StorageClient` injected at
construction time.  It is responsible for:

* Choosing between creating a new object and overwriting an existing one.
* Ensuring only :class:`~blobdrive.exceptions.BlobDriveError` subclasses
  escape.

Local file handling stays in the CLI layer.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import TypeVar

from loguru import logger

from blobdrive.core.protocols import StorageClient
from blobdrive.exceptions import BlobDriveError, StorageError

_T = TypeVar("_T")


class TransferService:
    """Stateless service that moves bytes to and from the store.

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

    def upload(self, data: bytes, name: str, *, object_id: str | None = None) -> str:
        """Store *data* and return the identifier of the remote object.

        Parameters
        ----------
        data:
            Content to upload.
        name:
            Remote name for a newly created object.  Ignored when
            *object_id* is given.
        object_id:
            Existing object to overwrite in place.  When ``None`` a new
            object called *name* is created first.

        Raises
        ------
        StorageError
            When either remote call fails.
        """
        if object_id is None:
            object_id = self._call("create remote file", self._storage.create, name)
            logger.debug("Created remote object {} named {!r}", object_id, name)
        self._call("upload data", self._storage.update, object_id, data)
        logger.debug("Uploaded {} bytes to {}", len(data), object_id)
        return object_id

    def download(self, object_id: str) -> bytes:
        """Return the content of *object_id*."""
        data = self._call("download data", self._storage.get, object_id)
        logger.debug("Downloaded {} bytes from {}", len(data), object_id)
        return data

    def remove(self, object_id: str) -> str:
        """Delete *object_id* and return it."""
        self._call("delete remote file", self._storage.delete, object_id)
        logger.debug("Deleted remote object {}", object_id)
        return object_id

    # ------------------------------------------------------------------
    # Storage delegation (safe boundary)
    # ------------------------------------------------------------------

    @staticmethod
    def _call(action: str, func: Callable[..., _T], *args: object) -> _T:
        try:
            return func(*args)
        except BlobDriveError:
            raise
        except Exception as exc:
            raise StorageError(f"Failed to {action}: {exc}") from exc
