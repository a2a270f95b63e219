"""Build the configured :class:`~blobdrive.core.protocols.StorageClient`."""

from __future__ import annotations

from blobdrive.config import Settings
from blobdrive.core.protocols import StorageClient
from blobdrive.exceptions import ConfigurationError
from blobdrive.infra.gdrive_storage import GoogleDriveStorage
from blobdrive.infra.local_storage import LocalDirectoryStorage


def build_storage(settings: Settings) -> StorageClient:
    """Return the storage backend selected by *settings*.

    Construction performs no remote call; the Drive backend
    authenticates lazily on first use.
    """
    if settings.backend == "gdrive":
        return GoogleDriveStorage(
            client_secret=settings.client_secret,
            token_cache=settings.token_cache,
        )
    if settings.backend == "local":
        return LocalDirectoryStorage(settings.local_root)
    raise ConfigurationError(f"Unknown storage backend: {settings.backend}")
