"""Infrastructure layer — external system integration.

This layer wraps all interaction with the Google Drive API and the
local filesystem store.  Every raw third-party exception must be caught
here and re-raised as a :class:`~blobdrive.exceptions.BlobDriveError`
subclass.

Rules
-----
* No imports from ``cli``.
* No user-facing output (no ``print()``, no Rich rendering).
* Must expose clean, typed interfaces consumed by the core layer.
"""

from blobdrive.infra.gdrive_storage import GoogleDriveStorage
from blobdrive.infra.local_storage import LocalDirectoryStorage
from blobdrive.infra.storage_factory import build_storage

__all__: list[str] = [
    "GoogleDriveStorage",
    "LocalDirectoryStorage",
    "build_storage",
]
