"""Directory-backed implementation of :class:`~blobdrive.core.protocols.StorageClient`.

Each object is stored as two files inside the root directory:

* ``<id>.blob`` — the raw content.
* ``<id>.json`` — a sidecar holding the display name.

Size and modification time are taken from the blob file itself.  All
``OSError`` and decoding failures are re-raised as
:class:`~blobdrive.exceptions.StorageError`.
"""

from __future__ import annotations

import json
import uuid
from datetime import datetime, timezone
from pathlib import Path

from loguru import logger

from blobdrive.core.models import ObjectMetadata
from blobdrive.exceptions import StorageError

_BLOB_SUFFIX = ".blob"
_META_SUFFIX = ".json"


def _rfc3339(timestamp: float) -> str:
    """Render a POSIX timestamp the way Drive reports ``modifiedTime``."""
    moment = datetime.fromtimestamp(timestamp, tz=timezone.utc)
    return moment.strftime("%Y-%m-%dT%H:%M:%S.") + f"{moment.microsecond // 1000:03d}Z"


class LocalDirectoryStorage:
    """Concrete :class:`StorageClient` keeping objects in a local directory.

    The directory is created on first use.  Catalog order is ascending
    ``(last_modified, id)``.
    """

    def __init__(self, root: Path) -> None:
        self._root: Path = root

    @property
    def root(self) -> Path:
        return self._root

    # ------------------------------------------------------------------
    # Protocol methods
    # ------------------------------------------------------------------

    def list(self) -> list[ObjectMetadata]:
        if not self._root.is_dir():
            return []
        try:
            objects = [
                self._describe(blob.name[: -len(_BLOB_SUFFIX)])
                for blob in self._root.glob(f"*{_BLOB_SUFFIX}")
            ]
        except OSError as exc:
            raise StorageError(f"Failed to list {self._root}: {exc}") from exc
        objects.sort(key=lambda obj: (obj.last_modified, obj.id))
        return objects

    def create(self, name: str) -> str:
        object_id = uuid.uuid4().hex
        try:
            self._root.mkdir(parents=True, exist_ok=True)
            self._blob_path(object_id).write_bytes(b"")
            self._meta_path(object_id).write_text(
                json.dumps({"name": name}, ensure_ascii=False),
                encoding="utf-8",
            )
        except OSError as exc:
            raise StorageError(f"Failed to create {name}: {exc}") from exc
        logger.debug("Local store created {} in {}", object_id, self._root)
        return object_id

    def update(self, object_id: str, data: bytes) -> None:
        blob = self._existing_blob(object_id)
        try:
            blob.write_bytes(data)
        except OSError as exc:
            raise StorageError(f"Failed to write {object_id}: {exc}") from exc

    def get(self, object_id: str) -> bytes:
        blob = self._existing_blob(object_id)
        try:
            return blob.read_bytes()
        except OSError as exc:
            raise StorageError(f"Failed to read {object_id}: {exc}") from exc

    def delete(self, object_id: str) -> None:
        blob = self._existing_blob(object_id)
        try:
            blob.unlink()
            self._meta_path(object_id).unlink(missing_ok=True)
        except OSError as exc:
            raise StorageError(f"Failed to delete {object_id}: {exc}") from exc

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _blob_path(self, object_id: str) -> Path:
        return self._root / f"{object_id}{_BLOB_SUFFIX}"

    def _meta_path(self, object_id: str) -> Path:
        return self._root / f"{object_id}{_META_SUFFIX}"

    def _existing_blob(self, object_id: str) -> Path:
        """Return the blob path for *object_id* or raise ``StorageError``."""
        # Identifiers are opaque, but must not escape the root directory.
        if not object_id or "/" in object_id or "\\" in object_id or object_id.startswith("."):
            raise StorageError(f"Invalid object id: {object_id!r}")
        blob = self._blob_path(object_id)
        if not blob.is_file():
            raise StorageError(
                f"No object with id {object_id}",
                hint="Run 'blobdrive ls --display all' to see identifiers.",
            )
        return blob

    def _describe(self, object_id: str) -> ObjectMetadata:
        blob = self._blob_path(object_id)
        stat = blob.stat()
        try:
            meta = json.loads(self._meta_path(object_id).read_text(encoding="utf-8"))
            name = str(meta["name"])
        except FileNotFoundError:
            name = object_id
        except (ValueError, KeyError, TypeError) as exc:
            raise StorageError(f"Corrupt metadata for {object_id}: {exc}") from exc
        return ObjectMetadata(
            id=object_id,
            name=name,
            size=stat.st_size,
            last_modified=_rfc3339(stat.st_mtime),
        )
