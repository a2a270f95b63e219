"""Shared pytest fixtures and configuration for the blobdrive test suite.

Guidelines
----------
* No internet access in any test.
* The Google API client must be mocked at the infra boundary.
* Core tests must be pure — no side effects.
* Tests must not depend on the caller's ``BLOBDRIVE_*`` environment.
"""

from __future__ import annotations

from collections.abc import Iterator

import pytest

from blobdrive.core.models import ObjectMetadata
from blobdrive.exceptions import StorageError


class MemoryStorage:
    """In-memory :class:`StorageClient` with a fixed catalog order."""

    def __init__(self) -> None:
        self.objects: dict[str, ObjectMetadata] = {}
        self.contents: dict[str, bytes] = {}
        self.list_calls: int = 0
        self._next_id: int = 1

    def add(self, name: str, data: bytes = b"", *, last_modified: str = "2024-01-01T00:00:00.000Z") -> str:
        object_id = f"id{self._next_id}"
        self._next_id += 1
        self.objects[object_id] = ObjectMetadata(
            id=object_id, name=name, size=len(data), last_modified=last_modified,
        )
        self.contents[object_id] = data
        return object_id

    def list(self) -> list[ObjectMetadata]:
        self.list_calls += 1
        return list(self.objects.values())

    def create(self, name: str) -> str:
        return self.add(name)

    def update(self, object_id: str, data: bytes) -> None:
        if object_id not in self.objects:
            raise StorageError(f"No object with id {object_id}")
        old = self.objects[object_id]
        self.objects[object_id] = ObjectMetadata(
            id=object_id, name=old.name, size=len(data), last_modified=old.last_modified,
        )
        self.contents[object_id] = data

    def get(self, object_id: str) -> bytes:
        if object_id not in self.contents:
            raise StorageError(f"No object with id {object_id}")
        return self.contents[object_id]

    def delete(self, object_id: str) -> None:
        if object_id not in self.objects:
            raise StorageError(f"No object with id {object_id}")
        del self.objects[object_id]
        del self.contents[object_id]


@pytest.fixture(autouse=True)
def _clean_environment(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    for name in (
        "BLOBDRIVE_BACKEND",
        "BLOBDRIVE_CACHE_DIR",
        "BLOBDRIVE_CLIENT_SECRET",
        "BLOBDRIVE_LOCAL_ROOT",
        "BLOBDRIVE_LOG_LEVEL",
    ):
        monkeypatch.delenv(name, raising=False)
    yield


@pytest.fixture
def memory_storage() -> MemoryStorage:
    return MemoryStorage()


@pytest.fixture
def use_storage(monkeypatch: pytest.MonkeyPatch, memory_storage: MemoryStorage) -> MemoryStorage:
    """Route every CLI command to :func:`memory_storage`."""
    from blobdrive.cli import app as app_module

    monkeypatch.setattr(app_module, "build_storage", lambda settings: memory_storage)
    return memory_storage
