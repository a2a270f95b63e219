"""Custom exception hierarchy for blobdrive.

All exceptions that cross layer boundaries must inherit from
:class:`BlobDriveError`.  Raw third-party exceptions (Google API
errors, ``OSError`` from the local backend) must never propagate beyond
the infrastructure layer; they are caught there and re-raised as a
typed subclass defined here.

Hierarchy
---------
BlobDriveError
├── QueryLimitExceededError
├── ObjectNotFoundError
├── StorageError
├── LocalFileError
├── ConfigurationError
├── SelectionCancelledError
└── EnvironmentError
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from blobdrive.core.models import ObjectMetadata


class BlobDriveError(Exception):
    """Base exception for all blobdrive errors.

    Every user-visible error condition maps to a subclass of this
    exception so that the CLI error boundary can render a clean message
    without leaking internal stack traces.
    """

    def __init__(self, message: str, *, hint: str | None = None) -> None:
        super().__init__(message)
        self.hint: str | None = hint
        """Optional actionable guidance shown below the error message."""


# --- Catalog queries --------------------------------------------------------

class QueryLimitExceededError(BlobDriveError):
    """Raised when more objects matched than an exact limit allows.

    Carries the limit and every matched object so the caller can
    disambiguate.  Nothing is dropped from :attr:`matches`.
    """

    def __init__(self, limit: int, matches: Sequence[ObjectMetadata]) -> None:
        self.limit: int = limit
        self.matches: tuple[ObjectMetadata, ...] = tuple(matches)
        lines = [f"Found more than {limit} files:"]
        lines.extend(f"  {obj.id}  {obj.name}" for obj in self.matches)
        super().__init__(
            "\n".join(lines),
            hint="Narrow the name filter, or pass --id with one of the identifiers above.",
        )


class ObjectNotFoundError(BlobDriveError):
    """Raised when a name resolves to no remote object."""

    def __init__(self, name: str) -> None:
        self.name: str = name
        super().__init__(
            f"No such file named {name}",
            hint="Run 'blobdrive ls' to see the available files.",
        )


# --- Remote storage ---------------------------------------------------------

class StorageError(BlobDriveError):
    """Raised when the remote storage backend fails."""


# --- Local side -------------------------------------------------------------

class LocalFileError(BlobDriveError):
    """Raised when a local file cannot be read, written or deleted."""


class ConfigurationError(BlobDriveError):
    """Raised when the environment configuration is invalid."""


class SelectionCancelledError(BlobDriveError):
    """Raised when the user cancels an interactive selection."""


# --- Environment / tooling --------------------------------------------------

class EnvironmentError(BlobDriveError):
    """Raised when a required runtime dependency is not available."""


def missing_dependency(*packages: str) -> EnvironmentError:
    """Build the error raised when a lazily imported library is missing."""
    names = " ".join(packages)
    return EnvironmentError(
        f"{names} is not installed. Install with: pip install {names}",
    )
