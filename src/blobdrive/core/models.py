"""Domain models for blobdrive.

All models are **frozen** dataclasses — immutable value objects with no
behaviour beyond data access and validation.  They carry zero I/O and
no dependencies on external packages.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Union


# ---------------------------------------------------------------------------
# Remote object descriptor
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class ObjectMetadata:
    """Snapshot of one remote file as reported by a single list call."""

    id: str
    """Opaque, stable and unique identifier assigned by the store."""

    name: str
    """Display name.  Not guaranteed to be unique."""

    size: int
    """Size in bytes."""

    last_modified: str
    """Modification timestamp (RFC 3339 string as reported by the store)."""


# ---------------------------------------------------------------------------
# Limit policies
# ---------------------------------------------------------------------------

def _check_count(count: int) -> None:
    if count < 0:
        raise ValueError(f"limit must be non-negative, got {count}")


@dataclass(frozen=True, slots=True)
class Unbounded:
    """No cap on the number of matches."""


@dataclass(frozen=True, slots=True)
class Capped:
    """Keep at most the first ``count`` matches, dropping the rest silently."""

    count: int

    def __post_init__(self) -> None:
        _check_count(self.count)


@dataclass(frozen=True, slots=True)
class Exact:
    """Keep every match, but fail when more than ``count`` matched.

    Never truncates.
    """

    count: int

    def __post_init__(self) -> None:
        _check_count(self.count)


LimitPolicy = Union[Unbounded, Capped, Exact]


def limit_policy_from_flags(
    limit_one: bool,
    limit: int | None,
    force_limit: bool,
) -> LimitPolicy:
    """Translate the ``ls`` limit flags into a :data:`LimitPolicy`.

    ``--limit-one`` is shorthand for ``--limit 1 --force-limit`` and
    wins over the other two flags.  ``--force-limit`` without
    ``--limit`` has no effect.
    """
    if limit_one:
        return Exact(1)
    if limit is not None and force_limit:
        return Exact(limit)
    if limit is not None:
        return Capped(limit)
    return Unbounded()


# ---------------------------------------------------------------------------
# Display ordering
# ---------------------------------------------------------------------------

class SortKey(str, enum.Enum):
    """Attribute used to order a listing for display."""

    NAME = "name"
    DATE = "date"
    SIZE = "size"
