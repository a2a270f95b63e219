"""Pure catalog filtering and limit enforcement.

Every function in this module is a **pure** transformation — no I/O,
no side effects, fully deterministic, and trivially unit-testable.

Pipeline order (enforced by :func:`query`):

1. **Filter** — keep objects whose name contains the filter string.
2. **Limit** — apply the :data:`~blobdrive.core.models.LimitPolicy`.

Output always keeps the catalog's original order.  Display ordering is
a separate stage (:mod:`blobdrive.core.ordering`) applied afterwards,
so ``Capped`` truncation happens on the raw catalog order.
"""

from __future__ import annotations

from collections.abc import Sequence
from itertools import islice

from blobdrive.core.models import Capped, Exact, LimitPolicy, ObjectMetadata, Unbounded
from blobdrive.exceptions import QueryLimitExceededError


# ---------------------------------------------------------------------------
# 1. Filter
# ---------------------------------------------------------------------------

def filter_by_name(
    objects: Sequence[ObjectMetadata],
    name_filter: str | None,
) -> list[ObjectMetadata]:
    """Return objects whose ``name`` contains *name_filter*.

    Plain case-sensitive substring containment, no glob or regex
    semantics.  ``None`` keeps everything.
    """
    if name_filter is None:
        return list(objects)
    return [obj for obj in objects if name_filter in obj.name]


# ---------------------------------------------------------------------------
# 2. Limit
# ---------------------------------------------------------------------------

def apply_limit(
    objects: Sequence[ObjectMetadata],
    limit: LimitPolicy,
) -> list[ObjectMetadata]:
    """Apply *limit* to an already filtered sequence.

    Raises
    ------
    QueryLimitExceededError
        When *limit* is :class:`Exact` and more objects are present than
        it allows.  The error carries every object in *objects*.
    """
    if isinstance(limit, Unbounded):
        return list(objects)
    if isinstance(limit, Capped):
        return list(islice(objects, limit.count))
    if isinstance(limit, Exact):
        matches = list(objects)
        if len(matches) > limit.count:
            raise QueryLimitExceededError(limit.count, matches)
        return matches
    raise TypeError(f"Unknown limit policy: {limit!r}")


# ---------------------------------------------------------------------------
# Composite pipeline
# ---------------------------------------------------------------------------

def query(
    objects: Sequence[ObjectMetadata],
    name_filter: str | None,
    limit: LimitPolicy,
) -> list[ObjectMetadata]:
    """Run the full filter → limit pipeline over a catalog snapshot."""
    return apply_limit(filter_by_name(objects, name_filter), limit)
