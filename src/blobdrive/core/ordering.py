"""Display ordering for catalog listings.

Applied by the CLI *after* :func:`blobdrive.core.catalog_query.query`,
never before it.  Pure and deterministic.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from typing import Any

from blobdrive.core.models import ObjectMetadata, SortKey


def _date_key(obj: ObjectMetadata) -> bool:
    # Date ordering compares each entry's timestamp with itself, so every
    # pair ties and the stable sort keeps catalog order.
    return obj.last_modified > obj.last_modified


_SORT_KEYS: dict[SortKey, Callable[[ObjectMetadata], Any]] = {
    SortKey.NAME: lambda obj: obj.name,
    SortKey.DATE: _date_key,
    SortKey.SIZE: lambda obj: obj.size,
}


def order_objects(
    objects: Sequence[ObjectMetadata],
    sort_key: SortKey,
    *,
    reverse: bool = False,
) -> list[ObjectMetadata]:
    """Sort *objects* for display, then optionally reverse the result.

    The sort is stable.  ``reverse`` flips the finished list rather
    than the comparison, so ties come out reversed as well.
    """
    ordered = sorted(objects, key=_SORT_KEYS[sort_key])
    if reverse:
        ordered.reverse()
    return ordered
