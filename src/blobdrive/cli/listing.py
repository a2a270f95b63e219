"""Plain-text rendering of catalog listings for ``blobdrive ls``.

Rows are written to stdout one object per line so the output can be
piped into other tools.  Column order is fixed regardless of the order
in which ``--display`` values were given.
"""

from __future__ import annotations

import enum
from collections.abc import Iterable, Sequence

from blobdrive.core.models import ObjectMetadata


class Column(str, enum.Enum):
    """A selectable listing column (``--display`` value)."""

    ALL = "all"
    ID = "id"
    NAME = "name"
    SIZE = "size"
    DATE = "date"


DEFAULT_COLUMNS: tuple[Column, ...] = (Column.DATE, Column.SIZE, Column.NAME)
COLUMN_SEPARATOR = "  "
SIZE_WIDTH = 10


def parse_columns(values: Iterable[str]) -> tuple[Column, ...]:
    """Parse ``--display`` values, accepting comma-separated groups.

    Raises
    ------
    ValueError
        If a value is not a known column name.
    """
    columns: list[Column] = []
    for value in values:
        for part in value.split(","):
            part = part.strip()
            if part:
                columns.append(Column(part))
    return tuple(columns)


def _cells(obj: ObjectMetadata, columns: Sequence[Column]) -> list[str]:
    show_all = Column.ALL in columns
    cells: list[str] = []
    if show_all or Column.DATE in columns:
        cells.append(obj.last_modified)
    if show_all or Column.SIZE in columns:
        cells.append(f"{obj.size:>{SIZE_WIDTH}}")
    if show_all or Column.ID in columns:
        cells.append(obj.id)
    if show_all or Column.NAME in columns:
        cells.append(obj.name)
    return cells


def format_rows(
    objects: Sequence[ObjectMetadata],
    columns: Sequence[Column] = DEFAULT_COLUMNS,
) -> list[str]:
    """Return one display line per object, in the given order."""
    return [COLUMN_SEPARATOR.join(_cells(obj, columns)) for obj in objects]
