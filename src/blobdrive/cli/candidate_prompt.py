"""Interactive disambiguation of ambiguous names (``--pick``).

This module is responsible for:

* Rendering a Rich table of the objects that matched a name.
* Prompting the user to choose one via questionary arrow keys.
* Returning the chosen object's identifier.

All display-related logic lives here — no catalog queries, no
transfers.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from blobdrive.cli.console import console, escape
from blobdrive.core.models import ObjectMetadata
from blobdrive.exceptions import SelectionCancelledError, missing_dependency


def _import_questionary() -> Any:
    """Import questionary lazily for interactive selection."""
    try:
        import questionary
    except ModuleNotFoundError as exc:
        raise missing_dependency("questionary") from exc
    return questionary


def _import_rich_table() -> type[Any]:
    """Import rich table lazily for candidate rendering."""
    try:
        from rich.table import Table
    except ModuleNotFoundError as exc:
        raise missing_dependency("rich") from exc
    return Table


# ---------------------------------------------------------------------------
# Presentation helpers (pure transforms — no I/O themselves)
# ---------------------------------------------------------------------------

def _format_size(size: int) -> str:
    """Render a byte count with a binary unit suffix."""
    value = float(size)
    for unit in ("B", "KiB", "MiB", "GiB"):
        if value < 1024:
            return f"{value:.0f} {unit}" if unit == "B" else f"{value:.1f} {unit}"
        value /= 1024
    return f"{value:.1f} TiB"


def _build_choice_label(index: int, obj: ObjectMetadata) -> str:
    """Build the single-line label shown in the questionary selector.

    Format: ``"  1.  report.txt   2.0 KiB   2024-01-01T00:00:00Z"``
    """
    size = _format_size(obj.size)
    return f"  {index + 1}.  {obj.name:<32} {size:>10}   {obj.last_modified}"


# ---------------------------------------------------------------------------
# Rich table display
# ---------------------------------------------------------------------------

def _display_candidate_table(target: str, candidates: Sequence[ObjectMetadata]) -> None:
    """Print a Rich table of every object that matched *target*."""
    table_class = _import_rich_table()

    console.print()
    console.print(
        f"[bold yellow]{len(candidates)} files match[/bold yellow] {escape(target)}"
    )

    table = table_class(
        show_header=True,
        header_style="bold magenta",
        border_style="dim",
    )
    table.add_column("#", justify="right", style="dim", width=4)
    table.add_column("Name", justify="left", min_width=12)
    table.add_column("Size", justify="right", min_width=10)
    table.add_column("Modified", justify="left")
    table.add_column("ID", justify="left", style="dim")

    for i, obj in enumerate(candidates, start=1):
        table.add_row(
            str(i),
            escape(obj.name),
            _format_size(obj.size),
            obj.last_modified,
            obj.id,
        )

    console.print(table)
    console.print()


# ---------------------------------------------------------------------------
# Public prompt function
# ---------------------------------------------------------------------------

def prompt_candidate_selection(
    target: str,
    candidates: Sequence[ObjectMetadata],
) -> str:
    """Display *candidates* and ask the user to pick one.

    Returns
    -------
    str
        The ``id`` of the chosen object.

    Raises
    ------
    SelectionCancelledError
        If the user cancels the prompt (Esc / Ctrl+C returns ``None``).
    """
    questionary = _import_questionary()

    _display_candidate_table(target, candidates)

    choices = [
        questionary.Choice(title=_build_choice_label(i, obj), value=obj.id)
        for i, obj in enumerate(candidates)
    ]

    selected: str | None = questionary.select(
        f"Which file did you mean by '{target}'?",
        choices=choices,
        use_arrow_keys=True,
        use_shortcuts=False,
    ).ask()

    if selected is None:
        raise SelectionCancelledError(
            "No file selected.",
            hint="Use arrow keys to pick a file, then press Enter.",
        )

    return selected
