"""CLI application entry point and command routing for blobdrive.

This module is the **sole error boundary** for the entire application.
It catches :class:`~blobdrive.exceptions.BlobDriveError`,
``KeyboardInterrupt``, and any unexpected ``Exception``, rendering
user-friendly messages on stderr and returning well-defined exit codes.

Architecture notes
------------------
* No business logic lives here — catalog queries, name resolution and
  transfers are delegated to the core services.
* Command data (listings, identifiers, file content) is written to
  stdout; everything meant for humans goes to stderr.
* This module is the only place that translates between the domain
  world and the OS process exit code.
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from blobdrive.cli import exit_codes
from blobdrive.cli.console import console, emit_bytes, emit_line, escape
from blobdrive.cli.listing import DEFAULT_COLUMNS, Column, format_rows, parse_columns
from blobdrive.config import Settings, load_settings
from blobdrive.core.catalog_service import CatalogService
from blobdrive.core.models import SortKey, limit_policy_from_flags
from blobdrive.core.ordering import order_objects
from blobdrive.core.protocols import StorageClient
from blobdrive.core.transfer_service import TransferService
from blobdrive.exceptions import BlobDriveError, LocalFileError, QueryLimitExceededError
from blobdrive.infra.storage_factory import build_storage
from blobdrive.logging_config import setup_logging
from blobdrive.version import __version__

ABOUT = (
    "Manage files backed up to a cloud drive.\n\n"
    "When uploading files with sensitive info, consider encrypting them first."
)
STDIN_NAME = "STDIN"


# ---------------------------------------------------------------------------
# Argument parser
# ---------------------------------------------------------------------------

def _non_negative_int(value: str) -> int:
    try:
        number = int(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"invalid count: {value!r}") from exc
    if number < 0:
        raise argparse.ArgumentTypeError(f"count must be non-negative: {value}")
    return number


def _column_group(value: str) -> tuple[Column, ...]:
    try:
        return parse_columns([value])
    except ValueError as exc:
        choices = ", ".join(column.value for column in Column)
        raise argparse.ArgumentTypeError(
            f"invalid column in {value!r} (choose from {choices})"
        ) from exc


def _add_target_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("target", help="Remote file name (or identifier with --id).")
    parser.add_argument(
        "-i", "--id",
        dest="treat_as_id",
        action="store_true",
        help="Interpret target as an identifier.",
    )
    parser.add_argument(
        "-p", "--pick",
        action="store_true",
        help="Choose interactively when the name matches several files.",
    )


def _build_parser() -> argparse.ArgumentParser:
    """Construct the top-level argument parser.

    Subcommands accept their full name and first letter as aliases:

    * ``blobdrive ls``     — list existing files
    * ``blobdrive up``     — upload a file
    * ``blobdrive dl``     — download a file
    * ``blobdrive rm``     — remove a file
    * ``blobdrive doctor`` — environment diagnostics
    """
    parser = argparse.ArgumentParser(
        prog="blobdrive",
        description=ABOUT,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "-V", "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Print debug logging to stderr.",
    )
    subparsers = parser.add_subparsers(dest="command", metavar="COMMAND")

    ls = subparsers.add_parser(
        "ls", aliases=["list", "l"], help="List existing files.",
    )
    ls.add_argument(
        "-d", "--display",
        nargs="+",
        action="extend",
        type=_column_group,
        metavar="COLUMN",
        help="Columns to show: all, id, name, size, date (default: date size name).",
    )
    ls.add_argument(
        "-s", "--sorting",
        type=SortKey,
        choices=list(SortKey),
        default=SortKey.DATE,
        metavar="{name,date,size}",
        help="Sort files (default: date).",
    )
    ls.add_argument("-r", "--reverse", action="store_true", help="Reverse sort order.")
    ls.add_argument("-f", "--filter", dest="name_filter", help="Filter file names.")
    ls.add_argument(
        "-1", "--limit-one",
        action="store_true",
        help="Shortcut for '--limit 1 --force-limit'.",
    )
    ls.add_argument(
        "-l", "--limit",
        type=_non_negative_int,
        metavar="N",
        help="Limit number of files to list.",
    )
    ls.add_argument(
        "-F", "--force-limit",
        action="store_true",
        help="Fail if more files than the limit were found.",
    )
    ls.set_defaults(handler=_handle_list)

    up = subparsers.add_parser(
        "up", aliases=["upload", "u"], help="Upload a file.",
    )
    up.add_argument(
        "file",
        nargs="?",
        type=Path,
        default=None,
        help="File to upload (omit to read from stdin).",
    )
    target = up.add_mutually_exclusive_group()
    target.add_argument("-n", "--name", help="Remote file name.")
    target.add_argument(
        "-i", "--id",
        dest="object_id",
        help="Overwrite the remote file with this identifier.",
    )
    up.add_argument(
        "-D", "--delete",
        action="store_true",
        help="Remove the local file after uploading.",
    )
    up.set_defaults(handler=_handle_upload)

    dl = subparsers.add_parser(
        "dl", aliases=["download", "d"], help="Download a file.",
    )
    _add_target_arguments(dl)
    dl.add_argument(
        "-o", "--output",
        type=Path,
        default=None,
        help="Output file (omit to write to stdout).",
    )
    dl.set_defaults(handler=_handle_download)

    rm = subparsers.add_parser(
        "rm", aliases=["remove", "r"], help="Remove a file.",
    )
    _add_target_arguments(rm)
    rm.set_defaults(handler=_handle_remove)

    subparsers.add_parser("doctor", help="Check the environment.")

    return parser


# ---------------------------------------------------------------------------
# Command handlers
# ---------------------------------------------------------------------------

def _resolve_target(
    storage: StorageClient,
    target: str,
    *,
    treat_as_id: bool,
    pick: bool,
) -> str:
    """Resolve *target* to one identifier, optionally asking the user."""
    catalog = CatalogService(storage)
    try:
        return catalog.resolve(target, treat_as_id=treat_as_id)
    except QueryLimitExceededError as exc:
        if not pick:
            raise
        from blobdrive.cli.candidate_prompt import prompt_candidate_selection

        return prompt_candidate_selection(target, exc.matches)


def _handle_list(args: argparse.Namespace, storage: StorageClient) -> int:
    """Filter and limit the catalog, then sort it for display."""
    limit = limit_policy_from_flags(args.limit_one, args.limit, args.force_limit)
    objects = CatalogService(storage).list_objects(args.name_filter, limit)
    objects = order_objects(objects, args.sorting, reverse=args.reverse)

    columns = tuple(col for group in args.display or () for col in group)
    for row in format_rows(objects, columns or DEFAULT_COLUMNS):
        emit_line(row)
    return exit_codes.SUCCESS


def _read_upload_source(path: Path | None) -> tuple[bytes, str]:
    """Return the bytes to upload and the default remote name."""
    if path is None:
        return sys.stdin.buffer.read(), STDIN_NAME
    if not path.name:
        raise LocalFileError(f"Cannot derive a file name from {path}")
    try:
        return path.read_bytes(), path.name
    except OSError as exc:
        raise LocalFileError(f"Failed to read {path}: {exc.strerror or exc}") from exc


def _handle_upload(args: argparse.Namespace, storage: StorageClient) -> int:
    data, default_name = _read_upload_source(args.file)
    name = args.name if args.name is not None else default_name

    object_id = TransferService(storage).upload(data, name, object_id=args.object_id)

    if args.delete and args.file is not None:
        try:
            args.file.unlink()
        except OSError as exc:
            raise LocalFileError(
                f"Uploaded as {object_id}, but failed to delete {args.file}: "
                f"{exc.strerror or exc}"
            ) from exc

    emit_line(object_id)
    return exit_codes.SUCCESS


def _handle_download(args: argparse.Namespace, storage: StorageClient) -> int:
    object_id = _resolve_target(
        storage, args.target, treat_as_id=args.treat_as_id, pick=args.pick,
    )
    data = TransferService(storage).download(object_id)

    if args.output is None:
        emit_bytes(data)
        return exit_codes.SUCCESS
    try:
        args.output.write_bytes(data)
    except OSError as exc:
        raise LocalFileError(
            f"Failed to write {args.output}: {exc.strerror or exc}"
        ) from exc
    return exit_codes.SUCCESS


def _handle_remove(args: argparse.Namespace, storage: StorageClient) -> int:
    object_id = _resolve_target(
        storage, args.target, treat_as_id=args.treat_as_id, pick=args.pick,
    )
    emit_line(TransferService(storage).remove(object_id))
    return exit_codes.SUCCESS


def _handle_doctor(settings: Settings) -> int:
    """Dispatch the ``doctor`` diagnostics command."""
    from blobdrive.cli.doctor import run_doctor

    return run_doctor(settings)


# ---------------------------------------------------------------------------
# Main entry point
# ---------------------------------------------------------------------------

def main(argv: list[str] | None = None) -> int:
    """Run the blobdrive CLI.

    Parameters
    ----------
    argv:
        Explicit argument list.  When ``None`` (default), ``sys.argv[1:]``
        is used.  Accepting *argv* enables deterministic testing without
        monkeypatching.

    Returns
    -------
    int
        OS process exit code.
    """
    parser = _build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return exit_codes.SUCCESS

    settings = load_settings()
    setup_logging("DEBUG" if args.verbose else settings.log_level)

    if args.command == "doctor":
        return _handle_doctor(settings)

    storage = build_storage(settings)
    return args.handler(args, storage)


# ---------------------------------------------------------------------------
# Script-level error boundary
# ---------------------------------------------------------------------------

def cli() -> None:
    """Top-level error boundary invoked by the console-script entry point.

    This function wraps :func:`main` and guarantees the process never
    exits with a raw stack trace during normal usage.
    """
    try:
        code = main()
        sys.exit(code)
    except BlobDriveError as exc:
        console.print(f"[bold red]Error:[/bold red] {escape(str(exc))}")
        if exc.hint:
            console.print(f"[yellow]Hint:[/yellow] {escape(exc.hint)}")
        sys.exit(exit_codes.GENERAL_ERROR)
    except KeyboardInterrupt:
        console.print("\n[yellow]Aborted by user.[/yellow]")
        sys.exit(exit_codes.KEYBOARD_INTERRUPT)
    except Exception as exc:  # noqa: BLE001
        console.print(
            "[bold red]Unexpected error.[/bold red] "
            "Please report this issue.\n"
            f"  {type(exc).__name__}: {escape(str(exc))}"
        )
        sys.exit(exit_codes.UNEXPECTED_ERROR)
