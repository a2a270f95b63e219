"""``blobdrive doctor`` — environment diagnostics command.

Gathers configuration and environment information and renders a table
summarising whether the selected storage backend can be used.  Falls
back to a plain-text table when Rich is not installed.

This module lives in the CLI layer; it only collects and displays
diagnostic data.
"""

from __future__ import annotations

import importlib.util
import os
import platform
import sys
from pathlib import Path

from blobdrive.cli import exit_codes
from blobdrive.cli.console import console, escape
from blobdrive.config import Settings
from blobdrive.version import __version__

_OK = "[green]OK[/green]"
_WARN = "[yellow]WARN[/yellow]"
_FAIL = "[red]FAIL[/red]"

_GOOGLE_MODULES: tuple[str, ...] = (
    "googleapiclient",
    "google_auth_oauthlib",
    "google.oauth2",
)


# ---------------------------------------------------------------------------
# Diagnostic collectors
# ---------------------------------------------------------------------------

def _python_version_check() -> tuple[str, str, str]:
    """Return (label, value, status) for the Python version row."""
    version = platform.python_version()
    ok = sys.version_info[:2] >= (3, 10)
    status = _OK if ok else "[red]FAIL (>=3.10 required)[/red]"
    return "Python", version, status


def _blobdrive_version_check() -> tuple[str, str, str]:
    return "blobdrive", __version__, _OK


def _backend_check(settings: Settings) -> tuple[str, str, str]:
    return "Backend", settings.backend, _OK


def _module_available(name: str) -> bool:
    try:
        return importlib.util.find_spec(name) is not None
    except (ModuleNotFoundError, ValueError):
        return False


def _google_libraries_check(settings: Settings) -> tuple[str, str, str]:
    """Return the row for the Google client libraries.

    Missing libraries only fail the check when the Drive backend is
    selected.
    """
    missing = [name for name in _GOOGLE_MODULES if not _module_available(name)]
    if not missing:
        return "Google API", "installed", _OK
    status = _FAIL if settings.backend == "gdrive" else _WARN
    return "Google API", f"missing {', '.join(missing)}", status


def _client_secret_check(settings: Settings) -> tuple[str, str, str]:
    path = settings.client_secret
    if path.is_file():
        return "Client secret", str(path), _OK
    if settings.token_cache.is_file():
        # A cached token can still be refreshed without the secret file.
        return "Client secret", f"{path} (missing)", _WARN
    status = _FAIL if settings.backend == "gdrive" else _WARN
    return "Client secret", f"{path} (missing)", status


def _writable_dir_check(label: str, path: Path) -> tuple[str, str, str]:
    """Check that *path* exists and is writable, or can be created."""
    probe = path
    while not probe.exists() and probe.parent != probe:
        probe = probe.parent
    if probe.is_dir() and os.access(probe, os.W_OK):
        return label, str(path), _OK
    return label, f"{path} (not writable)", _FAIL


def _storage_dir_check(settings: Settings) -> tuple[str, str, str]:
    if settings.backend == "local":
        return _writable_dir_check("Local root", settings.local_root)
    return _writable_dir_check("Cache dir", settings.cache_dir)


def _status_plain(status: str) -> str:
    """Convert rich-markup status to plain text."""
    for word in ("FAIL", "WARN", "OK"):
        if word in status:
            return word
    return status


def _print_plain_doctor_table(checks: list[tuple[str, str, str]]) -> None:
    """Render doctor output without Rich."""
    print("\nblobdrive doctor", file=sys.stderr)
    print("=" * 64, file=sys.stderr)
    print(f"{'Component':<14} {'Value':<40} {'Status':<8}", file=sys.stderr)
    print("-" * 64, file=sys.stderr)
    for label, value, status in checks:
        print(f"{label:<14} {value:<40} {_status_plain(status):<8}", file=sys.stderr)
    print(file=sys.stderr)


# ---------------------------------------------------------------------------
# Public entry point
# ---------------------------------------------------------------------------

def collect_checks(settings: Settings) -> list[tuple[str, str, str]]:
    """Run every diagnostic and return the rows in display order."""
    return [
        _blobdrive_version_check(),
        _python_version_check(),
        _backend_check(settings),
        _google_libraries_check(settings),
        _client_secret_check(settings),
        _storage_dir_check(settings),
    ]


def run_doctor(settings: Settings) -> int:
    """Execute all diagnostic checks and render a summary table.

    Returns
    -------
    int
        :data:`exit_codes.SUCCESS` when no check failed,
        :data:`exit_codes.GENERAL_ERROR` otherwise.
    """
    checks = collect_checks(settings)
    has_failure = any("FAIL" in status for _, _, status in checks)

    try:
        from rich.table import Table
    except ModuleNotFoundError:
        _print_plain_doctor_table(checks)
        print("Some checks failed." if has_failure else "All checks passed.", file=sys.stderr)
        return exit_codes.GENERAL_ERROR if has_failure else exit_codes.SUCCESS

    table = Table(
        title="blobdrive doctor",
        show_header=True,
        header_style="bold cyan",
        border_style="dim",
    )
    table.add_column("Component", style="bold", min_width=12)
    table.add_column("Value", min_width=20)
    table.add_column("Status", justify="center", min_width=8)
    for label, value, status in checks:
        table.add_row(label, escape(value), status)

    console.print()
    console.print(table)
    console.print()

    if has_failure:
        console.print("[bold red]Some checks failed.[/bold red]")
        return exit_codes.GENERAL_ERROR
    console.print("[bold green]All checks passed.[/bold green]")
    return exit_codes.SUCCESS
