"""Console helpers for the CLI layer.

Two channels are kept strictly apart:

* :data:`console` — human-facing messages on **stderr**, rendered with
  Rich when it is importable and as plain text otherwise.
* :func:`emit_line` / :func:`emit_bytes` — command data on **stdout**
  (listings, identifiers, downloaded content), never decorated so it
  stays safe to pipe.

Rich is imported lazily so ``--help`` and ``--version`` keep working
without it.
"""

from __future__ import annotations

import sys
from typing import Any

from blobdrive.exceptions import EnvironmentError, missing_dependency


def _load_rich_console_class() -> type[Any]:
	"""Return ``rich.console.Console`` class or raise ``EnvironmentError``."""
	try:
		from rich.console import Console
	except ModuleNotFoundError as exc:
		raise missing_dependency("rich") from exc
	return Console


def get_rich_console() -> Any:
	"""Create a Rich console instance targeting stderr."""
	console_class = _load_rich_console_class()
	return console_class(stderr=True)


class _ConsoleProxy:
	"""Minimal ``print``-compatible proxy with plain-text fallback."""

	def print(self, *objects: object) -> None:
		"""Render with Rich when available, else plain stderr print."""
		try:
			rich_console = get_rich_console()
		except EnvironmentError:
			print(*objects, file=sys.stderr)
			return
		rich_console.print(*objects)


console = _ConsoleProxy()


def emit_line(text: str) -> None:
	"""Write one line of command output to stdout."""
	sys.stdout.write(f"{text}\n")
	sys.stdout.flush()


def emit_bytes(data: bytes) -> None:
	"""Write raw bytes to stdout and flush."""
	sys.stdout.flush()
	sys.stdout.buffer.write(data)
	sys.stdout.buffer.flush()


def escape(text: str) -> str:
	"""Escape Rich markup in user-controlled *text* (names, paths)."""
	try:
		from rich.markup import escape as rich_escape
	except ModuleNotFoundError:
		return text
	return rich_escape(text)
