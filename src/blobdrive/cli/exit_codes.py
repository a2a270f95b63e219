"""Exit-code constants used by the CLI layer.

Every exit path uses one of these values; there is no finer taxonomy
than success, known failure, interrupt, and unexpected failure.
"""

from __future__ import annotations

SUCCESS: int = 0
"""Command completed without error."""

GENERAL_ERROR: int = 1
"""A known BlobDriveError was caught and its message displayed."""

KEYBOARD_INTERRUPT: int = 130
"""User pressed Ctrl+C (128 + SIGINT)."""

UNEXPECTED_ERROR: int = 2
"""An exception outside the BlobDriveError hierarchy escaped."""
