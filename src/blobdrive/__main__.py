"""Allow ``python -m blobdrive`` invocation.

Delegates to the CLI error-boundary entry point so that
``python -m blobdrive`` behaves identically to the ``blobdrive``
console script.
"""

from __future__ import annotations

from blobdrive.cli.app import cli

if __name__ == "__main__":
    cli()
