"""CLI layer — argument parsing, output formatting, and error boundary.

This package is the outermost layer of the application.  It may import
from ``core`` and ``infra``, but no other layer may import from ``cli``.
Command data goes to stdout; messages, tables and prompts go to stderr.
"""
