"""Logging configuration for blobdrive."""

from __future__ import annotations

import sys

from loguru import logger

from blobdrive.exceptions import ConfigurationError

_FORMAT = (
    "<green>{time:HH:mm:ss}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan> | "
    "<level>{message}</level>"
)


def _stderr_sink(message: str) -> None:
    # Looked up on every write so redirected streams are honoured.
    sys.stderr.write(message)


def setup_logging(level: str = "WARNING") -> None:
    """Route loguru output to stderr at *level*.

    Stdout is reserved for command data (listings, identifiers,
    downloaded bytes), so the only handler writes to stderr.
    """
    logger.remove()
    try:
        logger.add(_stderr_sink, format=_FORMAT, level=level, colorize=True)
    except ValueError as exc:
        raise ConfigurationError(
            f"Invalid log level: {level}",
            hint="Use one of TRACE, DEBUG, INFO, SUCCESS, WARNING, ERROR, CRITICAL.",
        ) from exc
