"""Runtime configuration for blobdrive.

Settings come from environment variables only; nothing is written back.

==========================  ==========================================
Variable                    Meaning
==========================  ==========================================
``BLOBDRIVE_BACKEND``       ``gdrive`` (default) or ``local``
``BLOBDRIVE_CACHE_DIR``     OAuth token cache directory
``BLOBDRIVE_CLIENT_SECRET`` OAuth client secret JSON file
``BLOBDRIVE_LOCAL_ROOT``    Directory used by the ``local`` backend
``BLOBDRIVE_LOG_LEVEL``     loguru level name (default ``WARNING``)
==========================  ==========================================
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path

from blobdrive.exceptions import ConfigurationError

BACKENDS: tuple[str, ...] = ("gdrive", "local")
DEFAULT_CACHE_DIR = Path("/tmp/blobdrive")
DEFAULT_LOCAL_ROOT = Path("~/.local/share/blobdrive")
DEFAULT_LOG_LEVEL = "WARNING"
TOKEN_CACHE_FILENAME = "token_cache.json"
CLIENT_SECRET_FILENAME = "client_secret.json"


@dataclass(frozen=True, slots=True)
class Settings:
    """Resolved configuration for one invocation."""

    backend: str
    cache_dir: Path
    client_secret: Path
    local_root: Path
    log_level: str

    @property
    def token_cache(self) -> Path:
        """Path of the cached OAuth token."""
        return self.cache_dir / TOKEN_CACHE_FILENAME


def load_settings(environ: Mapping[str, str] | None = None) -> Settings:
    """Build :class:`Settings` from *environ* (defaults to ``os.environ``).

    Raises
    ------
    ConfigurationError
        If ``BLOBDRIVE_BACKEND`` names an unknown backend.
    """
    env = os.environ if environ is None else environ

    backend = env.get("BLOBDRIVE_BACKEND", "gdrive").strip().lower() or "gdrive"
    if backend not in BACKENDS:
        raise ConfigurationError(
            f"Unknown storage backend: {backend}",
            hint=f"Set BLOBDRIVE_BACKEND to one of: {', '.join(BACKENDS)}",
        )

    cache_dir = Path(env.get("BLOBDRIVE_CACHE_DIR") or DEFAULT_CACHE_DIR).expanduser()
    client_secret = env.get("BLOBDRIVE_CLIENT_SECRET")
    local_root = env.get("BLOBDRIVE_LOCAL_ROOT")

    return Settings(
        backend=backend,
        cache_dir=cache_dir,
        client_secret=(
            Path(client_secret).expanduser()
            if client_secret
            else cache_dir / CLIENT_SECRET_FILENAME
        ),
        local_root=Path(local_root or DEFAULT_LOCAL_ROOT).expanduser(),
        log_level=(env.get("BLOBDRIVE_LOG_LEVEL") or DEFAULT_LOG_LEVEL).upper(),
    )
