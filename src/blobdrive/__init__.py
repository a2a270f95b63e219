"""blobdrive — manage files kept in a remote blob store from the command line.

Listing, upload, download and removal are built on a small, pure
catalog query engine with a strict layered architecture.
"""

from blobdrive.version import __version__

__all__: list[str] = ["__version__"]
