"""Google Drive backed implementation of :class:`~blobdrive.core.protocols.StorageClient`.

This module is the **only** place in the codebase that imports the
Google API client libraries.  Objects live in the application data
folder of the authorised account, so the tool never sees the user's
regular Drive files.

All Google API and auth exceptions are caught here and re-raised as
:class:`~blobdrive.exceptions.StorageError` — nothing raw escapes the
infrastructure boundary.
"""

from __future__ import annotations

import io
from pathlib import Path
from typing import Any

from loguru import logger

from blobdrive.core.models import ObjectMetadata
from blobdrive.exceptions import StorageError, missing_dependency

SCOPES: tuple[str, ...] = ("https://www.googleapis.com/auth/drive.appdata",)
APP_FOLDER = "appDataFolder"
_LIST_FIELDS = "nextPageToken, files(id, name, size, modifiedTime)"
_PAGE_SIZE = 1000


def _import_google() -> dict[str, Any]:
    """Import the Google client libraries lazily."""
    try:
        from google.auth.exceptions import GoogleAuthError
        from google.auth.transport.requests import Request
        from google.oauth2.credentials import Credentials
        from google_auth_oauthlib.flow import InstalledAppFlow
        from googleapiclient.discovery import build
        from googleapiclient.errors import Error as GoogleApiClientError
        from googleapiclient.http import MediaIoBaseUpload
    except ModuleNotFoundError as exc:
        raise missing_dependency("google-api-python-client", "google-auth-oauthlib") from exc
    return {
        "Credentials": Credentials,
        "GoogleApiClientError": GoogleApiClientError,
        "GoogleAuthError": GoogleAuthError,
        "InstalledAppFlow": InstalledAppFlow,
        "MediaIoBaseUpload": MediaIoBaseUpload,
        "Request": Request,
        "build": build,
    }


class GoogleDriveStorage:
    """Concrete :class:`StorageClient` backed by the Drive v3 API.

    Usage::

        storage = GoogleDriveStorage(
            client_secret=Path("client_secret.json"),
            token_cache=Path("/tmp/blobdrive/token_cache.json"),
        )
        for obj in storage.list():
            ...

    Authentication happens on the first remote call.  A cached token is
    reused and refreshed when possible; otherwise the installed-app
    OAuth flow runs in the browser and the new token is cached.
    """

    def __init__(
        self,
        client_secret: Path,
        token_cache: Path,
        *,
        service: Any = None,
    ) -> None:
        self._client_secret: Path = client_secret
        self._token_cache: Path = token_cache
        self._service: Any = service
        self._google: dict[str, Any] | None = None

    # ------------------------------------------------------------------
    # Protocol methods
    # ------------------------------------------------------------------

    def list(self) -> list[ObjectMetadata]:
        files = self._service_or_connect().files()
        objects: list[ObjectMetadata] = []
        page_token: str | None = None
        while True:
            response = self._execute(
                "list remote files",
                files.list(
                    spaces=APP_FOLDER,
                    fields=_LIST_FIELDS,
                    pageSize=_PAGE_SIZE,
                    pageToken=page_token,
                ),
            )
            objects.extend(self._parse_file(raw) for raw in response.get("files", []))
            page_token = response.get("nextPageToken")
            if not page_token:
                break
        logger.debug("Drive listing returned {} files", len(objects))
        return objects

    def create(self, name: str) -> str:
        files = self._service_or_connect().files()
        response = self._execute(
            "create remote file",
            files.create(body={"name": name, "parents": [APP_FOLDER]}, fields="id"),
        )
        return str(response["id"])

    def update(self, object_id: str, data: bytes) -> None:
        files = self._service_or_connect().files()
        media = self._google_module()["MediaIoBaseUpload"](
            io.BytesIO(data),
            mimetype="application/octet-stream",
            resumable=False,
        )
        self._execute("upload data", files.update(fileId=object_id, media_body=media))

    def get(self, object_id: str) -> bytes:
        files = self._service_or_connect().files()
        return bytes(self._execute("download data", files.get_media(fileId=object_id)))

    def delete(self, object_id: str) -> None:
        files = self._service_or_connect().files()
        self._execute("delete remote file", files.delete(fileId=object_id))

    # ------------------------------------------------------------------
    # Parsing (pure)
    # ------------------------------------------------------------------

    @staticmethod
    def _parse_file(raw: dict[str, Any]) -> ObjectMetadata:
        """Convert one ``files`` resource into :class:`ObjectMetadata`.

        Native Google documents report no ``size``; they count as 0.
        """
        raw_size = raw.get("size")
        return ObjectMetadata(
            id=str(raw.get("id", "")),
            name=str(raw.get("name", "")),
            size=int(raw_size) if raw_size is not None else 0,
            last_modified=str(raw.get("modifiedTime", "")),
        )

    # ------------------------------------------------------------------
    # Connection and exception mapping
    # ------------------------------------------------------------------

    def _google_module(self) -> dict[str, Any]:
        if self._google is None:
            self._google = _import_google()
        return self._google

    def _service_or_connect(self) -> Any:
        if self._service is None:
            google = self._google_module()
            try:
                credentials = self._load_credentials(google)
                self._service = google["build"](
                    "drive", "v3", credentials=credentials, cache_discovery=False,
                )
            except (google["GoogleAuthError"], google["GoogleApiClientError"], ValueError) as exc:
                raise StorageError(f"Failed to connect to Google Drive: {exc}") from exc
        return self._service

    def _load_credentials(self, google: dict[str, Any]) -> Any:
        credentials = None
        if self._token_cache.is_file():
            credentials = google["Credentials"].from_authorized_user_file(
                str(self._token_cache), list(SCOPES),
            )
        if credentials is not None and credentials.valid:
            return credentials

        if credentials is not None and credentials.expired and credentials.refresh_token:
            logger.debug("Refreshing cached Drive token")
            credentials.refresh(google["Request"]())
        else:
            if not self._client_secret.is_file():
                raise StorageError(
                    f"OAuth client secret not found: {self._client_secret}",
                    hint="Set BLOBDRIVE_CLIENT_SECRET to the JSON file from Google Cloud Console.",
                )
            flow = google["InstalledAppFlow"].from_client_secrets_file(
                str(self._client_secret), list(SCOPES),
            )
            credentials = flow.run_local_server(port=0)

        try:
            self._token_cache.parent.mkdir(parents=True, exist_ok=True)
            self._token_cache.write_text(credentials.to_json(), encoding="utf-8")
        except OSError as exc:
            raise StorageError(f"Failed to cache token at {self._token_cache}: {exc}") from exc
        return credentials

    def _execute(self, action: str, request: Any) -> Any:
        """Execute a prepared API request, mapping failures to ``StorageError``."""
        google = self._google_module()
        try:
            return request.execute()
        except (google["GoogleApiClientError"], google["GoogleAuthError"]) as exc:
            raise StorageError(f"Failed to {action}: {exc}") from exc
        except OSError as exc:
            raise StorageError(f"Failed to {action}: {exc}") from exc
