"""Remote catalog API client (CurseForge-style REST endpoints)."""

import os
import time
from typing import Any

import requests

from .models import RemoteFile, RemoteMod

DEFAULT_BASE_URL = "https://api.curseforge.com/v1"
PAGE_SIZE = 50
REQUEST_TIMEOUT = 30


class CatalogError(Exception):
    """Base exception for remote catalog errors."""

    pass


class MissingAPIKey(CatalogError):
    """Raised when no API key is configured."""

    pass


class CatalogNotFound(CatalogError):
    """Raised when the catalog has no such mod or file."""

    pass


class CatalogRateLimited(CatalogError):
    """Raised when rate limited by the API."""

    def __init__(self, retry_after: int = 60):
        self.retry_after = retry_after
        super().__init__(f"Rate limited. Retry after {retry_after} seconds.")


class CatalogAPI:
    """Client for the remote add-on catalog."""

    def __init__(self, api_key: str | None = None, base_url: str | None = None):
        self.api_key = api_key or os.environ.get("CURSEFORGE_API_KEY")
        if not self.api_key:
            raise MissingAPIKey(
                "No API key provided. Set CURSEFORGE_API_KEY environment variable "
                "or pass --api-key flag."
            )
        self.base_url = (base_url or DEFAULT_BASE_URL).rstrip("/")
        self.session = requests.Session()
        self.session.headers.update(
            {
                "x-api-key": self.api_key,
                "Accept": "application/json",
                "User-Agent": "modswitch/0.1.0",
            }
        )
        self._last_request_time = 0.0
        self._min_request_interval = 0.2

    def _rate_limit_wait(self) -> None:
        """Ensure we don't exceed rate limits."""
        elapsed = time.time() - self._last_request_time
        if elapsed < self._min_request_interval:
            time.sleep(self._min_request_interval - elapsed)
        self._last_request_time = time.time()

    def _handle_response(self, response: requests.Response) -> dict[str, Any]:
        """Handle API response and raise appropriate errors."""
        if response.status_code == 429:
            retry_after = int(response.headers.get("Retry-After", 60))
            raise CatalogRateLimited(retry_after)
        if response.status_code == 403:
            raise CatalogError(f"Access forbidden: {response.url}")
        if response.status_code == 404:
            raise CatalogNotFound(f"Resource not found: {response.url}")
        try:
            response.raise_for_status()
            return response.json()
        except requests.HTTPError as e:
            raise CatalogError(f"Catalog request failed: {e}")
        except ValueError as e:
            raise CatalogError(f"Invalid response from {response.url}: {e}")

    def _get(self, path: str, params: dict[str, Any] | None = None) -> dict[str, Any]:
        self._rate_limit_wait()
        try:
            response = self.session.get(
                f"{self.base_url}{path}", params=params, timeout=REQUEST_TIMEOUT
            )
        except requests.RequestException as e:
            raise CatalogError(f"Catalog unavailable: {e}")
        return self._handle_response(response)

    def get_mod_by_id(self, mod_id: int) -> RemoteMod:
        """Get mod metadata."""
        data = self._get(f"/mods/{mod_id}")
        return RemoteMod.from_api(data.get("data") or {"id": mod_id})

    def get_files_for_mod(self, mod_id: int) -> list[RemoteFile]:
        """
        Get every file the catalog lists for a mod.

        Follows pagination until the reported total has been fetched.
        """
        files: list[RemoteFile] = []
        index = 0
        while True:
            data = self._get(
                f"/mods/{mod_id}/files", params={"index": index, "pageSize": PAGE_SIZE}
            )
            page = data.get("data", [])
            files.extend(RemoteFile.from_api(f) for f in page)

            pagination = data.get("pagination") or {}
            total = pagination.get("totalCount", len(files))
            index += len(page)
            if not page or index >= total:
                break

        return files

    def get_file(self, mod_id: int, file_id: int) -> RemoteFile:
        """Get metadata for one file of a mod."""
        data = self._get(f"/mods/{mod_id}/files/{file_id}")
        return RemoteFile.from_api(data.get("data") or {"id": file_id})

    def get_download_url(self, mod_id: int, file_id: int) -> str:
        """Get the download URL for a file."""
        data = self._get(f"/mods/{mod_id}/files/{file_id}/download-url")
        url = data.get("data")
        if not url:
            raise CatalogError(f"No download URL for file {file_id} of mod {mod_id}")
        return url
