"""Conditional download of the remote metadata catalogs."""

from pathlib import Path

import httpx
import structlog

from ..models import CatalogFeed
from .errors import ConfigIOError, NetworkError
from .freshness import conditional_headers, record_etag
from .http_client import HttpClientService
from .settings import ETAG_SENTINELS, SettingsStore

log = structlog.stdlib.get_logger()


class CatalogService:
    """Keeps the cached title and version catalogs up to date.

    The stored ETag of each feed is sent as ``If-None-Match``; an unchanged
    catalog costs one ``304`` round trip. A new body replaces the cache file
    atomically and its ETag is written back to the settings.
    """

    def __init__(self, store: SettingsStore, http_client: HttpClientService) -> None:
        self._store = store
        self._http = http_client

    async def refresh(self, feed: CatalogFeed) -> Path:
        """Make sure the cached copy of ``feed`` is current.

        Returns:
            Path of the cached catalog file

        Raises:
            NetworkError: If the catalog cannot be fetched
            ConfigIOError: If the catalog or the new ETag cannot be stored
        """
        settings = self._store.load()
        url = settings.url_for(feed)
        path = self._store.cache_path(feed)
        headers = conditional_headers(settings, feed) if path.exists() else {}

        try:
            response = await self._http.get(url, headers=headers)
        except httpx.HTTPStatusError as e:
            raise NetworkError(
                f"Failed to download the {feed.value} catalog.",
                original_error=e,
                url=url,
                status_code=e.response.status_code,
            ) from e
        except httpx.RequestError as e:
            raise NetworkError(f"Failed to download the {feed.value} catalog.", original_error=e, url=url) from e

        if response.status_code == httpx.codes.NOT_MODIFIED:
            log.info("Catalog is up to date", feed=feed.value)
            return path

        self._write_atomic(path, response.content)
        log.info("Catalog downloaded", feed=feed.value, path=str(path), size=len(response.content))

        # without an ETag the stored one no longer matches the cached body
        etag = response.headers.get("etag") or ETAG_SENTINELS[feed]
        record_etag(self._store, feed, etag)
        return path

    async def refresh_all(self) -> dict[CatalogFeed, Path]:
        """Refresh every catalog, stopping at the first failure."""
        return {feed: await self.refresh(feed) for feed in CatalogFeed}

    @staticmethod
    def _write_atomic(path: Path, content: bytes) -> None:
        temp_path = path.with_suffix(path.suffix + ".tmp")
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            temp_path.write_bytes(content)
            temp_path.replace(path)
        except OSError as e:
            log.error("Failed to write catalog", path=str(path), error=str(e))
            try:
                temp_path.unlink(missing_ok=True)
            except OSError:
                log.warning("Failed to remove temporary catalog file", path=str(temp_path))
            raise ConfigIOError("Failed to store the downloaded catalog.", path=str(path), original_error=e) from e
