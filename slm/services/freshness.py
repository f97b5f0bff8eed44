"""Release freshness checks and catalog ETag bookkeeping."""

import copy
import re
from typing import Any

import httpx
import structlog

from .. import __version__
from ..models import AppSettings, CatalogFeed
from .errors import NetworkError
from .http_client import HttpClientService
from .settings import SettingsStore

log = structlog.stdlib.get_logger()


SLM_VERSION_URL = "https://raw.githubusercontent.com/firebat20/switch-library-manager/master/version.json"

_LEADING_NUMBER = re.compile(r"^(\d+)")


def parse_version(version: str) -> tuple[int, ...]:
    """Parse a dotted version into integers.

    A leading ``v`` is ignored, as is anything after the digits of a
    component ("2-beta" counts as 2). Parsing stops at the first component
    without a leading number.

    Raises:
        ValueError: If the version does not start with a number
    """
    text = version.strip().lstrip("vV")
    numbers: list[int] = []
    for part in text.split("."):
        match = _LEADING_NUMBER.match(part)
        if match is None:
            break
        numbers.append(int(match.group(1)))
    if not numbers:
        raise ValueError(f"Not a version string: {version!r}")
    return tuple(numbers)


def compare_versions(a: str, b: str) -> int:
    """Compare two versions numerically.

    Returns a positive number if ``a`` is newer, zero if equal, negative if
    older. Missing trailing components count as zero, so "1.2" == "1.2.0".
    """
    left, right = parse_version(a), parse_version(b)
    width = max(len(left), len(right))
    left += (0,) * (width - len(left))
    right += (0,) * (width - len(right))
    return (left > right) - (left < right)


def conditional_headers(settings: AppSettings, feed: CatalogFeed) -> dict[str, str]:
    """Headers for a conditional GET of ``feed`` using its stored ETag."""
    etag = settings.etag_for(feed)
    return {"If-None-Match": etag} if etag else {}


def record_etag(store: SettingsStore, feed: CatalogFeed, etag: str) -> None:
    """Persist a new ETag for ``feed`` through the settings store.

    Raises:
        ConfigIOError: If the settings cannot be saved
    """
    settings = copy.deepcopy(store.load())
    if settings.etag_for(feed) == etag:
        return
    settings.set_etag(feed, etag)
    store.save(settings)
    log.info("Catalog ETag updated", feed=feed.value, etag=etag)


class FreshnessChecker:
    """Checks whether a newer application release has been published.

    Every call makes one fresh request; nothing is cached or retried.
    """

    def __init__(
        self,
        http_client: HttpClientService,
        local_version: str = __version__,
        url: str = SLM_VERSION_URL,
    ) -> None:
        self._http = http_client
        self.local_version = local_version
        self.url = url

    async def fetch_remote_version(self) -> str:
        """Return the version published at the release endpoint.

        Raises:
            NetworkError: If the endpoint is unreachable or the body is unusable
        """
        try:
            response = await self._http.get(self.url, retries=0)
        except httpx.HTTPStatusError as e:
            raise NetworkError(
                "The update server returned an error.",
                original_error=e,
                url=self.url,
                status_code=e.response.status_code,
            ) from e
        except httpx.RequestError as e:
            raise NetworkError("Could not reach the update server.", original_error=e, url=self.url) from e

        try:
            payload: Any = response.json()
        except ValueError as e:
            raise NetworkError("The update server returned an unreadable response.", original_error=e, url=self.url) from e

        remote_version = payload.get("version") if isinstance(payload, dict) else None
        if not isinstance(remote_version, str):
            raise NetworkError("The update server response has no version.", url=self.url)
        return remote_version

    async def check_for_newer_release(self) -> bool:
        """Return True if the published version is strictly newer than ours.

        Raises:
            NetworkError: If the endpoint is unreachable or the body is unusable
        """
        remote_version = await self.fetch_remote_version()
        try:
            newer = compare_versions(remote_version, self.local_version) > 0
        except ValueError as e:
            raise NetworkError("The update server returned an invalid version.", original_error=e, url=self.url) from e

        log.info(
            "Checked for newer release",
            local_version=self.local_version,
            remote_version=remote_version,
            newer=newer,
        )
        return newer
