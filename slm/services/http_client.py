"""HTTP client service with timeout handling and optional retries."""

import asyncio
from typing import Any

import httpx
import structlog

from .. import __version__

log = structlog.stdlib.get_logger()


class HttpClientService:
    """Async HTTP client with a bounded timeout and exponential backoff retries."""

    def __init__(
        self,
        timeout: float = 10.0,
        max_retries: int = 0,
        base_delay: float = 1.0,
        max_delay: float = 30.0,
        verify_ssl: bool = True,
    ) -> None:
        """Initialize the HTTP client service.

        Args:
            timeout: Request timeout in seconds
            max_retries: Number of retries after the first attempt
            base_delay: Base delay for exponential backoff in seconds
            max_delay: Maximum delay between retries in seconds
            verify_ssl: Whether to verify SSL certificates
        """
        self.timeout = timeout
        self.max_retries = max_retries
        self.base_delay = base_delay
        self.max_delay = max_delay

        self._client = httpx.AsyncClient(
            timeout=httpx.Timeout(timeout),
            headers={"User-Agent": f"switch-library-manager/{__version__}"},
            follow_redirects=True,
            verify=verify_ssl,
        )

        log.debug("HTTP client service initialized", timeout=timeout, max_retries=max_retries)

    async def get(
        self,
        url: str,
        headers: dict[str, str] | None = None,
        retries: int | None = None,
    ) -> httpx.Response:
        """Make a GET request.

        A ``304 Not Modified`` answer is returned as-is so callers can act
        on conditional requests.

        Args:
            url: The URL to request
            headers: Optional additional headers
            retries: Override ``max_retries`` for this request

        Returns:
            HTTP response object

        Raises:
            httpx.HTTPStatusError: On a 4xx/5xx answer after all attempts
            httpx.RequestError: On transport failures after all attempts
        """
        max_retries = self.max_retries if retries is None else retries

        for attempt in range(max_retries + 1):
            try:
                log.debug("Making HTTP GET request", url=url, attempt=attempt + 1)

                response = await self._client.get(url, headers=headers)
                if response.status_code == httpx.codes.NOT_MODIFIED:
                    log.info("Remote resource not modified", url=url)
                    return response

                response.raise_for_status()

                log.info(
                    "HTTP GET request successful",
                    url=url,
                    status_code=response.status_code,
                    content_length=len(response.content),
                )
                return response

            except (httpx.HTTPStatusError, httpx.RequestError) as e:
                log.warning(
                    "HTTP GET request failed",
                    url=url,
                    attempt=attempt + 1,
                    error=str(e),
                    error_type=type(e).__name__,
                )

                if isinstance(e, httpx.HTTPStatusError) and 400 <= e.response.status_code < 500:
                    raise

                if attempt == max_retries:
                    raise

                delay = min(self.base_delay * (2 ** attempt), self.max_delay)
                log.info("Retrying after delay", delay=delay)
                await asyncio.sleep(delay)

        raise RuntimeError("Unexpected end of retry loop")

    async def close(self) -> None:
        """Close the HTTP client and clean up resources."""
        await self._client.aclose()
        log.debug("HTTP client closed")

    async def __aenter__(self) -> "HttpClientService":
        return self

    async def __aexit__(self, exc_type: type[Exception] | None, exc_val: Exception | None, exc_tb: Any) -> None:
        await self.close()
