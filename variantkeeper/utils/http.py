"""
HTTP client utilities for variantkeeper.

An asynchronous ``httpx`` client for the AUR backend: a concurrency cap,
429 responses waited out per ``Retry-After``, and timeouts, connection
errors and 5xx retried with exponential backoff. Everything else in
variantkeeper is local.
"""

from __future__ import annotations

import httpx
import random
import asyncio
from typing import Any, Dict, Optional, cast

from variantkeeper.utils.logger import get_logger
from variantkeeper.__version__ import __version__
from variantkeeper.exceptions import NetworkError
from variantkeeper.constants import (
    DEFAULT_TIMEOUT,
    DEFAULT_MAX_RETRIES,
    DEFAULT_HTTP_CONCURRENCY,
    DEFAULT_MAX_RATE_LIMIT_RETRIES,
    USER_AGENT_TEMPLATE,
)

logger = get_logger("http")


def _retry_after(response: httpx.Response) -> int:
    """Seconds to wait before retrying a 429; HTTP-date values fall back to 1."""
    value = response.headers.get("Retry-After", "").strip()
    return int(value) if value.isdigit() else 1


class HTTPClient:
    """Asynchronous JSON-over-HTTP client.

    Args:
        timeout: Request timeout in seconds.
        max_retries: Retries after the first attempt for timeouts, network
            errors and server errors.
        max_rate_limit_retries: 429 responses waited out before giving up.
        verify_ssl: Whether to verify SSL certificates.
        user_agent: Custom User-Agent header value.
        max_concurrency: Maximum number of concurrent requests.

    Example:
        >>> async with HTTPClient() as client:
        ...     data = await client.get_json(
        ...         "https://aur.archlinux.org/rpc/v5/search/firefox?by=name"
        ...     )
    """

    def __init__(
        self,
        *,
        timeout: int = DEFAULT_TIMEOUT,
        max_retries: int = DEFAULT_MAX_RETRIES,
        max_rate_limit_retries: int = DEFAULT_MAX_RATE_LIMIT_RETRIES,
        verify_ssl: bool = True,
        user_agent: Optional[str] = None,
        max_concurrency: int = DEFAULT_HTTP_CONCURRENCY,
    ) -> None:
        self.timeout = timeout
        self.max_retries = max_retries
        self.max_rate_limit_retries = max_rate_limit_retries
        self.verify_ssl = verify_ssl
        self.user_agent = user_agent or USER_AGENT_TEMPLATE.format(version=__version__)
        self.max_concurrency = max_concurrency

        self._client: Optional[httpx.AsyncClient] = None
        self._semaphore = asyncio.Semaphore(max_concurrency)

    async def __aenter__(self) -> "HTTPClient":
        self._open()
        return self

    async def __aexit__(self, exc_type: Any, exc: Any, tb: Any) -> None:
        await self.close()

    def _open(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=httpx.Timeout(self.timeout),
                http2=True,
                verify=self.verify_ssl,
                follow_redirects=True,
                headers={"User-Agent": self.user_agent},
            )
        return self._client

    async def close(self) -> None:
        """Close the underlying HTTP client."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    # ------------------------------------------------------------------
    # Requests
    # ------------------------------------------------------------------

    async def _send(self, method: str, url: str, **kwargs: Any) -> httpx.Response:
        """Send one request, waiting out 429 responses."""
        client = self._open()
        throttled = 0

        while True:
            async with self._semaphore:
                response = await client.request(method, url, **kwargs)
            if response.status_code != 429:
                return response

            throttled += 1
            if throttled > self.max_rate_limit_retries:
                raise NetworkError(
                    f"Rate limit exceeded after {self.max_rate_limit_retries} retries",
                    url=url,
                    status_code=429,
                )
            delay = _retry_after(response)
            logger.warning(
                "Rate limited (429), retrying after %ds (%d/%d)",
                delay,
                throttled,
                self.max_rate_limit_retries,
            )
            await asyncio.sleep(delay)

    async def _request_with_retry(
        self,
        method: str,
        url: str,
        **kwargs: Any,
    ) -> httpx.Response:
        attempts = self.max_retries + 1
        last_exc: Optional[Exception] = None

        for attempt in range(attempts):
            try:
                response = await self._send(method, url, **kwargs)
            except (httpx.TimeoutException, httpx.NetworkError) as exc:
                last_exc = exc
                logger.warning(
                    "%s (%d/%d): %s", type(exc).__name__, attempt + 1, attempts, url
                )
            else:
                code = response.status_code
                if code < 400:
                    return response
                # Client errors are final
                if code < 500:
                    raise NetworkError(
                        f"HTTP {code} error for {url}",
                        url=url,
                        status_code=code,
                        response_body=response.text,
                    )
                logger.warning("HTTP %d error (%d/%d): %s", code, attempt + 1, attempts, url)

            if attempt < self.max_retries:
                delay = (2**attempt) + random.uniform(0.0, 0.3)
                logger.debug("Retrying in %.2fs", delay)
                await asyncio.sleep(delay)

        raise NetworkError(
            f"Request failed after {attempts} attempts: {url}",
            url=url,
        ) from last_exc

    async def get(self, url: str, **kwargs: Any) -> httpx.Response:
        """Perform a GET request with retry logic."""
        return await self._request_with_retry("GET", url, **kwargs)

    async def get_json(self, url: str, **kwargs: Any) -> Dict[str, Any]:
        """Fetch a URL and parse the body as a JSON object."""
        response = await self.get(url, **kwargs)

        try:
            data = response.json()
        except ValueError as exc:
            raise NetworkError(
                f"Invalid JSON response from {url}",
                url=url,
                response_body=response.text,
            ) from exc

        if not isinstance(data, dict):
            raise NetworkError(
                f"Expected JSON object from {url}",
                url=url,
                response_body=response.text,
            )

        return cast(Dict[str, Any], data)
