"""
Base API Client - shared HTTP request pattern for id.loc.gov and Wikidata.

Provides a reusable base class with:
- Automatic retry on 429 (rate limit) with Retry-After support
- Retry with backoff on transport errors
- Rate limiting (configurable interval between requests)
- Circuit breaker for fault tolerance
- Typed failures: every unusable response raises a CatalogSearchError
"""

from __future__ import annotations

import asyncio
import logging
import time
from typing import Any

import httpx
from typing_extensions import Self

from idloc_search.shared.async_utils import CircuitBreaker
from idloc_search.shared.exceptions import (
    ErrorContext,
    NetworkError,
    NotFoundError,
    ParseError,
    RateLimitError,
    ServiceUnavailableError,
)

logger = logging.getLogger(__name__)


class BaseAPIClient:
    """
    Base class for external API clients.

    Provides common infrastructure:
    - httpx.AsyncClient management
    - Rate limiting with configurable interval
    - Retry on 429 and on transport errors with exponential backoff
    - Circuit breaker for fault tolerance

    Failures map to the exception hierarchy:
        429 after retries     → RateLimitError
        404                   → NotFoundError
        5xx                   → ServiceUnavailableError
        other non-2xx         → NetworkError (with status_code)
        transport failure     → NetworkError
        undecodable JSON      → ParseError

    Example:
        class MyClient(BaseAPIClient):
            _service_name = "MyAPI"

            async def get_item(self, item_id: str) -> Any:
                return await self._make_request(f"/items/{item_id}")
    """

    _service_name: str = "API"
    _MAX_RETRIES: int = 3

    def __init__(
        self,
        base_url: str = "",
        timeout: float = 30.0,
        min_interval: float = 0.0,
        headers: dict[str, str] | None = None,
        circuit_breaker: CircuitBreaker | None = None,
    ) -> None:
        """
        Initialize base client.

        Args:
            base_url: Base URL for the API (optional, can pass full URLs)
            timeout: Request timeout in seconds
            min_interval: Minimum seconds between requests (rate limiting)
            headers: Default headers for all requests
            circuit_breaker: Optional circuit breaker for fault tolerance.
                             If None, a default one is created (threshold=10, recovery=60s).
        """
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._min_interval = min_interval
        self._last_request_time = 0.0
        self._client = httpx.AsyncClient(
            timeout=self._timeout,
            headers=headers or {},
            follow_redirects=True,
            limits=httpx.Limits(
                max_connections=20,
                max_keepalive_connections=10,
                keepalive_expiry=30.0,
            ),
        )
        self._circuit_breaker = circuit_breaker or CircuitBreaker(failure_threshold=10, recovery_timeout=60.0)

    async def _rate_limit(self) -> None:
        """Enforce minimum interval between requests."""
        if self._min_interval <= 0:
            return
        elapsed = time.time() - self._last_request_time
        if elapsed < self._min_interval:
            await asyncio.sleep(self._min_interval - elapsed)
        self._last_request_time = time.time()

    def _build_url(self, url: str) -> str:
        """Build full URL from path or full URL."""
        if url.startswith(("http://", "https://")):
            return url
        return f"{self._base_url}{url}"

    async def _make_request(
        self,
        url: str,
        *,
        params: Any = None,
        headers: dict[str, str] | None = None,
        expect_json: bool = True,
    ) -> Any:
        """
        GET a URL with retry on 429 and circuit breaker protection.

        Args:
            url: Full URL or path (appended to base_url)
            params: Query parameters
            headers: Additional headers for this request
            expect_json: If True, parse response as JSON; otherwise return text

        Returns:
            Decoded JSON (any JSON value) or response text

        Raises:
            CatalogSearchError subclass describing the failure
        """
        full_url = self._build_url(url)
        context = ErrorContext(tool_name=self._service_name, input_value=full_url)

        for attempt in range(self._MAX_RETRIES + 1):
            await self._rate_limit()
            try:
                async with self._circuit_breaker:
                    response = await self._execute_request(full_url, params=params, headers=headers)
                    if response.status_code >= 500:
                        raise ServiceUnavailableError(
                            f"HTTP {response.status_code} for {full_url}",
                            service=self._service_name,
                            context=context,
                        )
            except httpx.RequestError as e:
                if attempt < self._MAX_RETRIES:
                    logger.warning(f"{self._service_name} request error (attempt {attempt + 1}): {e}")
                    await asyncio.sleep(2 ** (attempt + 1))
                    continue
                logger.error(f"{self._service_name} request failed: {e}")
                raise NetworkError(f"{self._service_name} request failed: {e}", context=context) from e

            if response.status_code == 429:
                if attempt < self._MAX_RETRIES:
                    retry_after = self._get_retry_after(response, attempt)
                    logger.warning(
                        f"{self._service_name}: Rate limited (429), "
                        f"retry {attempt + 1}/{self._MAX_RETRIES} in {retry_after:.1f}s"
                    )
                    await asyncio.sleep(retry_after)
                    continue
                logger.warning(f"{self._service_name}: Rate limit exceeded after retries")
                raise RateLimitError(
                    f"{self._service_name} rate limit exceeded",
                    retry_after=self._get_retry_after(response, attempt),
                    context=context,
                )

            if response.status_code == 404:
                raise NotFoundError(f"{self._service_name} resource", full_url)

            if not response.is_success:
                logger.warning(f"{self._service_name} HTTP error {response.status_code}: {response.reason_phrase}")
                raise NetworkError(
                    f"{self._service_name} HTTP {response.status_code}: {response.reason_phrase}",
                    status_code=response.status_code,
                    context=context,
                )

            return self._parse_response(response, expect_json)

        raise NetworkError(f"{self._service_name} request failed after retries", context=context)

    async def _execute_request(
        self,
        url: str,
        *,
        params: Any = None,
        headers: dict[str, str] | None = None,
    ) -> httpx.Response:
        """Execute the actual HTTP request. Override for custom behavior."""
        return await self._client.get(url, params=params, headers=headers or {})

    def _parse_response(self, response: httpx.Response, expect_json: bool) -> Any:
        """Parse response body. Override for custom extraction logic."""
        if not expect_json:
            return response.text
        try:
            return response.json()
        except ValueError as e:
            raise ParseError(str(e), source=self._service_name) from e

    @staticmethod
    def _get_retry_after(response: httpx.Response, attempt: int) -> float:
        """Extract Retry-After from response headers, with exponential backoff fallback."""
        try:
            return float(response.headers.get("Retry-After", 2 ** (attempt + 1)))
        except (ValueError, TypeError):
            return float(2 ** (attempt + 1))

    async def close(self) -> None:
        """Close the underlying HTTP client."""
        await self._client.aclose()

    async def __aenter__(self) -> Self:
        return self

    async def __aexit__(self, *args: object) -> None:
        await self.close()
