"""Shared async HTTP client for upstream catalogs.

Handles client lifecycle, authentication parameters, retries on
timeouts and mapping of HTTP failures to source exceptions.
"""

import logging
from types import TracebackType
from typing import Any, Self

import httpx
from tenacity import (
    AsyncRetrying,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from moodreel.sources.errors import (
    SourceNotFoundError,
    SourceRateLimitError,
    SourceMalformedError,
    SourceResponseError,
    SourceTimeoutError,
)

logger = logging.getLogger(__name__)

USER_AGENT = "MoodReel/1.0 (+https://github.com/moodreel)"


class BaseHTTPClient:
    """Async HTTP client base with retries and error mapping.

    The underlying ``httpx.AsyncClient`` is created lazily on first use
    and shared by all requests of the instance.

    Attributes:
        source_name: Source identifier used in errors and logs.
    """

    source_name: str = "base"

    def __init__(
        self,
        base_url: str,
        timeout: float,
        max_retries: int = 2,
        retry_wait: float = 0.5,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize client configuration.

        Args:
            base_url: API base URL.
            timeout: Request timeout in seconds.
            max_retries: Attempts for timed-out requests.
            retry_wait: Initial backoff between attempts (seconds).
            transport: Optional transport (``httpx.MockTransport`` in tests).
        """
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._max_retries = max_retries
        self._retry_wait = retry_wait
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    # -------------------------------------------------------------------------
    # Context Manager
    # -------------------------------------------------------------------------

    async def __aenter__(self) -> Self:
        self._get_client()
        return self

    async def __aexit__(
        self,
        _exc_type: type[BaseException] | None,
        _exc_val: BaseException | None,
        _exc_tb: TracebackType | None,
    ) -> None:
        await self.aclose()

    def _get_client(self) -> httpx.AsyncClient:
        """Return the shared client, creating it on first use."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=self._timeout,
                headers={"User-Agent": USER_AGENT, "Accept": "application/json"},
                transport=self._transport,
                follow_redirects=True,
            )
        return self._client

    async def aclose(self) -> None:
        """Close the underlying HTTP client."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    # -------------------------------------------------------------------------
    # HTTP Methods
    # -------------------------------------------------------------------------

    def _auth_params(self) -> dict[str, Any]:
        """Query parameters added to every request."""
        return {}

    def _auth_headers(self) -> dict[str, str]:
        """Headers added to every request."""
        return {}

    async def _get(
        self,
        endpoint: str,
        params: dict[str, Any] | None = None,
    ) -> Any:
        """Execute GET request with retries on timeout.

        Args:
            endpoint: API endpoint path (may be empty).
            params: Optional query parameters.

        Returns:
            Decoded JSON body.
        """
        return await self._request("GET", endpoint, params=params)

    async def _post(
        self,
        endpoint: str,
        payload: dict[str, Any],
    ) -> Any:
        """Execute POST request with a JSON body.

        Args:
            endpoint: API endpoint path.
            payload: JSON body.

        Returns:
            Decoded JSON body.
        """
        return await self._request("POST", endpoint, payload=payload)

    async def _request(
        self,
        method: str,
        endpoint: str,
        params: dict[str, Any] | None = None,
        payload: dict[str, Any] | None = None,
    ) -> Any:
        """Execute a request with retries on timeout.

        Args:
            method: HTTP method.
            endpoint: API endpoint path (may be empty).
            params: Optional query parameters.
            payload: Optional JSON body.

        Returns:
            Decoded JSON body.

        Raises:
            SourceNotFoundError: When resource not found (404).
            SourceRateLimitError: When rate limit exceeded (429).
            SourceResponseError: On other errors or malformed bodies.
            SourceTimeoutError: When every attempt timed out.
        """
        request_params = self._auth_params()
        if params:
            request_params.update(params)

        url = f"{self._base_url}{endpoint}" if endpoint else self._base_url
        client = self._get_client()

        try:
            async for attempt in AsyncRetrying(
                retry=retry_if_exception_type(httpx.TimeoutException),
                stop=stop_after_attempt(self._max_retries),
                wait=wait_exponential(multiplier=self._retry_wait, min=self._retry_wait, max=2),
                reraise=True,
            ):
                with attempt:
                    response = await client.request(
                        method,
                        url,
                        params=request_params,
                        json=payload,
                        headers=self._auth_headers(),
                    )
        except httpx.TimeoutException as e:
            logger.warning("%s request timeout: %s", self.source_name, endpoint or "/")
            raise SourceTimeoutError(f"Timeout: {endpoint}", self.source_name) from e
        except httpx.HTTPError as e:
            raise SourceResponseError(f"Transport error: {e}", self.source_name) from e

        return self._handle_response(response, endpoint)

    def _handle_response(self, response: httpx.Response, endpoint: str) -> Any:
        """Handle HTTP response and extract JSON.

        Args:
            response: HTTP response object.
            endpoint: API endpoint (for messages).

        Returns:
            Decoded JSON body.

        Raises:
            SourceNotFoundError: When resource not found (404).
            SourceRateLimitError: When rate limit exceeded (429).
            SourceResponseError: On other errors or malformed bodies.
        """
        if response.status_code == 404:
            raise SourceNotFoundError(f"Not found: {endpoint}", self.source_name)

        if response.status_code == 429:
            retry_after = response.headers.get("Retry-After", "unknown")
            logger.warning("%s rate limited. Retry after %ss", self.source_name, retry_after)
            raise SourceRateLimitError(f"Rate limited: {endpoint}", self.source_name)

        if not response.is_success:
            raise SourceResponseError(
                f"{self.source_name} API error {response.status_code}: {endpoint}",
                self.source_name,
            )

        try:
            return response.json()
        except ValueError as e:
            raise SourceMalformedError(f"Malformed JSON: {endpoint}", self.source_name) from e

