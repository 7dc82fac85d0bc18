"""Base HTTP client for Solana Analytics.

This module provides the shared plumbing for every upstream client: a
pooled ``httpx.AsyncClient`` with an explicit per-request timeout, mapping
of transport and HTTP failures onto :class:`UpstreamError`, and the shared
retry policy.
"""

# Standard library imports
import json
from typing import Any, Awaitable, Callable, Dict, Optional, TypeVar

# Third-party library imports
import httpx

# Internal imports
from solana_analytics.config import RetryConfig, get_retry_config
from solana_analytics.constants import DEFAULT_HEADERS
from solana_analytics.logging_config import get_logger
from solana_analytics.utils.errors import UpstreamError
from solana_analytics.utils.retry import with_retry

# Type variable for generic functions
T = TypeVar('T')

# Get logger
logger = get_logger(__name__)


class BaseHTTPClient:
    """Base client for JSON-over-HTTP upstream collaborators."""

    def __init__(
        self,
        timeout: float = 15.0,
        retry_config: Optional[RetryConfig] = None,
        http_client: Optional[httpx.AsyncClient] = None
    ):
        """Initialize the client.

        Args:
            timeout: Per-request timeout in seconds
            retry_config: Retry policy settings. Defaults to environment-based config.
            http_client: Optional pre-built HTTP client (used by tests)
        """
        self.timeout = timeout
        self.retry_config = retry_config or get_retry_config()
        self._http_client = http_client
        self._owns_client = http_client is None

    @property
    def http_client(self) -> httpx.AsyncClient:
        """Shared HTTP client, created lazily."""
        if self._http_client is None:
            self._http_client = httpx.AsyncClient(
                timeout=self.timeout,
                headers=DEFAULT_HEADERS,
                limits=httpx.Limits(max_keepalive_connections=10, max_connections=20)
            )
            self._owns_client = True
        return self._http_client

    async def _request_json(
        self,
        method: str,
        url: str,
        *,
        params: Optional[Dict[str, Any]] = None,
        headers: Optional[Dict[str, str]] = None,
        json_body: Optional[Any] = None
    ) -> Any:
        """Issue one HTTP request and decode the JSON body.

        Args:
            method: HTTP method
            url: Absolute URL
            params: Optional query parameters
            headers: Optional extra headers
            json_body: Optional JSON request body

        Returns:
            The decoded JSON body

        Raises:
            UpstreamError: On timeout, network failure, non-success status or
                an undecodable body
        """
        try:
            response = await self.http_client.request(
                method,
                url,
                params=params,
                headers=headers,
                json=json_body,
                timeout=self.timeout
            )
        except httpx.TimeoutException as e:
            raise UpstreamError(
                f"Request timed out after {self.timeout}s",
                endpoint=url
            ) from e
        except httpx.HTTPError as e:
            raise UpstreamError(f"Request failed: {str(e) or type(e).__name__}", endpoint=url) from e

        if response.is_error:
            raise UpstreamError(
                f"HTTP error! status: {response.status_code}",
                status_code=response.status_code,
                endpoint=url
            )

        try:
            return response.json()
        except (json.JSONDecodeError, ValueError) as e:
            raise UpstreamError(f"Invalid JSON response: {str(e)}", endpoint=url) from e

    async def _with_retry(
        self,
        operation: Callable[[], Awaitable[T]],
        operation_name: str
    ) -> T:
        """Run an upstream call under the shared retry policy.

        Only :class:`UpstreamError` is retried; invalid input, not-found and
        missing-configuration failures propagate on the first attempt.
        """
        return await with_retry(
            operation,
            max_attempts=self.retry_config.max_attempts,
            base_delay=self.retry_config.base_delay,
            retry_on=(UpstreamError,),
            operation_name=operation_name
        )

    async def __aenter__(self):
        """Async context manager entry."""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit."""
        await self.close()

    async def close(self):
        """Close the client and release resources."""
        if self._http_client is not None and self._owns_client:
            await self._http_client.aclose()
        self._http_client = None
