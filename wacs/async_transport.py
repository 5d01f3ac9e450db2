"""
Async HTTP Transport for the WACS client.

Handles async HTTP communication with automatic retry logic, authentication
and error handling using the httpx async client.
"""

import asyncio
import time
from collections.abc import Callable, Coroutine
from typing import Any

import httpx

from wacs.exceptions import ServerError, WacsError
from wacs.logging import log_http_request, log_http_response
from wacs.transport import (
    BaseHTTPTransport,
    BasicAuth,
    RetryConfig,
    decode_response,
    parse_error_response,
)


class AsyncHTTPTransport(BaseHTTPTransport):
    """
    Async HTTP transport layer with token authentication and retry logic.

    Handles:
    - ``Authorization: token`` headers, or basic auth for token management
    - Exponential backoff with jitter for retries
    - Retry-After header respect for rate limiting
    - Error response parsing into typed exceptions
    """

    def __init__(
        self,
        base_url: str,
        token: str | None = None,
        timeout: float = 30.0,
        retry_config: RetryConfig | None = None,
        http_transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """
        Initialize async HTTP transport.

        Args:
            base_url: API endpoint (e.g., "https://content.example.org/api/v1")
            token: Access token for authenticated calls (optional)
            timeout: Request timeout in seconds
            retry_config: Configuration for retry behavior
            http_transport: Custom httpx async transport (e.g. ``httpx.MockTransport``)
        """
        super().__init__(base_url, token, timeout, retry_config)

        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=timeout,
            headers={"Accept": "application/json"},
            transport=http_transport,
        )

    async def close(self) -> None:
        """Close the HTTP client."""
        await self._client.aclose()

    async def __aenter__(self) -> "AsyncHTTPTransport":
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.close()

    async def request(
        self,
        method: str,
        path: str,
        params: dict[str, Any] | None = None,
        body: dict[str, Any] | None = None,
        auth: BasicAuth | None = None,
    ) -> Any:
        """
        Make a request with automatic retry.

        Args:
            method: HTTP method
            path: API path relative to the endpoint
            params: Query parameters
            body: JSON request body
            auth: (username, password) for basic auth instead of the token

        Returns:
            Parsed JSON response, or None for empty responses

        Raises:
            WacsError: On API errors
        """
        headers = self._auth_headers(auth)

        async def make_request() -> httpx.Response:
            log_http_request(method, f"{self.base_url}{path}", headers, body)
            return await self._client.request(
                method,
                path,
                params=params,
                json=body,
                headers=headers,
                auth=auth if auth is not None else httpx.USE_CLIENT_DEFAULT,
            )

        return await self._execute_with_retry(make_request)

    async def _execute_with_retry(
        self, request_fn: Callable[[], Coroutine[Any, Any, httpx.Response]]
    ) -> Any:
        """
        Execute a request with automatic retry on retryable errors.

        Args:
            request_fn: Async function that makes the HTTP request

        Returns:
            Parsed JSON response

        Raises:
            WacsError: On non-retryable errors or after max retries
        """
        last_error: Exception | None = None

        for attempt in range(self.retry_config.max_retries + 1):
            try:
                started = time.monotonic()
                response = await request_fn()
                elapsed_ms = (time.monotonic() - started) * 1000

                if response.status_code < 400:
                    data = decode_response(response)
                    log_http_response(
                        response.status_code, str(response.url), data, elapsed_ms
                    )
                    return data

                log_http_response(response.status_code, str(response.url), None, elapsed_ms)
                error = parse_error_response(response)

                if not self._should_retry(response.status_code, attempt):
                    raise error

                last_error = error

                retry_after = response.headers.get("Retry-After")
                wait_time = self._get_backoff_time(attempt, retry_after)
                await asyncio.sleep(wait_time)

            except httpx.RequestError as e:
                # Network errors are retryable
                if attempt >= self.retry_config.max_retries:
                    raise ServerError("CONNECTION_ERROR", str(e)) from e

                last_error = e
                wait_time = self._get_backoff_time(attempt, None)
                await asyncio.sleep(wait_time)

        if last_error:
            if isinstance(last_error, WacsError):
                raise last_error
            raise ServerError("MAX_RETRIES_EXCEEDED", str(last_error))

        raise ServerError("UNKNOWN_ERROR", "Request failed with no error details")
