"""
HTTP Transport for the WACS client.

Handles HTTP communication with automatic retry logic, token/basic
authentication, and error handling.
"""

import random
import time
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

import httpx

from wacs.exceptions import (
    AuthenticationError,
    AuthorizationError,
    ConflictError,
    NotFoundError,
    RateLimitedError,
    ServerError,
    ValidationError,
    WacsError,
)
from wacs.logging import log_http_request, log_http_response

BasicAuth = tuple[str, str]


@dataclass
class RetryConfig:
    """Configuration for automatic retry behavior."""

    max_retries: int = 3
    backoff_factor: float = 2.0
    retry_on: list[int] = field(default_factory=lambda: [429, 500, 502, 503])
    respect_retry_after: bool = True
    max_backoff: float = 60.0  # Maximum backoff time in seconds
    jitter: float = 0.1  # Jitter factor (0.1 = ±10%)


def parse_error_response(response: httpx.Response) -> WacsError:
    """
    Parse an error response into a typed exception.

    The server reports errors as ``{"message": ..., "url": ...}``.

    Args:
        response: HTTP response with error status

    Returns:
        Appropriate WacsError subclass
    """
    try:
        data = response.json()
    except ValueError:
        data = {}
    if not isinstance(data, dict):
        data = {}

    status_code = response.status_code
    try:
        code = httpx.codes(status_code).name
    except ValueError:
        code = f"HTTP_{status_code}"
    message = data.get("message") or f"HTTP {status_code}"
    request_id = response.headers.get("X-Request-Id")

    if status_code == 401:
        return AuthenticationError(code, message, request_id)
    elif status_code == 403:
        return AuthorizationError(code, message, request_id)
    elif status_code == 404:
        return NotFoundError(code, message, request_id)
    elif status_code == 409:
        return ConflictError(code, message, request_id)
    elif status_code == 429:
        retry_after_str = response.headers.get("Retry-After", "60")
        try:
            retry_after = int(retry_after_str)
        except ValueError:
            retry_after = 60
        return RateLimitedError(code, message, retry_after, request_id)
    elif status_code >= 500:
        return ServerError(code, message, request_id)
    else:
        return ValidationError(code, message, request_id)


def decode_response(response: httpx.Response) -> Any:
    """Decode a successful response body, treating empty bodies as None."""
    if response.status_code == 204 or not response.content:
        return None
    return response.json()


class BaseHTTPTransport:
    """
    Behaviour shared by the sync and async transports.

    Holds the endpoint, the current token and the retry policy, and knows how
    to compute backoff and build auth headers.
    """

    def __init__(
        self,
        base_url: str,
        token: str | None = None,
        timeout: float = 30.0,
        retry_config: RetryConfig | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.token = token
        self.timeout = timeout
        self.retry_config = retry_config or RetryConfig()

    def set_token(self, token: str | None) -> None:
        """Use a different access token for subsequent requests."""
        self.token = token

    def _auth_headers(self, auth: BasicAuth | None) -> dict[str, str]:
        """Token header for API calls; basic auth is passed to httpx separately."""
        if auth is None and self.token:
            return {"Authorization": f"token {self.token}"}
        return {}

    def _should_retry(self, status_code: int, attempt: int) -> bool:
        """
        Determine if a request should be retried.

        Args:
            status_code: HTTP status code
            attempt: Current attempt number (0-indexed)

        Returns:
            True if the request should be retried
        """
        if attempt >= self.retry_config.max_retries:
            return False

        return status_code in self.retry_config.retry_on

    def _get_backoff_time(
        self, attempt: int, retry_after: str | None
    ) -> float:
        """
        Calculate backoff time for retry.

        Uses exponential backoff with jitter, respecting Retry-After header
        if present.

        Args:
            attempt: Current attempt number (0-indexed)
            retry_after: Value of Retry-After header (if present)

        Returns:
            Time to wait in seconds
        """
        if retry_after and self.retry_config.respect_retry_after:
            try:
                return float(retry_after)
            except ValueError:
                pass  # Fall through to exponential backoff

        base_wait = self.retry_config.backoff_factor ** attempt

        jitter_range = base_wait * self.retry_config.jitter
        jitter = random.uniform(-jitter_range, jitter_range)
        wait_time = base_wait + jitter

        return min(wait_time, self.retry_config.max_backoff)


class HTTPTransport(BaseHTTPTransport):
    """
    HTTP transport layer with token authentication and retry logic.

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
        http_transport: httpx.BaseTransport | None = None,
    ) -> None:
        """
        Initialize HTTP transport.

        Args:
            base_url: API endpoint (e.g., "https://content.example.org/api/v1")
            token: Access token for authenticated calls (optional)
            timeout: Request timeout in seconds
            retry_config: Configuration for retry behavior
            http_transport: Custom httpx transport (e.g. ``httpx.MockTransport``)
        """
        super().__init__(base_url, token, timeout, retry_config)

        self._client = httpx.Client(
            base_url=self.base_url,
            timeout=timeout,
            headers={"Accept": "application/json"},
            transport=http_transport,
        )

    def close(self) -> None:
        """Close the HTTP client."""
        self._client.close()

    def __enter__(self) -> "HTTPTransport":
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()

    def request(
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
            method: HTTP method (GET, POST, DELETE, etc.)
            path: API path relative to the endpoint (e.g., "/user/repos")
            params: Query parameters
            body: JSON request body
            auth: (username, password) for basic auth instead of the token

        Returns:
            Parsed JSON response, or None for empty responses

        Raises:
            WacsError: On API errors
        """
        headers = self._auth_headers(auth)

        def make_request() -> httpx.Response:
            log_http_request(method, f"{self.base_url}{path}", headers, body)
            return self._client.request(
                method,
                path,
                params=params,
                json=body,
                headers=headers,
                auth=auth if auth is not None else httpx.USE_CLIENT_DEFAULT,
            )

        return self._execute_with_retry(make_request)

    def _execute_with_retry(
        self, request_fn: Callable[[], httpx.Response]
    ) -> Any:
        """
        Execute a request with automatic retry on retryable errors.

        Args:
            request_fn: Function that makes the HTTP request

        Returns:
            Parsed JSON response

        Raises:
            WacsError: On non-retryable errors or after max retries
        """
        last_error: Exception | None = None

        for attempt in range(self.retry_config.max_retries + 1):
            try:
                started = time.monotonic()
                response = request_fn()
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
                time.sleep(wait_time)

            except httpx.RequestError as e:
                # Network errors are retryable
                if attempt >= self.retry_config.max_retries:
                    raise ServerError("CONNECTION_ERROR", str(e)) from e

                last_error = e
                wait_time = self._get_backoff_time(attempt, None)
                time.sleep(wait_time)

        if last_error:
            if isinstance(last_error, WacsError):
                raise last_error
            raise ServerError("MAX_RETRIES_EXCEEDED", str(last_error))

        raise ServerError("UNKNOWN_ERROR", "Request failed with no error details")
