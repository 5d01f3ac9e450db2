"""
WACS client.

Provides the primary synchronous interface for interacting with a WACS
(Gitea-compatible) content server.
"""

import os
from typing import Any

import httpx

from wacs.clients import ReposClient, UsersClient
from wacs.config import Credentials
from wacs.exceptions import ConfigurationError
from wacs.git import GitHelper
from wacs.transport import HTTPTransport, RetryConfig
from wacs.types.users import User


class WacsClient:
    """
    Main client for interacting with a WACS server.

    Aggregates the resource clients and keeps the session token.

    Example:
        ```python
        from wacs import WacsClient
        from wacs.config import Credentials

        with WacsClient("https://content.example.org/api/v1") as client:
            user = client.login(Credentials("alice", "secret"), "my-token")
            repo = client.repos.create(name="my-repo")
            names = [r.name for r in client.repos.list_mine()]
        ```
    """

    DEFAULT_TIMEOUT = 30.0

    def __init__(
        self,
        endpoint: str,
        token: str | None = None,
        timeout: float = DEFAULT_TIMEOUT,
        retry_config: RetryConfig | None = None,
        http_transport: httpx.BaseTransport | None = None,
    ) -> None:
        """
        Initialize the WACS client.

        Args:
            endpoint: API endpoint, e.g. "https://content.example.org/api/v1"
            token: Access token from an earlier login (optional)
            timeout: Request timeout in seconds (default: 30.0)
            retry_config: Configuration for retry behavior (optional)
            http_transport: Custom httpx transport (optional, for testing)
        """
        if not endpoint:
            raise ConfigurationError("endpoint must not be empty")

        self.endpoint = endpoint
        self.timeout = timeout

        self._transport = HTTPTransport(
            base_url=endpoint,
            token=token,
            timeout=timeout,
            retry_config=retry_config,
            http_transport=http_transport,
        )

        self.users = UsersClient(self._transport)
        self.repos = ReposClient(self._transport)

    @classmethod
    def for_user(cls, user: User, endpoint: str, **options: Any) -> "WacsClient":
        """Create a client authenticated with a user's session token."""
        return cls(endpoint, token=user.token, **options)

    @classmethod
    def from_env(
        cls,
        timeout: float = DEFAULT_TIMEOUT,
        retry_config: RetryConfig | None = None,
    ) -> "WacsClient":
        """
        Create a client from environment variables.

        Environment variables:
            WACS_ENDPOINT: API endpoint (required)
            WACS_TOKEN: Access token (optional)

        Raises:
            ConfigurationError: If WACS_ENDPOINT is missing
        """
        endpoint = os.environ.get("WACS_ENDPOINT")
        if not endpoint:
            raise ConfigurationError("WACS_ENDPOINT environment variable not set")

        return cls(
            endpoint=endpoint,
            token=os.environ.get("WACS_TOKEN") or None,
            timeout=timeout,
            retry_config=retry_config,
        )

    def login(self, credentials: Credentials, token_name: str) -> User:
        """Log in and authenticate this client as the returned user."""
        return self.users.login(credentials, token_name)

    def git(self, user: User, **options: Any) -> GitHelper:
        """Git helper acting for ``user`` with this client's timeout."""
        options.setdefault("timeout", self.timeout)
        return GitHelper(user, **options)

    @property
    def transport(self) -> HTTPTransport:
        """Get the underlying HTTP transport (for advanced use cases)."""
        return self._transport

    def close(self) -> None:
        """Close the client and release resources."""
        self._transport.close()

    def __enter__(self) -> "WacsClient":
        """Context manager entry."""
        return self

    def __exit__(self, *args: Any) -> None:
        """Context manager exit - closes the client."""
        self.close()
