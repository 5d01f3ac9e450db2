"""
WACS async client.

Provides the async interface for interacting with a WACS server.
"""

import os
from typing import Any

import httpx

from wacs.async_clients import AsyncReposClient, AsyncUsersClient
from wacs.async_transport import AsyncHTTPTransport
from wacs.config import Credentials
from wacs.exceptions import ConfigurationError
from wacs.git import AsyncGitHelper
from wacs.transport import RetryConfig
from wacs.types.users import User


class AsyncWacsClient:
    """
    Async client for interacting with a WACS server.

    Example:
        ```python
        import asyncio
        from wacs import AsyncWacsClient
        from wacs.config import Credentials

        async def main():
            async with AsyncWacsClient("https://content.example.org/api/v1") as client:
                user = await client.login(Credentials("alice", "secret"), "my-token")
                repo = await client.repos.create(name="my-repo")

        asyncio.run(main())
        ```
    """

    DEFAULT_TIMEOUT = 30.0

    def __init__(
        self,
        endpoint: str,
        token: str | None = None,
        timeout: float = DEFAULT_TIMEOUT,
        retry_config: RetryConfig | None = None,
        http_transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """
        Initialize the async WACS client.

        Args:
            endpoint: API endpoint, e.g. "https://content.example.org/api/v1"
            token: Access token from an earlier login (optional)
            timeout: Request timeout in seconds (default: 30.0)
            retry_config: Configuration for retry behavior (optional)
            http_transport: Custom httpx async transport (optional, for testing)
        """
        if not endpoint:
            raise ConfigurationError("endpoint must not be empty")

        self.endpoint = endpoint
        self.timeout = timeout

        self._transport = AsyncHTTPTransport(
            base_url=endpoint,
            token=token,
            timeout=timeout,
            retry_config=retry_config,
            http_transport=http_transport,
        )

        self.users = AsyncUsersClient(self._transport)
        self.repos = AsyncReposClient(self._transport)

    @classmethod
    def for_user(cls, user: User, endpoint: str, **options: Any) -> "AsyncWacsClient":
        """Create a client authenticated with a user's session token."""
        return cls(endpoint, token=user.token, **options)

    @classmethod
    def from_env(
        cls,
        timeout: float = DEFAULT_TIMEOUT,
        retry_config: RetryConfig | None = None,
    ) -> "AsyncWacsClient":
        """
        Create an async client from environment variables.

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

    async def login(self, credentials: Credentials, token_name: str) -> User:
        """Log in and authenticate this client as the returned user."""
        return await self.users.login(credentials, token_name)

    def git(self, user: User, **options: Any) -> AsyncGitHelper:
        """Async git helper acting for ``user`` with this client's timeout."""
        options.setdefault("timeout", self.timeout)
        return AsyncGitHelper(user, **options)

    @property
    def transport(self) -> AsyncHTTPTransport:
        """Get the underlying async HTTP transport (for advanced use cases)."""
        return self._transport

    async def close(self) -> None:
        """Close the client and release resources."""
        await self._transport.close()

    async def __aenter__(self) -> "AsyncWacsClient":
        """Async context manager entry."""
        return self

    async def __aexit__(self, *args: Any) -> None:
        """Async context manager exit - closes the client."""
        await self.close()
