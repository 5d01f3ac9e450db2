"""Async users and access token resource client."""

from typing import TYPE_CHECKING

from wacs.clients.users import (
    DEFAULT_TOKEN_SCOPES,
    _as_authentication_error,
    _parse_token,
    _parse_user,
    _tokens_path,
)
from wacs.config import Credentials
from wacs.exceptions import AuthenticationError, AuthorizationError, ServerError
from wacs.logging import get_logger, truncate_token
from wacs.types.users import AccessToken, User

if TYPE_CHECKING:
    from wacs.async_transport import AsyncHTTPTransport

logger = get_logger()


class AsyncUsersClient:
    """Async client for login, profile and access token operations."""

    def __init__(self, transport: "AsyncHTTPTransport") -> None:
        """
        Initialize the async users client.

        Args:
            transport: Async HTTP transport for making requests
        """
        self.transport = transport

    async def login(
        self,
        credentials: Credentials,
        token_name: str,
        scopes: list[str] | None = None,
    ) -> User:
        """
        Obtain an access token for the credentials and fetch the profile.

        Same token reuse rules as ``UsersClient.login``.

        Raises:
            AuthenticationError: If the credentials are rejected
        """
        try:
            tokens = await self.list_tokens(credentials)
            existing = next((t for t in tokens if t.name == token_name), None)

            if existing is not None and existing.sha1:
                secret = existing.sha1
            else:
                if existing is not None:
                    logger.info("Replacing access token %r for %s", token_name, credentials.username)
                    await self.delete_token(credentials, existing.id)
                created = await self.create_token(credentials, token_name, scopes)
                if not created.sha1:
                    raise ServerError("TOKEN_MISSING", "Server did not return the token secret")
                secret = created.sha1
        except AuthorizationError as e:
            raise _as_authentication_error(e) from e

        self.transport.set_token(secret)
        user = await self.get_current(token_name)
        logger.info("Logged in as %s (token %s)", user.username, truncate_token(secret))
        return user

    async def get_current(self, token_name: str | None = None) -> User:
        """Get the profile of the user owning the transport's token."""
        if not self.transport.token:
            raise AuthenticationError("UNAUTHORIZED", "No access token; log in first")
        data = await self.transport.request("GET", "/user")
        return _parse_user(data, self.transport.token, token_name)

    async def list_tokens(self, credentials: Credentials) -> list[AccessToken]:
        """List the access tokens of a user (basic auth)."""
        data = await self.transport.request(
            "GET",
            _tokens_path(credentials.username),
            auth=(credentials.username, credentials.password),
        )
        return [_parse_token(item) for item in data or []]

    async def create_token(
        self,
        credentials: Credentials,
        name: str,
        scopes: list[str] | None = None,
    ) -> AccessToken:
        """Create an access token (basic auth)."""
        data = await self.transport.request(
            "POST",
            _tokens_path(credentials.username),
            body={"name": name, "scopes": scopes if scopes is not None else DEFAULT_TOKEN_SCOPES},
            auth=(credentials.username, credentials.password),
        )
        return _parse_token(data)

    async def delete_token(self, credentials: Credentials, token_id: int) -> None:
        """Delete an access token by id (basic auth)."""
        await self.transport.request(
            "DELETE",
            f"{_tokens_path(credentials.username)}/{token_id}",
            auth=(credentials.username, credentials.password),
        )
