"""Users and access token resource client."""

from typing import TYPE_CHECKING, Any
from urllib.parse import quote

from wacs.config import Credentials
from wacs.exceptions import AuthenticationError, AuthorizationError, ServerError
from wacs.logging import get_logger, truncate_token
from wacs.types.users import AccessToken, User

if TYPE_CHECKING:
    from wacs.transport import HTTPTransport

logger = get_logger()

DEFAULT_TOKEN_SCOPES = ["write:repository", "write:user"]


def _parse_user(data: dict[str, Any], token: str, token_name: str | None = None) -> User:
    """Parse a user profile and attach the session token."""
    return User(
        id=data["id"],
        username=data.get("login") or data["username"],
        token=token,
        full_name=data.get("full_name") or "",
        email=data.get("email") or "",
        avatar_url=data.get("avatar_url") or "",
        token_name=token_name,
    )


def _parse_token(data: dict[str, Any]) -> AccessToken:
    """Parse an access token, treating an empty sha1 as unknown."""
    return AccessToken(
        id=data["id"],
        name=data["name"],
        sha1=data.get("sha1") or None,
        token_last_eight=data.get("token_last_eight"),
    )


def _tokens_path(username: str) -> str:
    return f"/users/{quote(username, safe='')}/tokens"


def _as_authentication_error(error: AuthorizationError) -> AuthenticationError:
    return AuthenticationError(error.code, error.message, error.request_id)


class UsersClient:
    """Client for login, profile and access token operations."""

    def __init__(self, transport: "HTTPTransport") -> None:
        """
        Initialize the users client.

        Args:
            transport: HTTP transport for making requests
        """
        self.transport = transport

    def login(
        self,
        credentials: Credentials,
        token_name: str,
        scopes: list[str] | None = None,
    ) -> User:
        """
        Obtain an access token for the credentials and fetch the profile.

        A token named ``token_name`` is reused when the server still reveals
        its secret; otherwise it is deleted and issued again. The transport is
        switched to the new token, so later calls on this client are
        authenticated as the returned user.

        Args:
            credentials: Username and password
            token_name: Name under which the token is registered
            scopes: Token scopes for servers that require them

        Returns:
            User carrying the token

        Raises:
            AuthenticationError: If the credentials are rejected
        """
        try:
            tokens = self.list_tokens(credentials)
            existing = next((t for t in tokens if t.name == token_name), None)

            if existing is not None and existing.sha1:
                secret = existing.sha1
            else:
                if existing is not None:
                    logger.info("Replacing access token %r for %s", token_name, credentials.username)
                    self.delete_token(credentials, existing.id)
                created = self.create_token(credentials, token_name, scopes)
                if not created.sha1:
                    raise ServerError("TOKEN_MISSING", "Server did not return the token secret")
                secret = created.sha1
        except AuthorizationError as e:
            raise _as_authentication_error(e) from e

        self.transport.set_token(secret)
        user = self.get_current(token_name)
        logger.info("Logged in as %s (token %s)", user.username, truncate_token(secret))
        return user

    def get_current(self, token_name: str | None = None) -> User:
        """
        Get the profile of the user owning the transport's token.

        Raises:
            AuthenticationError: If no valid token is set
        """
        if not self.transport.token:
            raise AuthenticationError("UNAUTHORIZED", "No access token; log in first")
        data = self.transport.request("GET", "/user")
        return _parse_user(data, self.transport.token, token_name)

    def list_tokens(self, credentials: Credentials) -> list[AccessToken]:
        """List the access tokens of a user (basic auth)."""
        data = self.transport.request(
            "GET",
            _tokens_path(credentials.username),
            auth=(credentials.username, credentials.password),
        )
        return [_parse_token(item) for item in data or []]

    def create_token(
        self,
        credentials: Credentials,
        name: str,
        scopes: list[str] | None = None,
    ) -> AccessToken:
        """Create an access token (basic auth). The secret is in ``sha1``."""
        data = self.transport.request(
            "POST",
            _tokens_path(credentials.username),
            body={"name": name, "scopes": scopes if scopes is not None else DEFAULT_TOKEN_SCOPES},
            auth=(credentials.username, credentials.password),
        )
        return _parse_token(data)

    def delete_token(self, credentials: Credentials, token_id: int) -> None:
        """Delete an access token by id (basic auth)."""
        self.transport.request(
            "DELETE",
            f"{_tokens_path(credentials.username)}/{token_id}",
            auth=(credentials.username, credentials.password),
        )
