"""User and access token data models."""

from dataclasses import dataclass, field


@dataclass(frozen=True)
class AccessToken:
    """An API access token as reported by the server.

    ``sha1`` is the secret itself. Current servers only return it from the
    create call; listings carry ``token_last_eight`` instead.
    """

    id: int
    name: str
    sha1: str | None = field(default=None, repr=False)
    token_last_eight: str | None = None


@dataclass(frozen=True)
class User:
    """An authenticated user session.

    Returned by login and handed to every later operation. The token
    authorizes API calls and git transport.
    """

    id: int
    username: str
    token: str = field(repr=False)
    full_name: str = ""
    email: str = ""
    avatar_url: str = ""
    token_name: str | None = None

    @property
    def commit_email(self) -> str:
        """Email used as commit identity, falling back to a no-reply address."""
        return self.email or f"{self.username}@noreply.localhost"
