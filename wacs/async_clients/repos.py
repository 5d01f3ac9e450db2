"""Async repositories resource client."""

from typing import TYPE_CHECKING

from wacs.clients.repos import (
    DEFAULT_PAGE_SIZE,
    _create_body,
    _parse_repository,
    _repo_path,
    _unseen,
)
from wacs.types.repos import Repository

if TYPE_CHECKING:
    from wacs.async_transport import AsyncHTTPTransport


class AsyncReposClient:
    """Async client for repository-related operations."""

    def __init__(self, transport: "AsyncHTTPTransport") -> None:
        """
        Initialize the async repos client.

        Args:
            transport: Async HTTP transport for making requests
        """
        self.transport = transport

    async def create(
        self,
        name: str,
        description: str = "",
        private: bool = False,
        auto_init: bool = False,
    ) -> Repository:
        """
        Create a repository owned by the authenticated user.

        Raises:
            AuthenticationError: If the token is invalid
            ConflictError: If a repository with that name already exists
        """
        data = await self.transport.request(
            "POST",
            "/user/repos",
            body=_create_body(name, description, private, auto_init),
        )
        return _parse_repository(data)

    async def get(self, owner: str, name: str) -> Repository:
        """Get repository information."""
        data = await self.transport.request("GET", _repo_path(owner, name))
        return _parse_repository(data)

    async def delete(self, owner: str, name: str) -> None:
        """Delete a repository."""
        await self.transport.request("DELETE", _repo_path(owner, name))

    async def list_mine(self, page_size: int = DEFAULT_PAGE_SIZE) -> list[Repository]:
        """List repositories of the authenticated user, all pages."""
        repos: list[Repository] = []
        seen: set[int] = set()
        page = 1
        while True:
            data = await self.transport.request(
                "GET", "/user/repos", params={"page": page, "limit": page_size}
            )
            fresh = _unseen(data or [], seen)
            if not fresh:
                return repos
            repos.extend(fresh)
            page += 1
