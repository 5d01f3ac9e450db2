"""Repositories resource client."""

from typing import TYPE_CHECKING, Any
from urllib.parse import quote

from wacs.types.repos import Repository, RepositoryOwner

if TYPE_CHECKING:
    from wacs.transport import HTTPTransport

DEFAULT_PAGE_SIZE = 50


def _parse_owner(data: dict[str, Any]) -> RepositoryOwner:
    return RepositoryOwner(
        id=data.get("id", 0),
        username=data.get("login") or data.get("username", ""),
    )


def _parse_repository(data: dict[str, Any]) -> Repository:
    """Parse repository data as returned by the repos endpoints."""
    owner = _parse_owner(data.get("owner") or {})
    return Repository(
        id=data["id"],
        name=data["name"],
        full_name=data.get("full_name") or f"{owner.username}/{data['name']}",
        owner=owner,
        clone_url=data.get("clone_url", ""),
        html_url=data.get("html_url", ""),
        ssh_url=data.get("ssh_url", ""),
        description=data.get("description") or "",
        private=bool(data.get("private", False)),
        empty=bool(data.get("empty", False)),
        default_branch=data.get("default_branch") or "master",
    )


def _unseen(data: list[dict[str, Any]], seen: set[int]) -> list[Repository]:
    """Parse a listing page, dropping repositories already collected."""
    fresh = []
    for item in data:
        repo = _parse_repository(item)
        if repo.id not in seen:
            seen.add(repo.id)
            fresh.append(repo)
    return fresh


def _repo_path(owner: str, name: str) -> str:
    return f"/repos/{quote(owner, safe='')}/{quote(name, safe='')}"


def _create_body(name: str, description: str, private: bool, auto_init: bool) -> dict[str, Any]:
    return {
        "name": name,
        "description": description,
        "private": private,
        "auto_init": auto_init,
    }


class ReposClient:
    """Client for repository-related operations."""

    def __init__(self, transport: "HTTPTransport") -> None:
        """
        Initialize the repos client.

        Args:
            transport: HTTP transport for making requests
        """
        self.transport = transport

    def create(
        self,
        name: str,
        description: str = "",
        private: bool = False,
        auto_init: bool = False,
    ) -> Repository:
        """
        Create a repository owned by the authenticated user.

        Args:
            name: Repository name
            description: Optional repository description
            private: Create a private repository (default: False)
            auto_init: Let the server create an initial commit (default: False)

        Returns:
            Repository object with clone_url, etc.

        Raises:
            AuthenticationError: If the token is invalid
            ConflictError: If a repository with that name already exists
        """
        data = self.transport.request(
            "POST",
            "/user/repos",
            body=_create_body(name, description, private, auto_init),
        )
        return _parse_repository(data)

    def get(self, owner: str, name: str) -> Repository:
        """
        Get repository information.

        Raises:
            NotFoundError: If repository not found
        """
        data = self.transport.request("GET", _repo_path(owner, name))
        return _parse_repository(data)

    def delete(self, owner: str, name: str) -> None:
        """Delete a repository."""
        self.transport.request("DELETE", _repo_path(owner, name))

    def list_mine(self, page_size: int = DEFAULT_PAGE_SIZE) -> list[Repository]:
        """
        List repositories of the authenticated user.

        Walks the paginated listing until a page comes back empty or holds
        nothing new. A server-side cap on the page size does not truncate the
        result, and a server that ignores paging is read once.

        Returns:
            Repositories in the order the server lists them
        """
        repos: list[Repository] = []
        seen: set[int] = set()
        page = 1
        while True:
            data = self.transport.request(
                "GET", "/user/repos", params={"page": page, "limit": page_size}
            )
            fresh = _unseen(data or [], seen)
            if not fresh:
                return repos
            repos.extend(fresh)
            page += 1
