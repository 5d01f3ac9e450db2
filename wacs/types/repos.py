"""Repository-related data models."""

from dataclasses import dataclass


@dataclass(frozen=True)
class RepositoryOwner:
    """Owner of a repository."""

    id: int
    username: str


@dataclass(frozen=True)
class Repository:
    """Repository information."""

    id: int
    name: str
    full_name: str
    owner: RepositoryOwner
    clone_url: str
    html_url: str = ""
    ssh_url: str = ""
    description: str = ""
    private: bool = False
    empty: bool = True
    default_branch: str = "master"
