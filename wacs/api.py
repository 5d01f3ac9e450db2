"""
Functional interface to the WACS client.

One coroutine per operation, each opening and closing its own client::

    user = await wacs.login(credentials, endpoint, "my-token")
    repo = await wacs.create(user, "my-repo", endpoint)
    await wacs.clone(user, "/tmp/work", repo.clone_url)
    await wacs.commit_and_push(user, "/tmp/work", "Initial commit")

Keyword-only ``client_options`` (``timeout``, ``retry_config``,
``http_transport``) are passed to ``AsyncWacsClient``.
"""

from pathlib import Path
from typing import Any

from wacs.async_client import AsyncWacsClient
from wacs.config import Credentials
from wacs.git import AsyncGitHelper, MergeStrategy, PushResult
from wacs.types.repos import Repository
from wacs.types.users import User


async def login(
    credentials: Credentials, endpoint: str, token_name: str, **client_options: Any
) -> User:
    """
    Log in and return a user session carrying an access token.

    Raises:
        AuthenticationError: If the credentials are rejected
    """
    async with AsyncWacsClient(endpoint, **client_options) as client:
        return await client.login(credentials, token_name)


async def create(
    user: User, repo_name: str, endpoint: str, **client_options: Any
) -> Repository:
    """Create a repository for ``user``; the result carries its clone URL."""
    async with AsyncWacsClient.for_user(user, endpoint, **client_options) as client:
        return await client.repos.create(repo_name)


async def list_my_repos(
    user: User, endpoint: str, **client_options: Any
) -> list[Repository]:
    """List every repository of ``user`` in server order."""
    async with AsyncWacsClient.for_user(user, endpoint, **client_options) as client:
        return await client.repos.list_mine()


async def clone(
    user: User,
    local_dir: str | Path,
    clone_url: str,
    *,
    timeout: float | None = None,
) -> None:
    """Clone ``clone_url`` into ``local_dir`` using the user's token."""
    await AsyncGitHelper(user, timeout=timeout).clone(clone_url, local_dir)


async def commit_and_push(
    user: User,
    local_dir: str | Path,
    message: str,
    *,
    strategy: MergeStrategy = MergeStrategy.MINE,
    timeout: float | None = None,
) -> PushResult:
    """
    Commit every change in ``local_dir`` and push it.

    A push rejected because someone else pushed first is settled by merging
    their work with ``strategy`` (by default keeping this side's version of
    conflicting lines) and pushing again.
    """
    helper = AsyncGitHelper(user, timeout=timeout)
    return await helper.commit_and_push(local_dir, message, strategy)
