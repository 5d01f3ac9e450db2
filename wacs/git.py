"""
Git helper utilities for the WACS client.

Runs the local ``git`` executable for clone, commit and push, authenticating
http(s) remotes with the session token and resolving push conflicts with a
configurable merge strategy.
"""

import asyncio
import base64
import enum
import os
import subprocess
from dataclasses import dataclass
from pathlib import Path

from wacs.exceptions import GitCommandError, PushRejectedError
from wacs.logging import get_logger, log_git_command, mask_sensitive_data
from wacs.types.users import User

logger = get_logger("git")

# Markers git prints when the remote refuses a non-fast-forward update
_REJECTION_MARKERS = ("[rejected]", "non-fast-forward", "fetch first")


class MergeStrategy(str, enum.Enum):
    """How competing edits are settled when a push is rejected."""

    MINE = "ours"
    THEIRS = "theirs"


@dataclass
class GitRef:
    """Represents a Git reference."""

    name: str
    oid: str
    is_head: bool


@dataclass
class RefUpdateStatus:
    """Status of a reference update after push."""

    ref_name: str
    status: str  # "ok" or "error"
    message: str | None = None


@dataclass
class PushResult:
    """Result of a push or commit-and-push operation."""

    status: str  # "ok" or "error"
    ref_updates: list[RefUpdateStatus]
    committed: bool = False
    merged: bool = False
    attempts: int = 1


class GitHelper:
    """
    Helper utilities for git operations on behalf of a logged-in user.

    Example:
        ```python
        from wacs import GitHelper, WacsClient
        from wacs.config import Credentials

        with WacsClient("https://content.example.org/api/v1") as client:
            user = client.users.login(Credentials("alice", "secret"), "my-token")
            repo = client.repos.create("my-repo")

        git = GitHelper(user)
        git.clone(repo.clone_url, "./my-repo")
        # ... edit files ...
        git.commit_and_push("./my-repo", "Update")
        ```
    """

    def __init__(
        self,
        user: User | None = None,
        git_executable: str = "git",
        timeout: float | None = None,
        max_push_attempts: int = 3,
    ) -> None:
        """
        Initialize GitHelper.

        Args:
            user: Session whose token authenticates http(s) remotes and whose
                name and email are used as commit identity
            git_executable: Name or path of the git binary
            timeout: Per-command timeout in seconds (None waits indefinitely)
            max_push_attempts: Pushes tried before giving up on a rejected push
        """
        self.user = user
        self.git_executable = git_executable
        self.timeout = timeout
        self.max_push_attempts = max_push_attempts

    def clone(self, clone_url: str, local_path: str | Path) -> None:
        """
        Clone a repository into a local directory.

        The directory may exist as long as it is empty. Empty remote
        repositories clone fine and get their first commit from
        ``commit_and_push``.

        Raises:
            GitCommandError: If git clone fails
        """
        local_path = Path(local_path)
        self._run(["clone", clone_url, str(local_path)], network=True)
        logger.info("Cloned %s into %s", mask_sensitive_data(clone_url), local_path)

    def commit(self, local_path: str | Path, message: str) -> bool:
        """
        Stage every change in the working tree and commit it.

        Returns:
            True if a commit was made, False if there was nothing to commit
        """
        local_path = Path(local_path)
        self._run(["add", "--all"], cwd=local_path)

        status = self._run(["status", "--porcelain"], cwd=local_path)
        if not status.stdout.strip():
            logger.info("Nothing to commit in %s", local_path)
            return False

        self._run(["commit", "--quiet", "-m", message], cwd=local_path, identity=True)
        return True

    def push(
        self,
        local_path: str | Path,
        remote: str = "origin",
        branch: str | None = None,
    ) -> PushResult:
        """
        Push the current branch to the remote branch of the same name.

        A rejected (non-fast-forward) push is reported in the result rather
        than raised.

        Raises:
            GitCommandError: If the push fails for another reason
        """
        local_path = Path(local_path)
        branch = branch or self.current_branch(local_path)
        ref_name = f"refs/heads/{branch}"

        result = self._run(
            ["push", remote, f"HEAD:{ref_name}"],
            cwd=local_path,
            network=True,
            check=False,
        )
        if result.returncode == 0:
            return PushResult(status="ok", ref_updates=[RefUpdateStatus(ref_name, "ok")])

        if self._is_rejection(result.stderr):
            return PushResult(
                status="error",
                ref_updates=[RefUpdateStatus(ref_name, "error", result.stderr)],
            )

        raise GitCommandError(self._masked(result.args), result.returncode, result.stderr)

    def fetch(self, local_path: str | Path, remote: str = "origin") -> None:
        """Fetch from a remote repository."""
        self._run(["fetch", remote], cwd=Path(local_path), network=True)

    def merge_remote(
        self,
        local_path: str | Path,
        remote: str = "origin",
        branch: str | None = None,
        strategy: MergeStrategy = MergeStrategy.MINE,
    ) -> None:
        """
        Merge the fetched remote branch, settling conflicting hunks by strategy.

        Raises:
            GitCommandError: If the merge cannot be completed; the merge is
                aborted first so the working tree is left as it was
        """
        local_path = Path(local_path)
        branch = branch or self.current_branch(local_path)

        try:
            self._run(
                ["merge", "--no-edit", "-X", strategy.value, f"{remote}/{branch}"],
                cwd=local_path,
                identity=True,
            )
        except GitCommandError:
            self._run(["merge", "--abort"], cwd=local_path, check=False)
            raise

    def commit_and_push(
        self,
        local_path: str | Path,
        message: str,
        strategy: MergeStrategy = MergeStrategy.MINE,
        remote: str = "origin",
    ) -> PushResult:
        """
        Commit all changes and push them, merging remote work on conflict.

        When the remote has moved on, its branch is fetched and merged with
        ``strategy`` and the push is retried, up to ``max_push_attempts``
        pushes in total.

        Nothing is pushed from a repository without commits; the result then
        has no ref updates and ``attempts`` is 0.

        Returns:
            PushResult with ``merged`` set when a merge was needed

        Raises:
            PushRejectedError: If every push attempt was rejected
            GitCommandError: If any other git step fails
        """
        local_path = Path(local_path)
        committed = self.commit(local_path, message)
        if not committed and not self.has_commits(local_path):
            logger.info("Nothing to push from %s, no commits yet", local_path)
            return PushResult(status="ok", ref_updates=[], attempts=0)

        branch = self.current_branch(local_path)
        merged = False

        for attempt in range(1, self.max_push_attempts + 1):
            result = self.push(local_path, remote, branch)
            if result.status == "ok":
                result.committed = committed
                result.merged = merged
                result.attempts = attempt
                logger.info("Pushed %s to %s/%s", local_path, remote, branch)
                return result

            if attempt == self.max_push_attempts:
                break

            logger.info(
                "Push of %s rejected, merging %s/%s with strategy %s",
                local_path, remote, branch, strategy.name.lower(),
            )
            self.fetch(local_path, remote)
            self.merge_remote(local_path, remote, branch, strategy)
            merged = True

        rejection = result.ref_updates[0].message or ""
        raise PushRejectedError(
            [self.git_executable, "push", remote, f"HEAD:refs/heads/{branch}"], 1, rejection
        )

    def has_commits(self, local_path: str | Path) -> bool:
        """Whether HEAD points at a commit; False on a fresh clone of an empty repository."""
        result = self._run(
            ["rev-parse", "--verify", "--quiet", "HEAD"], cwd=Path(local_path), check=False
        )
        return result.returncode == 0

    def current_branch(self, local_path: str | Path) -> str:
        """Name of the checked-out branch, including an unborn one."""
        result = self._run(["symbolic-ref", "--short", "HEAD"], cwd=Path(local_path))
        return result.stdout.strip()

    def get_refs(self, local_path: str | Path) -> list[GitRef]:
        """
        Get all refs in a local repository.

        Returns:
            List of GitRef objects (empty for a repository without commits)
        """
        local_path = Path(local_path)

        result = self._run(["show-ref"], cwd=local_path, check=False)
        if result.returncode != 0:
            return []

        head_result = self._run(["symbolic-ref", "HEAD"], cwd=local_path, check=False)
        head_ref = head_result.stdout.strip() if head_result.returncode == 0 else None

        refs = []
        for line in result.stdout.strip().split("\n"):
            if not line:
                continue
            oid, name = line.split(" ", 1)
            refs.append(GitRef(name=name, oid=oid, is_head=(name == head_ref)))

        return refs

    def _auth_config(self) -> list[str]:
        """Per-command auth header; the token never lands in .git/config."""
        if self.user is None or not self.user.token:
            return []
        raw = f"{self.user.username}:{self.user.token}".encode()
        header = f"Authorization: Basic {base64.b64encode(raw).decode()}"
        return ["-c", f"http.extraHeader={header}"]

    def _identity_config(self) -> list[str]:
        if self.user is None:
            return []
        name = self.user.full_name or self.user.username
        return ["-c", f"user.name={name}", "-c", f"user.email={self.user.commit_email}"]

    def _masked(self, args: list[str]) -> list[str]:
        return [mask_sensitive_data(arg) for arg in args]

    @staticmethod
    def _is_rejection(stderr: str) -> bool:
        return any(marker in stderr for marker in _REJECTION_MARKERS)

    def _run(
        self,
        args: list[str],
        cwd: Path | None = None,
        network: bool = False,
        identity: bool = False,
        check: bool = True,
    ) -> subprocess.CompletedProcess[str]:
        """
        Run a git command and capture its output.

        Raises:
            GitCommandError: If ``check`` is set and git exits non-zero, or
                the command times out
        """
        cmd = [self.git_executable]
        if network:
            cmd.extend(self._auth_config())
        if identity:
            cmd.extend(self._identity_config())
        cmd.extend(args)

        env = os.environ.copy()
        env["GIT_TERMINAL_PROMPT"] = "0"
        # push rejection is recognised from untranslated messages
        env["LC_ALL"] = "C"

        log_git_command(cmd, str(cwd) if cwd else None)
        try:
            result = subprocess.run(
                cmd,
                cwd=cwd,
                capture_output=True,
                text=True,
                env=env,
                timeout=self.timeout,
            )
        except subprocess.TimeoutExpired as e:
            raise GitCommandError(
                self._masked(cmd), -1, f"timed out after {self.timeout}s"
            ) from e
        except FileNotFoundError as e:
            raise GitCommandError(self._masked(cmd), 127, str(e)) from e

        if check and result.returncode != 0:
            raise GitCommandError(self._masked(cmd), result.returncode, result.stderr)
        return result


class AsyncGitHelper:
    """
    Coroutine front end for GitHelper.

    Each operation runs the blocking helper on a worker thread.
    """

    def __init__(self, user: User | None = None, **options: object) -> None:
        self._helper = GitHelper(user, **options)  # type: ignore[arg-type]

    @property
    def helper(self) -> GitHelper:
        """The wrapped synchronous helper."""
        return self._helper

    async def clone(self, clone_url: str, local_path: str | Path) -> None:
        await asyncio.to_thread(self._helper.clone, clone_url, local_path)

    async def commit(self, local_path: str | Path, message: str) -> bool:
        return await asyncio.to_thread(self._helper.commit, local_path, message)

    async def push(
        self, local_path: str | Path, remote: str = "origin", branch: str | None = None
    ) -> PushResult:
        return await asyncio.to_thread(self._helper.push, local_path, remote, branch)

    async def commit_and_push(
        self,
        local_path: str | Path,
        message: str,
        strategy: MergeStrategy = MergeStrategy.MINE,
        remote: str = "origin",
    ) -> PushResult:
        return await asyncio.to_thread(
            self._helper.commit_and_push, local_path, message, strategy, remote
        )
