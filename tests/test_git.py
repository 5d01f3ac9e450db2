"""
Tests for the git helper against local bare repositories.

Feature: wacs-client
"""

import asyncio
import subprocess
from pathlib import Path
from unittest.mock import patch

import pytest

from wacs.exceptions import GitCommandError, PushRejectedError
from wacs.git import AsyncGitHelper, GitHelper, MergeStrategy
from wacs.testing.files import append_file_text
from wacs.testing.fixtures import create_sample_user, requires_git
from wacs.types.users import User

pytestmark = requires_git


def git(cwd: Path, *args: str) -> str:
    """Run git for inspection and return stdout."""
    result = subprocess.run(
        ["git", *args], cwd=cwd, check=True, capture_output=True, text=True
    )
    return result.stdout


@pytest.fixture
def remote(tmp_path: Path) -> str:
    """An empty bare repository, addressed by file URL."""
    path = tmp_path / "remote.git"
    subprocess.run(["git", "init", "--bare", "--quiet", str(path)], check=True)
    return path.as_uri()


@pytest.fixture
def user() -> User:
    return create_sample_user()


@pytest.fixture
def helper(user: User) -> GitHelper:
    return GitHelper(user, timeout=60)


@pytest.fixture
def first_clone(tmp_path: Path, helper: GitHelper, remote: str) -> Path:
    """A clone holding the initial commit, already pushed."""
    work = tmp_path / "one"
    helper.clone(remote, work)
    append_file_text(work, "1.txt", "Initial file contents\n")
    helper.commit_and_push(work, "Initial commit")
    return work


@pytest.fixture
def second_clone(tmp_path: Path, helper: GitHelper, remote: str, first_clone: Path) -> Path:
    work = tmp_path / "two"
    helper.clone(remote, work)
    return work


class TestClone:
    def test_clone_produces_git_dir(self, tmp_path: Path, helper: GitHelper, remote: str) -> None:
        work = tmp_path / "work"
        work.mkdir()

        helper.clone(remote, work)

        assert (work / ".git").is_dir()

    def test_clone_into_non_empty_directory_fails(
        self, tmp_path: Path, helper: GitHelper, remote: str
    ) -> None:
        work = tmp_path / "busy"
        work.mkdir()
        (work / "file.txt").write_text("occupied")

        with pytest.raises(GitCommandError) as exc_info:
            helper.clone(remote, work)

        assert exc_info.value.returncode != 0

    def test_clone_failure_does_not_leak_token(
        self, tmp_path: Path, helper: GitHelper, user: User
    ) -> None:
        with pytest.raises(GitCommandError) as exc_info:
            helper.clone((tmp_path / "missing.git").as_uri(), tmp_path / "work")

        assert user.token not in str(exc_info.value)
        assert all(user.token not in arg for arg in exc_info.value.command)


class TestCommitAndPush:
    def test_initial_commit_and_push(self, first_clone: Path, remote: str, tmp_path: Path) -> None:
        check = tmp_path / "check"
        subprocess.run(["git", "clone", "--quiet", remote, str(check)], check=True)

        assert (check / "1.txt").read_text() == "Initial file contents\n"

    def test_commit_uses_user_identity(self, first_clone: Path, user: User) -> None:
        author = git(first_clone, "log", "-1", "--format=%an <%ae>").strip()

        assert author == f"{user.full_name} <{user.email}>"

    def test_commit_without_changes_is_skipped(self, first_clone: Path, helper: GitHelper) -> None:
        assert helper.commit(first_clone, "Nothing here") is False

        result = helper.commit_and_push(first_clone, "Still nothing")
        assert result.status == "ok"
        assert not result.committed

    def test_empty_clone_without_changes_pushes_nothing(
        self, tmp_path: Path, helper: GitHelper, remote: str
    ) -> None:
        work = tmp_path / "empty"
        helper.clone(remote, work)

        result = helper.commit_and_push(work, "Nothing yet")

        assert result.status == "ok"
        assert result.ref_updates == []
        assert result.attempts == 0
        assert not result.committed
        assert not helper.has_commits(work)

    def test_non_conflicting_update_from_second_clone(
        self, first_clone: Path, second_clone: Path, helper: GitHelper
    ) -> None:
        for name in ("1.txt", "2.txt"):
            append_file_text(second_clone, name, "Other contributor file update\n")

        result = helper.commit_and_push(second_clone, "Update, other contributor")

        assert result.status == "ok"
        assert result.committed
        assert not result.merged
        assert result.attempts == 1

    def test_conflicting_push_keeps_mine(
        self, first_clone: Path, second_clone: Path, helper: GitHelper, remote: str, tmp_path: Path
    ) -> None:
        for name in ("1.txt", "2.txt"):
            append_file_text(second_clone, name, "Other contributor file update\n")
        helper.commit_and_push(second_clone, "Update, other contributor")

        append_file_text(first_clone, "1.txt", "Conflicting file update\n")
        result = helper.commit_and_push(first_clone, "Conflicting push")

        assert result.status == "ok"
        assert result.merged
        assert result.attempts == 2

        check = tmp_path / "check"
        subprocess.run(["git", "clone", "--quiet", remote, str(check)], check=True)
        assert (check / "1.txt").read_text() == (
            "Initial file contents\nConflicting file update\n"
        )
        assert (check / "2.txt").read_text() == "Other contributor file update\n"

    def test_conflicting_push_with_theirs_strategy(
        self, first_clone: Path, second_clone: Path, helper: GitHelper
    ) -> None:
        append_file_text(second_clone, "1.txt", "Other contributor file update\n")
        helper.commit_and_push(second_clone, "Update, other contributor")

        append_file_text(first_clone, "1.txt", "Conflicting file update\n")
        result = helper.commit_and_push(
            first_clone, "Conflicting push", strategy=MergeStrategy.THEIRS
        )

        assert result.merged
        assert (first_clone / "1.txt").read_text() == (
            "Initial file contents\nOther contributor file update\n"
        )

    def test_rejected_push_without_retries_raises(
        self, first_clone: Path, second_clone: Path, user: User
    ) -> None:
        eager = GitHelper(user, max_push_attempts=1)
        append_file_text(second_clone, "1.txt", "theirs\n")
        eager.commit_and_push(second_clone, "theirs")

        append_file_text(first_clone, "1.txt", "mine\n")
        with pytest.raises(PushRejectedError) as exc_info:
            eager.commit_and_push(first_clone, "mine")

        assert exc_info.value.code == "PUSH_REJECTED"

    def test_push_to_missing_remote_raises_git_error(
        self, first_clone: Path, helper: GitHelper, tmp_path: Path
    ) -> None:
        git(first_clone, "remote", "set-url", "origin", (tmp_path / "gone.git").as_uri())
        append_file_text(first_clone, "1.txt", "more\n")

        with pytest.raises(GitCommandError) as exc_info:
            helper.commit_and_push(first_clone, "Into the void")

        assert not isinstance(exc_info.value, PushRejectedError)


class TestRefs:
    def test_current_branch_and_refs(self, first_clone: Path, helper: GitHelper) -> None:
        branch = helper.current_branch(first_clone)
        refs = helper.get_refs(first_clone)

        head = [ref for ref in refs if ref.is_head]
        assert [ref.name for ref in head] == [f"refs/heads/{branch}"]
        assert head[0].oid == git(first_clone, "rev-parse", "HEAD").strip()

    def test_get_refs_of_empty_clone(self, tmp_path: Path, helper: GitHelper, remote: str) -> None:
        work = tmp_path / "empty"
        helper.clone(remote, work)

        assert helper.get_refs(work) == []


def test_auth_header_only_with_token() -> None:
    assert GitHelper(None)._auth_config() == []

    config = GitHelper(create_sample_user())._auth_config()
    assert config[0] == "-c"
    assert config[1].startswith("http.extraHeader=Authorization: Basic ")


def test_missing_git_executable_raises(tmp_path: Path, user: User) -> None:
    helper = GitHelper(user, git_executable="definitely-not-git")

    with pytest.raises(GitCommandError) as exc_info:
        helper.clone("https://content.example.org/alice/repo.git", tmp_path / "work")

    assert exc_info.value.returncode == 127


def test_async_helper_round_trip(tmp_path: Path, user: User, remote: str) -> None:
    helper = AsyncGitHelper(user, timeout=60)
    work = tmp_path / "async"

    async def scenario() -> bool:
        await helper.clone(remote, work)
        append_file_text(work, "1.txt", "async\n")
        result = await helper.commit_and_push(work, "Async commit")
        return result.committed

    assert asyncio.run(scenario())
    assert git(work, "log", "-1", "--format=%s").strip() == "Async commit"


def test_git_runs_with_untranslated_messages(
    tmp_path: Path, user: User, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.setenv("LC_ALL", "de_DE.UTF-8")
    completed = subprocess.CompletedProcess(args=[], returncode=0, stdout="main\n", stderr="")

    with patch("wacs.git.subprocess.run", return_value=completed) as run:
        assert GitHelper(user).current_branch(tmp_path) == "main"

    env = run.call_args.kwargs["env"]
    assert env["LC_ALL"] == "C"
    assert env["GIT_TERMINAL_PROMPT"] == "0"
