"""
Pytest fixtures for WACS client testing.

Provides a fake server wired to real clients, plus sample data builders.
"""

import shutil
import time
from pathlib import Path
from typing import Any, Generator

import pytest

from wacs.client import WacsClient
from wacs.config import Credentials, WacsTestConfig
from wacs.testing.server import DEFAULT_BASE_URL, FakeWacsServer
from wacs.types.repos import Repository, RepositoryOwner
from wacs.types.users import User

TEST_USERNAME = "alice"
TEST_PASSWORD = "correct-horse"
TEST_TOKEN_NAME = "wacs-client-test"

requires_git = pytest.mark.skipif(
    shutil.which("git") is None, reason="git executable not available"
)


def unique_repo_name(prefix: str = "wacs-client-test") -> str:
    """Repository name made unique by a millisecond timestamp."""
    return f"{prefix}{int(time.time() * 1000)}"


def create_sample_user(**overrides: Any) -> User:
    """Build a User with sensible defaults."""
    values: dict[str, Any] = {
        "id": 1,
        "username": TEST_USERNAME,
        "token": "0123456789abcdef0123456789abcdef01234567",
        "full_name": "Alice Example",
        "email": "alice@wacs.test",
        "token_name": TEST_TOKEN_NAME,
    }
    values.update(overrides)
    return User(**values)


def create_sample_repository(name: str = "sample-repo", **overrides: Any) -> Repository:
    """Build a Repository with sensible defaults."""
    values: dict[str, Any] = {
        "id": 10,
        "name": name,
        "full_name": f"{TEST_USERNAME}/{name}",
        "owner": RepositoryOwner(id=1, username=TEST_USERNAME),
        "clone_url": f"https://wacs.test/{TEST_USERNAME}/{name}.git",
        "html_url": f"https://wacs.test/{TEST_USERNAME}/{name}",
    }
    values.update(overrides)
    return Repository(**values)


def make_fake_server(root: Path, **options: Any) -> FakeWacsServer:
    """Fake server with the standard test account registered."""
    server = FakeWacsServer(root, **options)
    server.add_user(TEST_USERNAME, TEST_PASSWORD, full_name="Alice Example")
    return server


def make_test_config(server: FakeWacsServer) -> WacsTestConfig:
    """Config pointing at a fake server with the standard test account."""
    return WacsTestConfig(
        good_login=Credentials(TEST_USERNAME, TEST_PASSWORD),
        bad_login=Credentials(TEST_USERNAME, "wrong-password"),
        endpoint=server.base_url,
        token_name=TEST_TOKEN_NAME,
    )


# ============================================================================
# Server and Client Fixtures
# ============================================================================


@pytest.fixture
def fake_server(tmp_path: Path) -> FakeWacsServer:
    """
    Provide a FakeWacsServer storing repositories under ``tmp_path``.

    Example:
        ```python
        def test_my_feature(fake_server, wacs_client):
            wacs_client.login(...)
            assert fake_server.was_called("GET", "/user")
        ```
    """
    return make_fake_server(tmp_path / "server")


@pytest.fixture
def wacs_config(fake_server: FakeWacsServer) -> WacsTestConfig:
    """Provide a WacsTestConfig for the fake server."""
    return make_test_config(fake_server)


@pytest.fixture
def wacs_client(fake_server: FakeWacsServer) -> Generator[WacsClient, None, None]:
    """Provide a WacsClient talking to the fake server."""
    client = WacsClient(DEFAULT_BASE_URL, http_transport=fake_server.transport())
    yield client
    client.close()


@pytest.fixture
def logged_in_user(wacs_client: WacsClient, wacs_config: WacsTestConfig) -> User:
    """Log the test account in and return its session."""
    return wacs_client.login(wacs_config.good_login, wacs_config.token_name)


# ============================================================================
# Sample Data Fixtures
# ============================================================================


@pytest.fixture
def sample_user() -> User:
    """Provide a sample User object."""
    return create_sample_user()


@pytest.fixture
def sample_repository() -> Repository:
    """Provide a sample Repository object."""
    return create_sample_repository()
