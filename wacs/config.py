"""
Configuration for WACS client runs.

The e2e suite is driven by a JSON file of the form::

    {
        "goodLogin": {"username": "alice", "password": "..."},
        "badLogin": {"username": "alice", "password": "wrong"},
        "endpoint": "https://content.example.org/api/v1",
        "tokenName": "wacs-client-test"
    }
"""

import json
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from wacs.exceptions import ConfigurationError

DEFAULT_CONFIG_PATH = Path("tests") / "test.json"
CONFIG_PATH_ENV = "WACS_TEST_CONFIG"

_REQUIRED_KEYS = ("goodLogin", "badLogin", "endpoint", "tokenName")


@dataclass(frozen=True)
class Credentials:
    """A login/password pair."""

    username: str
    password: str = field(repr=False)

    @classmethod
    def from_dict(cls, data: Any, key: str = "login") -> "Credentials":
        """Build credentials from a ``{"username", "password"}`` mapping."""
        if not isinstance(data, dict):
            raise ConfigurationError(f"{key} must be an object with username and password")
        username = data.get("username")
        password = data.get("password")
        if not username or password is None:
            raise ConfigurationError(f"{key} requires both username and password")
        return cls(username=str(username), password=str(password))


@dataclass(frozen=True)
class WacsTestConfig:
    """Settings for an end-to-end run against a WACS server."""

    good_login: Credentials
    bad_login: Credentials
    endpoint: str
    token_name: str

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "WacsTestConfig":
        """
        Build a config from the decoded JSON document.

        Raises:
            ConfigurationError: If a required key is missing or malformed
        """
        missing = [key for key in _REQUIRED_KEYS if key not in data]
        if missing:
            raise ConfigurationError(f"Missing config keys: {', '.join(missing)}")

        endpoint = data["endpoint"]
        if not isinstance(endpoint, str) or not endpoint.startswith(("http://", "https://")):
            raise ConfigurationError(f"Invalid endpoint: {endpoint!r}")

        token_name = data["tokenName"]
        if not isinstance(token_name, str) or not token_name:
            raise ConfigurationError("tokenName must be a non-empty string")

        return cls(
            good_login=Credentials.from_dict(data["goodLogin"], "goodLogin"),
            bad_login=Credentials.from_dict(data["badLogin"], "badLogin"),
            endpoint=endpoint,
            token_name=token_name,
        )

    @classmethod
    def from_env(cls) -> "WacsTestConfig":
        """
        Load the config file named by ``WACS_TEST_CONFIG``.

        Falls back to ``tests/test.json`` relative to the working directory.
        """
        path = os.environ.get(CONFIG_PATH_ENV) or DEFAULT_CONFIG_PATH
        return load_config(path)


def load_config(path: str | Path) -> WacsTestConfig:
    """
    Read a JSON config file.

    Args:
        path: Path to the JSON file

    Returns:
        Parsed WacsTestConfig

    Raises:
        ConfigurationError: If the file is missing, unreadable or invalid
    """
    path = Path(path)
    try:
        raw = path.read_text(encoding="utf-8")
    except FileNotFoundError as e:
        raise ConfigurationError(f"Config file not found: {path}") from e
    except OSError as e:
        raise ConfigurationError(f"Cannot read config file {path}: {e}") from e

    try:
        data = json.loads(raw)
    except json.JSONDecodeError as e:
        raise ConfigurationError(f"Invalid JSON in {path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigurationError(f"Config file {path} must contain a JSON object")

    return WacsTestConfig.from_dict(data)
