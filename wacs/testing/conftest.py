"""
Pytest plugin for WACS client testing fixtures.

This module re-exports all fixtures from fixtures.py so they can be
automatically discovered by pytest.

To use these fixtures in your tests, add this to your conftest.py:

    pytest_plugins = ["wacs.testing.conftest"]
"""

from wacs.testing.fixtures import (
    fake_server,
    logged_in_user,
    sample_repository,
    sample_user,
    wacs_client,
    wacs_config,
)

__all__ = [
    "fake_server",
    "wacs_config",
    "wacs_client",
    "logged_in_user",
    "sample_user",
    "sample_repository",
]
