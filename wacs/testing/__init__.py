"""WACS client testing utilities.

Provides an in-process fake server, file helpers and pytest fixtures for
testing code that uses the WACS client.
"""

from wacs.testing.files import append_file_text, async_append_file_text
from wacs.testing.server import (
    DEFAULT_BASE_URL,
    FakeRepository,
    FakeToken,
    FakeUser,
    FakeWacsServer,
    ServerCall,
)

__all__ = [
    # Fake server
    "DEFAULT_BASE_URL",
    "FakeWacsServer",
    "FakeUser",
    "FakeToken",
    "FakeRepository",
    "ServerCall",
    # File helpers
    "append_file_text",
    "async_append_file_text",
]
