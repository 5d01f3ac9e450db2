"""WACS client type definitions.

This module exports all data model types used by the client.
"""

from wacs.types.repos import Repository, RepositoryOwner
from wacs.types.users import AccessToken, User

__all__ = [
    # User types
    "User",
    "AccessToken",
    # Repository types
    "Repository",
    "RepositoryOwner",
]
