"""WACS client resource clients."""

from wacs.clients.repos import ReposClient
from wacs.clients.users import UsersClient

__all__ = [
    "UsersClient",
    "ReposClient",
]
