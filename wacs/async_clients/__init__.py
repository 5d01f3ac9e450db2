"""WACS client async resource clients."""

from wacs.async_clients.repos import AsyncReposClient
from wacs.async_clients.users import AsyncUsersClient

__all__ = [
    "AsyncUsersClient",
    "AsyncReposClient",
]
