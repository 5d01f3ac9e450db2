"""WACS client - automate a WACS content server and local git clones."""

from wacs.api import clone, commit_and_push, create, list_my_repos, login
from wacs.async_client import AsyncWacsClient
from wacs.client import WacsClient
from wacs.config import Credentials, WacsTestConfig, load_config
from wacs.exceptions import (
    AuthenticationError,
    AuthorizationError,
    ConfigurationError,
    ConflictError,
    GitCommandError,
    NotFoundError,
    PushRejectedError,
    RateLimitedError,
    ServerError,
    ValidationError,
    WacsError,
)
from wacs.git import (
    AsyncGitHelper,
    GitHelper,
    GitRef,
    MergeStrategy,
    PushResult,
    RefUpdateStatus,
)
from wacs.logging import configure_logging, get_logger
from wacs.transport import HTTPTransport, RetryConfig
from wacs.types import AccessToken, Repository, RepositoryOwner, User

__version__ = "0.1.0"

__all__ = [
    "__version__",
    # Functional API
    "login",
    "create",
    "list_my_repos",
    "clone",
    "commit_and_push",
    # Main Clients
    "WacsClient",
    "AsyncWacsClient",
    # Git Helper
    "GitHelper",
    "AsyncGitHelper",
    "GitRef",
    "MergeStrategy",
    "PushResult",
    "RefUpdateStatus",
    # Types
    "User",
    "AccessToken",
    "Repository",
    "RepositoryOwner",
    # Configuration
    "Credentials",
    "WacsTestConfig",
    "load_config",
    # Exceptions
    "WacsError",
    "AuthenticationError",
    "AuthorizationError",
    "NotFoundError",
    "ConflictError",
    "RateLimitedError",
    "ValidationError",
    "ServerError",
    "ConfigurationError",
    "GitCommandError",
    "PushRejectedError",
    # Transport
    "HTTPTransport",
    "RetryConfig",
    # Logging
    "configure_logging",
    "get_logger",
]
