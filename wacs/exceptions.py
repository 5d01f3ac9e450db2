"""WACS client exception classes."""


class WacsError(Exception):
    """Base exception for all WACS client errors."""

    def __init__(
        self, code: str, message: str, request_id: str | None = None
    ) -> None:
        self.code = code
        self.message = message
        self.request_id = request_id
        super().__init__(f"[{code}] {message}")


class ConfigurationError(WacsError):
    """Raised when client or test configuration is invalid or missing."""

    def __init__(self, message: str) -> None:
        super().__init__("CONFIGURATION_ERROR", message)


class AuthenticationError(WacsError):
    """Raised when credentials or a token are rejected."""

    pass


class AuthorizationError(WacsError):
    """Raised when access is denied."""

    pass


class NotFoundError(WacsError):
    """Raised when a resource is not found."""

    pass


class ConflictError(WacsError):
    """Raised on conflicts (repository name already taken, etc.)."""

    pass


class RateLimitedError(WacsError):
    """Raised when rate limited."""

    def __init__(
        self,
        code: str,
        message: str,
        retry_after: int,
        request_id: str | None = None,
    ) -> None:
        super().__init__(code, message, request_id)
        self.retry_after = retry_after


class ValidationError(WacsError):
    """Raised on validation errors."""

    pass


class ServerError(WacsError):
    """Raised on server errors (5xx) and connection failures."""

    pass


class GitCommandError(WacsError):
    """Raised when a git invocation exits with a non-zero status."""

    def __init__(
        self,
        command: list[str],
        returncode: int,
        stderr: str = "",
        code: str = "GIT_COMMAND_FAILED",
    ) -> None:
        self.command = command
        self.returncode = returncode
        self.stderr = stderr
        detail = stderr.strip().splitlines()[-1] if stderr.strip() else "no output"
        super().__init__(
            code, f"`{' '.join(command)}` exited with {returncode}: {detail}"
        )


class PushRejectedError(GitCommandError):
    """Raised when a push is still rejected after conflict resolution."""

    def __init__(self, command: list[str], returncode: int, stderr: str = "") -> None:
        super().__init__(command, returncode, stderr, code="PUSH_REJECTED")
