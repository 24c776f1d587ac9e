"""
Custom Exceptions.

Application-specific exception classes for consistent error handling.

Gateway failures are raised as GatewayError subclasses so callers never
see raw httpx exceptions. Every error converts to the uniform result
shape via arcana.cli.gateway.CommandResult.from_error.
"""


class ApplicationError(Exception):
    """Base exception for all application errors."""

    def __init__(self, message: str, code: str = "SYS_INTERNAL_ERROR") -> None:
        self.message = message
        self.code = code
        super().__init__(self.message)


class ConfigurationError(ApplicationError):
    """Raised when a configuration source cannot be read or parsed."""

    def __init__(self, message: str = "Invalid configuration") -> None:
        super().__init__(message, code="SYS_CONFIGURATION_ERROR")


class GatewayError(ApplicationError):
    """Base for failures talking to the backend."""


class AuthenticationError(GatewayError):
    """Raised when no API key is configured."""

    def __init__(self, message: str = "Authentication required") -> None:
        super().__init__(message, code="AUTH_UNAUTHORIZED")


class NetworkError(GatewayError):
    """Raised when the backend sent no response."""

    def __init__(self, message: str = "No response received from API") -> None:
        super().__init__(message, code="NET_NO_RESPONSE")


class RemoteError(GatewayError):
    """Raised when the backend returned an error payload."""

    def __init__(self, message: str = "Backend returned an error") -> None:
        super().__init__(message, code="REMOTE_ERROR")


class RequestSetupError(GatewayError):
    """Raised when the request could not be built locally."""

    def __init__(self, message: str = "Malformed request") -> None:
        super().__init__(message, code="REQ_SETUP_ERROR")


class LocalFilesystemError(ApplicationError):
    """Raised when a local filesystem operation fails."""

    def __init__(self, message: str = "Filesystem error") -> None:
        super().__init__(message, code="FS_ERROR")
