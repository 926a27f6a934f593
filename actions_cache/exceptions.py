"""
Actions cache exception hierarchy.

All exceptions inherit from ActionsCacheError for easy catching.
"""

from typing import Any


class ActionsCacheError(Exception):
    """Base exception for all actions_cache errors."""

    def __init__(self, message: str, **context: Any) -> None:
        super().__init__(message)
        self.message = message
        self.context = context

    def __str__(self) -> str:
        if self.context:
            ctx = ", ".join(f"{k}={v!r}" for k, v in self.context.items() if v is not None)
            if ctx:
                return f"{self.message} ({ctx})"
        return self.message


class ConfigurationError(ActionsCacheError):
    """Token, environment or fixture could not be turned into a session."""


class ProtocolError(ActionsCacheError):
    """Response had an unexpected status or an unparsable shape."""

    def __init__(
        self, message: str, *, status_code: int | None = None, body: bytes = b""
    ) -> None:
        super().__init__(message, status_code=status_code)
        self.status_code = status_code
        self.body = body


class InvalidResponseError(ProtocolError):
    """Successful status with a semantically empty body (e.g. zero cache id)."""


class RemoteAPIError(ActionsCacheError):
    """The service returned a structured error object."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int,
        error_code: int = 0,
        type_name: str = "",
        type_key: str = "",
    ) -> None:
        super().__init__(
            message, status_code=status_code, error_code=error_code, type_key=type_key or None
        )
        self.status_code = status_code
        self.error_code = error_code
        self.type_name = type_name
        self.type_key = type_key

    def __str__(self) -> str:
        return self.message


class TransportError(ActionsCacheError):
    """Network-level error (connection failed, reset, timeout)."""
