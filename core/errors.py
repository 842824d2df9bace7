"""Custom exception types for record submission and schema lookup."""

from __future__ import annotations

from typing import Mapping


class UnknownEntityError(KeyError):
    """Raised when no section schema is registered for an entity kind."""


class GatewayError(Exception):
    """Base exception for submission gateway failures."""

    def __init__(self, message: str, *, field_errors: Mapping[str, str] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.field_errors: dict[str, str] = dict(field_errors or {})


GATEWAY_UNAVAILABLE_MESSAGE = "The server could not be reached. Please check your connection and try again."
GATEWAY_TIMEOUT_MESSAGE = "The server took too long to respond. Your changes were kept; please try again."


class GatewayUnavailableError(GatewayError):
    """Raised when the gateway cannot be reached after retries."""

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or GATEWAY_UNAVAILABLE_MESSAGE)


class GatewayTimeoutError(GatewayError):
    """Raised when the gateway does not answer within the client timeout."""

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or GATEWAY_TIMEOUT_MESSAGE)


class GatewayRejectedError(GatewayError):
    """Raised when the server rejects a submission (validation or authorization)."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        field_errors: Mapping[str, str] | None = None,
    ) -> None:
        super().__init__(message, field_errors=field_errors)
        self.status_code = status_code
