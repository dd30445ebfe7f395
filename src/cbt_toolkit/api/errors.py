"""
Module: api.errors

Purpose:
    One exception type for every way an exam service call can fail, with a
    category the caller can use to pick a user-facing notification.

Key Classes:
    - ErrorType: Failure category
    - ServiceError: Raised by ExamServiceClient

Used By:
    - api.client
    - builder.preview
    - student.join
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Optional

import httpx


class ErrorType(str, Enum):
    NETWORK = "network"
    VALIDATION = "validation"
    AUTHENTICATION = "authentication"
    AUTHORIZATION = "authorization"
    NOT_FOUND = "not_found"
    SERVER = "server"
    UNKNOWN = "unknown"


STATUS_MESSAGES = {
    400: "Bad Request - Please check your input",
    401: "Authentication required - Please log in",
    403: "Access denied - You don't have permission for this action",
    404: "Resource not found",
    422: "Validation failed - Please check your input",
    429: "Too many requests - Please try again later",
    500: "Internal server error - Please try again later",
    502: "Service temporarily unavailable",
    503: "Service temporarily unavailable",
    504: "Request timeout - Please try again",
}

DEFAULT_MESSAGES = {
    ErrorType.NETWORK: "Unable to connect to server. Please check your internet connection.",
    ErrorType.VALIDATION: "Please check your input and try again",
    ErrorType.AUTHENTICATION: "Please log in to continue",
    ErrorType.AUTHORIZATION: "You don't have permission for this action",
    ErrorType.NOT_FOUND: "The requested resource was not found",
    ErrorType.SERVER: "Server error - Please try again later",
    ErrorType.UNKNOWN: "An unexpected error occurred",
}


def _classify(status: int) -> ErrorType:
    if status == 401:
        return ErrorType.AUTHENTICATION
    if status == 403:
        return ErrorType.AUTHORIZATION
    if status == 404:
        return ErrorType.NOT_FOUND
    if status >= 500:
        return ErrorType.SERVER
    if status >= 400:
        return ErrorType.VALIDATION
    return ErrorType.UNKNOWN


class ServiceError(Exception):
    """
    An exam service call failed.

    Attributes:
        error_type: Failure category
        message: Message fit to show the user
        status_code: HTTP status, None for network failures
        details: Decoded response body, if any
        validation_errors: Field messages from a validation response
    """

    def __init__(
        self,
        message: str,
        error_type: ErrorType = ErrorType.UNKNOWN,
        *,
        status_code: Optional[int] = None,
        details: Any = None,
        validation_errors: Optional[list[str]] = None,
        timeout: bool = False,
    ):
        super().__init__(message)
        self.message = message
        self.error_type = error_type
        self.status_code = status_code
        self.details = details
        self.validation_errors = validation_errors or []
        self.timeout = timeout

    @property
    def retriable(self) -> bool:
        """Network failures, timeouts, 429 and 5xx can be retried by the user."""
        if self.error_type is ErrorType.NETWORK or self.timeout:
            return True
        return self.status_code is not None and (
            self.status_code == 429 or self.status_code >= 500
        )

    def detail(self, key: str, default: Any = None) -> Any:
        """Field from the response body, if it was a JSON object."""
        if isinstance(self.details, dict):
            return self.details.get(key, default)
        return default

    @classmethod
    def from_response(cls, response: httpx.Response) -> ServiceError:
        """
        Build an error from a non-success HTTP response.

        The server's own "message" (or "error") wins over the status-code
        default; express-validator style "errors" lists are joined.
        """
        status = response.status_code
        try:
            body = response.json()
        except ValueError:
            body = None

        error_type = _classify(status)
        message = STATUS_MESSAGES.get(status) or DEFAULT_MESSAGES[error_type]
        validation_errors: list[str] = []

        if isinstance(body, dict):
            if body.get("message"):
                message = str(body["message"])
            elif body.get("error"):
                message = str(body["error"])

            errors = body.get("errors")
            if error_type is ErrorType.VALIDATION and errors:
                if isinstance(errors, list):
                    validation_errors = [
                        str(e.get("msg") or e.get("message") or e) if isinstance(e, dict) else str(e)
                        for e in errors
                    ]
                else:
                    validation_errors = [str(errors)]
                message = f"Validation error: {', '.join(validation_errors)}"

        return cls(
            message,
            error_type,
            status_code=status,
            details=body,
            validation_errors=validation_errors,
        )

    @classmethod
    def from_transport(cls, exc: httpx.TransportError) -> ServiceError:
        """Build an error for a request that never got a response."""
        return cls(
            DEFAULT_MESSAGES[ErrorType.NETWORK],
            ErrorType.NETWORK,
            details=str(exc),
            timeout=isinstance(exc, httpx.TimeoutException),
        )

    def __repr__(self) -> str:
        """Concise representation for debugging."""
        return f"ServiceError({self.error_type.value}, status={self.status_code}, {self.message!r})"
