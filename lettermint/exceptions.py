"""
exceptions.py - Lettermint SDK error model

Every error raised by the SDK is a LettermintError carrying an ErrorKind,
so callers can branch on ``exc.kind`` instead of on exception identity:

    try:
        event = verify_webhook(signature, body, secret)
    except LettermintError as exc:
        if exc.kind is ErrorKind.TIMESTAMP_EXPIRED:
            ...

Subclasses exist for the common cases and fix the kind they carry.
"""

from __future__ import annotations

from datetime import timedelta
from enum import Enum
from typing import Any, Dict, List, Optional


class ErrorKind(str, Enum):
    """Closed set of failure classes reported by the SDK"""
    INVALID_API_TOKEN = "invalid_api_token"
    INVALID_REQUEST = "invalid_request"
    UNAUTHORIZED = "unauthorized"
    VALIDATION = "validation"
    RATE_LIMITED = "rate_limited"
    SERVER_ERROR = "server_error"
    API_ERROR = "api_error"
    TIMEOUT = "timeout"
    TRANSPORT = "transport"
    DECODE = "decode"
    INVALID_SIGNATURE = "invalid_signature"
    TIMESTAMP_EXPIRED = "timestamp_expired"
    PAYLOAD_PARSE = "payload_parse"


_STATUS_KINDS = {
    400: ErrorKind.INVALID_REQUEST,
    401: ErrorKind.UNAUTHORIZED,
    422: ErrorKind.VALIDATION,
    429: ErrorKind.RATE_LIMITED,
}


def kind_for_status(status_code: int) -> ErrorKind:
    """Map an HTTP error status to its ErrorKind."""
    if status_code in _STATUS_KINDS:
        return _STATUS_KINDS[status_code]
    if status_code >= 500:
        return ErrorKind.SERVER_ERROR
    return ErrorKind.API_ERROR


class LettermintError(Exception):
    """
    Base exception for all SDK errors.

    Attributes:
        kind: ErrorKind classifying the failure
        message: Human-readable explanation
        status_code: HTTP status code, when the error came from the API
        errors: Field-specific validation errors ({field: [messages]})
        extensions: Extra diagnostic values specific to the error kind
    """

    def __init__(
        self,
        message: str,
        *,
        kind: ErrorKind,
        status_code: Optional[int] = None,
        errors: Optional[Dict[str, List[str]]] = None,
        extensions: Optional[Dict[str, Any]] = None
    ):
        self.kind = kind
        self.message = message
        self.status_code = status_code
        self.errors = errors or {}
        self.extensions = extensions or {}

        super().__init__(message)

    def __str__(self) -> str:
        return f"lettermint: {self.message}"

    def to_dict(self) -> Dict[str, Any]:
        """Serialize the error for structured logs or API responses."""
        data: Dict[str, Any] = {"kind": self.kind.value, "message": self.message}
        if self.status_code is not None:
            data["status_code"] = self.status_code
        if self.errors:
            data["errors"] = self.errors
        data.update(self.extensions)
        return data


class InvalidAPITokenError(LettermintError):
    """Raised when the API token is missing or empty."""

    def __init__(self, message: str = "invalid or missing API token"):
        super().__init__(message, kind=ErrorKind.INVALID_API_TOKEN)


class InvalidRequestError(LettermintError):
    """Raised when an email fails validation before it is sent."""

    def __init__(self, message: str):
        super().__init__(f"invalid request: {message}", kind=ErrorKind.INVALID_REQUEST)


class TransportError(LettermintError):
    """Raised when the HTTP exchange itself fails (network, body read)."""

    def __init__(self, message: str, *, kind: ErrorKind = ErrorKind.TRANSPORT):
        super().__init__(message, kind=kind)


class DecodeError(LettermintError):
    """Raised when a successful API response cannot be decoded."""

    def __init__(self, message: str, *, status_code: Optional[int] = None):
        super().__init__(message, kind=ErrorKind.DECODE, status_code=status_code)


class APIError(LettermintError):
    """
    Error response returned by the Lettermint API.

    The kind is derived from the status code (see kind_for_status).
    """

    def __init__(
        self,
        status_code: int,
        message: str,
        *,
        error_type: str = "",
        errors: Optional[Dict[str, List[str]]] = None,
        response_body: str = ""
    ):
        self.error_type = error_type
        self.response_body = response_body
        super().__init__(
            message,
            kind=kind_for_status(status_code),
            status_code=status_code,
            errors=errors,
        )

    def __str__(self) -> str:
        if self.error_type:
            return f"lettermint: API error ({self.status_code}): {self.message} [{self.error_type}]"
        return f"lettermint: API error ({self.status_code}): {self.message}"


class WebhookSignatureError(LettermintError):
    """Raised when a webhook cannot be authenticated."""

    def __init__(self, message: str):
        super().__init__(f"invalid webhook signature: {message}", kind=ErrorKind.INVALID_SIGNATURE)


class WebhookTimestampExpiredError(LettermintError):
    """Raised when a webhook timestamp falls outside the tolerance window."""

    def __init__(self, timestamp: int, age: int, tolerance: timedelta):
        self.timestamp = timestamp
        self.age = age
        self.tolerance = tolerance
        super().__init__(
            f"webhook timestamp {timestamp} is {age} seconds old (tolerance: {tolerance})",
            kind=ErrorKind.TIMESTAMP_EXPIRED,
            extensions={
                "timestamp": timestamp,
                "age_seconds": age,
                "tolerance_seconds": int(tolerance.total_seconds()),
            },
        )


class WebhookPayloadError(LettermintError):
    """Raised when an authenticated webhook body is not a valid event."""

    def __init__(self, message: str):
        super().__init__(f"failed to parse webhook payload: {message}", kind=ErrorKind.PAYLOAD_PARSE)
