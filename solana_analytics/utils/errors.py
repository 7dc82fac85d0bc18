"""
Error types for Solana Analytics.

This module defines the exception hierarchy shared by the clients, the
risk engine and the action layer. Every error keeps the original message
text in ``.message`` so callers can add context without losing detail.
"""

from enum import Enum
from typing import Any, Dict, Optional


class ErrorCode(str, Enum):
    """Error codes for Solana Analytics."""

    UNKNOWN_ERROR = "UNKNOWN_ERROR"
    INVALID_INPUT = "INVALID_INPUT"
    NOT_FOUND = "NOT_FOUND"
    DATA_UNAVAILABLE = "DATA_UNAVAILABLE"
    UPSTREAM_ERROR = "UPSTREAM_ERROR"
    CONFIGURATION_MISSING = "CONFIGURATION_MISSING"
    ACTION_FAILED = "ACTION_FAILED"


class AnalyticsError(Exception):
    """Base exception class for all Solana Analytics errors."""

    error_code: ErrorCode = ErrorCode.UNKNOWN_ERROR

    def __init__(
        self,
        message: str,
        error_code: Optional[ErrorCode] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        """Initialize a new AnalyticsError.

        Args:
            message: Error message
            error_code: Error code, defaults to the class error code
            details: Additional error details
        """
        self.message = message
        if error_code is not None:
            self.error_code = error_code
        self.details = details or {}
        super().__init__(message)

    def to_dict(self) -> Dict[str, Any]:
        """Render the error as a JSON-serializable dictionary."""
        response: Dict[str, Any] = {
            "error": self.message,
            "error_code": self.error_code.value,
        }
        if self.details:
            response["details"] = self.details
        return response


class InvalidInputError(AnalyticsError):
    """Malformed address, identifier or parameter object. Never retried."""

    error_code = ErrorCode.INVALID_INPUT


class InvalidPublicKeyError(InvalidInputError):
    """Exception raised when an invalid public key is provided."""

    def __init__(self, pubkey: Any, field_name: str = "address"):
        super().__init__(
            f"Invalid Solana {field_name} format: {pubkey}",
            details={"field": field_name}
        )
        self.pubkey = pubkey


class NotFoundError(AnalyticsError):
    """Identifier does not resolve, or upstream has no record of it."""

    error_code = ErrorCode.NOT_FOUND


class DataUnavailableError(AnalyticsError):
    """Identifier resolved, but upstream has no data entry for it."""

    error_code = ErrorCode.DATA_UNAVAILABLE


class UpstreamError(AnalyticsError):
    """Network, HTTP or RPC failure talking to an upstream collaborator."""

    error_code = ErrorCode.UPSTREAM_ERROR

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        endpoint: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        """
        Initialize the upstream error.

        Args:
            message: Error message
            status_code: HTTP status code, if one was received
            endpoint: The upstream endpoint that failed
            details: Additional error details
        """
        self.status_code = status_code
        self.endpoint = endpoint

        error_details = dict(details or {})
        if status_code:
            error_details["status_code"] = status_code
        if endpoint:
            error_details["endpoint"] = endpoint

        super().__init__(message, details=error_details)


class ConfigurationMissingError(AnalyticsError):
    """A required credential or setting is absent. Never retried."""

    error_code = ErrorCode.CONFIGURATION_MISSING

    def __init__(self, setting: str, message: Optional[str] = None):
        super().__init__(
            message or f"{setting} not found in environment variables",
            details={"setting": setting}
        )
        self.setting = setting


class ActionError(AnalyticsError):
    """Failure surfaced by an action handler, prefixed with action context."""

    error_code = ErrorCode.ACTION_FAILED

    def __init__(self, prefix: str, cause: BaseException, suffix: str = ""):
        """
        Initialize the action error.

        Args:
            prefix: Human-readable, action-specific prefix
            cause: The original failure
            suffix: Optional trailing advice appended after the message
        """
        original = cause.message if isinstance(cause, AnalyticsError) else str(cause)
        self.cause = cause
        self.cause_code = (
            cause.error_code if isinstance(cause, AnalyticsError) else ErrorCode.UNKNOWN_ERROR
        )
        message = f"{prefix}: {original or 'Unknown error'}"
        if suffix:
            message = f"{message}{suffix}"
        super().__init__(message, details={"cause": self.cause_code.value})
