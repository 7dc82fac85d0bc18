"""
Base service class for Solana Analytics services.

This module provides a base class for the long-lived services, with common
functionality for action error wrapping and degraded fallbacks.
"""

import logging
import time
from functools import wraps
from typing import Any, Awaitable, Callable, Optional, TypeVar

from solana_analytics.logging_config import log_with_context
from solana_analytics.models.results import FetchResult
from solana_analytics.utils.errors import ActionError

T = TypeVar('T')

# Configure logger
logger = logging.getLogger(__name__)


def handle_errors(prefix: str, suffix: str = ""):
    """
    Decorator that wraps failures of an action handler in an ActionError.

    The original message text is kept after the prefix, and the original
    exception is chained as the cause.

    Args:
        prefix: Human-readable, action-specific prefix
        suffix: Optional advice appended to the message

    Returns:
        Decorated function
    """
    def decorator(func: Callable[..., Any]) -> Callable[..., Any]:
        @wraps(func)
        async def wrapper(*args: Any, **kwargs: Any) -> Any:
            try:
                return await func(*args, **kwargs)
            except ActionError:
                raise
            except Exception as e:
                logger.error(f"Error in {func.__name__}: {str(e)}")
                raise ActionError(prefix, e, suffix) from e
        return wrapper
    return decorator


class BaseService:
    """
    Base service class with common functionality.

    This class provides:
    - Degraded fallbacks as tagged results
    - Logging with context
    - Timing logs
    """

    def __init__(self, logger: Optional[logging.Logger] = None):
        """
        Initialize the base service.

        Args:
            logger: Optional logger instance
        """
        self.logger = logger or logging.getLogger(self.__class__.__name__)

    async def execute_with_fallback(
        self,
        operation: Callable[[], Awaitable[T]],
        default: T,
        operation_name: str = "operation"
    ) -> FetchResult[T]:
        """
        Execute an operation, substituting ``default`` if it fails.

        Args:
            operation: Operation to execute
            default: Value used when the operation raises
            operation_name: Name of the operation for logging

        Returns:
            ``FetchResult.ok(value)`` or ``FetchResult.degraded(default, reason)``
        """
        try:
            return FetchResult.ok(await operation())
        except Exception as e:
            reason = getattr(e, "message", None) or str(e) or type(e).__name__
            self.log_with_context(
                "warning",
                f"{operation_name} degraded",
                reason=reason
            )
            return FetchResult.degraded(default, reason)

    def log_with_context(self, level: str, message: str, **context: Any) -> None:
        """Log a message on the service logger with key/value context."""
        log_with_context(self.logger, level, message, **context)

    def log_timing(self, operation_name: str) -> "TimingContextManager":
        """
        Create a context manager to log timing information.

        Args:
            operation_name: Name of the operation

        Returns:
            Timing context manager
        """
        return TimingContextManager(operation_name, self.logger)


class TimingContextManager:
    """Async context manager to log timing information."""

    def __init__(self, operation_name: str, logger: logging.Logger):
        self.operation_name = operation_name
        self.logger = logger
        self.start_time = 0.0

    async def __aenter__(self) -> "TimingContextManager":
        self.start_time = time.time()
        self.logger.info(f"{self.operation_name} started")
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        elapsed = time.time() - self.start_time
        if exc_val is not None:
            self.logger.error(
                f"{self.operation_name} failed after {elapsed:.2f}s: {str(exc_val)}"
            )
        else:
            self.logger.info(f"{self.operation_name} completed in {elapsed:.2f}s")
