"""
Bounded retry with linear backoff.

Every network client wraps its upstream calls in :func:`with_retry`.
"""

import asyncio
import logging
from typing import Awaitable, Callable, Optional, Tuple, Type, TypeVar

T = TypeVar('T')

logger = logging.getLogger(__name__)


async def with_retry(
    operation: Callable[[], Awaitable[T]],
    max_attempts: int = 3,
    base_delay: float = 1.0,
    retry_on: Tuple[Type[BaseException], ...] = (Exception,),
    operation_name: Optional[str] = None
) -> T:
    """
    Execute an operation with retries.

    The delay before attempt ``n + 1`` is ``base_delay * n`` seconds (linear,
    no jitter). When every attempt fails, the last exception is re-raised
    as-is. Exceptions outside ``retry_on`` propagate immediately.

    Args:
        operation: Zero-argument coroutine factory to execute
        max_attempts: Maximum number of attempts
        base_delay: Base delay between attempts in seconds
        retry_on: Exception types that trigger another attempt
        operation_name: Name of the operation for logging

    Returns:
        Result of the first successful attempt

    Example:
        info = await with_retry(lambda: client.get_account_info(mint))
    """
    if max_attempts < 1:
        raise ValueError("max_attempts must be at least 1")

    name = operation_name or getattr(operation, "__name__", "operation")
    last_exception: Optional[BaseException] = None

    for attempt in range(1, max_attempts + 1):
        try:
            return await operation()
        except retry_on as e:
            last_exception = e
            if attempt == max_attempts:
                logger.error(f"{name} failed after {max_attempts} attempts: {str(e)}")
                break

            delay = base_delay * attempt
            logger.warning(
                f"{name} failed (attempt {attempt}/{max_attempts}), "
                f"retrying in {delay:.2f}s: {str(e)}"
            )
            await asyncio.sleep(delay)

    assert last_exception is not None
    raise last_exception
