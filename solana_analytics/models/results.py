"""
Tagged fetch results.

Best-effort fetches (balance, transaction history, a single news provider)
never raise. They return a :class:`FetchResult` instead, so callers can tell
"genuinely empty" apart from "fetch failed, default substituted".
"""

from dataclasses import dataclass
from typing import Generic, Optional, TypeVar

T = TypeVar('T')


@dataclass(frozen=True)
class FetchResult(Generic[T]):
    """Either ``Ok(value)`` or ``Degraded(default, reason)``."""

    value: T
    reason: Optional[str] = None

    @classmethod
    def ok(cls, value: T) -> "FetchResult[T]":
        """Wrap a successfully fetched value."""
        return cls(value=value)

    @classmethod
    def degraded(cls, default: T, reason: str) -> "FetchResult[T]":
        """Wrap a default value substituted for a failed fetch."""
        return cls(value=default, reason=reason or "unknown error")

    @property
    def is_degraded(self) -> bool:
        """True if the value is a substitute for a failed fetch."""
        return self.reason is not None
