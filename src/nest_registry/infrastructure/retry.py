"""Retry policy for calls to the content storage gateway."""

from __future__ import annotations

import random
from dataclasses import dataclass

import httpx

RETRYABLE_STATUS_CODES = frozenset({408, 425, 429, 500, 502, 503, 504})

DEFAULT_ATTEMPTS = 3
DEFAULT_INITIAL_MS = 250
DEFAULT_MAX_MS = 5000
DEFAULT_JITTER = 0.2


@dataclass(frozen=True, slots=True)
class RetryPolicy:
    """Exponential backoff for gateway calls.

    ``attempts`` counts the first call. The delay before retry ``n``
    (zero-based) is ``initial_ms * 2**n`` capped at ``max_ms``, then moved
    by up to ``jitter`` of itself in either direction.
    """

    attempts: int = DEFAULT_ATTEMPTS
    initial_ms: int = DEFAULT_INITIAL_MS
    max_ms: int = DEFAULT_MAX_MS
    jitter: float = DEFAULT_JITTER

    def __post_init__(self) -> None:
        if self.attempts < 1:
            raise ValueError("attempts must be at least 1")
        if self.initial_ms < 0 or self.max_ms < 0:
            raise ValueError("backoff bounds must not be negative")
        if not 0.0 <= self.jitter <= 1.0:
            raise ValueError("jitter must be between 0 and 1")

    def should_retry(self, exc: Exception, attempt: int) -> bool:
        """Return ``True`` when ``exc`` is transient and budget remains after ``attempt``."""
        return attempt + 1 < self.attempts and is_retryable(exc)

    def delay_seconds(self, attempt: int) -> float:
        base = min(self.initial_ms * (2**attempt), self.max_ms)
        spread = base * self.jitter
        return max(0.0, base + random.uniform(-spread, spread)) / 1000  # noqa: S311


def is_retryable(exc: Exception) -> bool:
    """Return ``True`` for transport failures and transient upstream statuses."""
    if isinstance(exc, httpx.HTTPStatusError):
        return exc.response.status_code in RETRYABLE_STATUS_CODES
    return isinstance(exc, httpx.TransportError)


__all__ = [
    "DEFAULT_ATTEMPTS",
    "DEFAULT_INITIAL_MS",
    "DEFAULT_JITTER",
    "DEFAULT_MAX_MS",
    "RETRYABLE_STATUS_CODES",
    "RetryPolicy",
    "is_retryable",
]
