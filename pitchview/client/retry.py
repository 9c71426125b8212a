"""Retry policy shared by every client request.

Strategy:
- 429: honor Retry-After when present, else exponential backoff
  (base_delay * 2^attempt), capped at max_delay
- Any other failure: linear backoff (linear_delay * (attempt + 1))
- max_attempts counts the first try, so 3 means two retries
"""

from collections.abc import Callable
from dataclasses import dataclass
from datetime import UTC, datetime
from email.utils import parsedate_to_datetime

RATE_LIMIT_STATUS = 429


def retry_any_error_status(status: int) -> bool:
    """Default predicate: every 4xx/5xx is worth another attempt."""
    return status == RATE_LIMIT_STATUS or status >= 400


def parse_retry_after(value: str | None, now: datetime | None = None) -> float | None:
    """Parse a Retry-After header into seconds.

    Accepts delta-seconds ("2") or an HTTP-date. Returns None when the header
    is missing or unparseable.
    """
    if not value:
        return None
    value = value.strip()
    try:
        return max(0.0, float(value))
    except ValueError:
        pass
    try:
        when = parsedate_to_datetime(value)
    except (TypeError, ValueError):
        return None
    if when.tzinfo is None:
        when = when.replace(tzinfo=UTC)
    now = now or datetime.now(UTC)
    return max(0.0, (when - now).total_seconds())


@dataclass(frozen=True)
class RetryPolicy:
    """How many times to try a request and how long to wait in between."""

    max_attempts: int = 3
    base_delay: float = 1.0
    linear_delay: float = 1.0
    max_delay: float = 60.0
    is_retryable_status: Callable[[int], bool] = retry_any_error_status

    def can_retry(self, attempt: int) -> bool:
        """Whether another attempt is allowed after zero-based `attempt` failed."""
        return attempt < self.max_attempts - 1

    def rate_limit_delay(self, attempt: int, retry_after: str | None = None) -> float:
        """Delay before retrying a 429."""
        delay = parse_retry_after(retry_after)
        if delay is None:
            delay = self.base_delay * (2**attempt)
        return min(delay, self.max_delay)

    def failure_delay(self, attempt: int) -> float:
        """Delay before retrying any other failure."""
        return min(self.linear_delay * (attempt + 1), self.max_delay)
