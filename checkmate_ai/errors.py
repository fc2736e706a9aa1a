"""Exception taxonomy for the engine and its advisory source."""

from datetime import datetime, timedelta
from typing import Any, Dict, Optional


class EngineError(Exception):
    """Base exception for engine errors.

    Attributes:
        message: Error description.
        details: Additional error details.
    """

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None) -> None:
        self.message = message
        self.details = details or {}
        super().__init__(self.message)


class IllegalMoveRequested(EngineError):
    """Raised when a move is not in the position's legal-move list."""


class AdvisoryUnavailable(EngineError):
    """Raised when the advisory source fails, times out or returns nothing usable."""


class AdvisoryQuotaExhausted(AdvisoryUnavailable):
    """Raised when the advisory source reports an exhausted quota."""


def is_quota_exceeded_error(error: Optional[BaseException]) -> bool:
    """True if the error message looks like a rate limit or quota failure."""
    if error is None:
        return False
    if isinstance(error, AdvisoryQuotaExhausted):
        return True
    message = str(error).lower()
    if not message:
        return False
    return "quota" in message or "429" in message or "exceeded" in message


def quota_reset_time(now: Optional[datetime] = None) -> str:
    """Time until the next local midnight, formatted as '<h>h <m>m'."""
    now = now or datetime.now()
    tomorrow = (now + timedelta(days=1)).replace(hour=0, minute=0, second=0, microsecond=0)
    remaining = int((tomorrow - now).total_seconds())
    hours, rest = divmod(remaining, 3600)
    return f"{hours}h {rest // 60}m"


def quota_status_message(requests_per_day: int, now: Optional[datetime] = None) -> str:
    return (
        f"Free tier limit: {requests_per_day} requests/day. "
        f"Quota resets in {quota_reset_time(now)}"
    )
