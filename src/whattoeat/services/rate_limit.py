"""Per-user request rate limiting over a request-log collection."""

import logging
import math
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta
from typing import Protocol

_logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RateLimitRule:
    """Maximum requests allowed within a sliding window."""

    window: timedelta
    max_requests: int


DEFAULT_RULE_NAME = "default"

RATE_LIMIT_RULES: dict[str, RateLimitRule] = {
    "food-recognition": RateLimitRule(window=timedelta(seconds=60), max_requests=10),
    "recipe-generate": RateLimitRule(window=timedelta(seconds=60), max_requests=5),
    "image-upload": RateLimitRule(window=timedelta(seconds=60), max_requests=20),
    "community": RateLimitRule(window=timedelta(seconds=60), max_requests=30),
    DEFAULT_RULE_NAME: RateLimitRule(window=timedelta(seconds=60), max_requests=10),
}


@dataclass(frozen=True)
class RateLimitDecision:
    """Outcome of a rate limit check."""

    allowed: bool
    remaining: int
    reset_at: datetime
    message: str | None = None


class RateLimitRepository(Protocol):
    """Persistence interface for request logs."""

    def list_since(
        self, user_id: str, function_name: str, since: datetime
    ) -> list[datetime]:
        """Return request timestamps at or after since, newest first."""

    def count_since(self, user_id: str, function_name: str, since: datetime) -> int:
        """Count requests at or after since."""

    def record(self, user_id: str, function_name: str, at: datetime) -> None:
        """Store a request timestamp."""

    def delete_before(
        self, user_id: str, function_name: str, before: datetime
    ) -> int:
        """Delete requests older than before and return the count."""


def _utcnow() -> datetime:
    return datetime.now(tz=UTC)


@dataclass
class RateLimiter:
    """Sliding-window limiter; storage failures let requests through."""

    repository: RateLimitRepository
    rules: dict[str, RateLimitRule] = field(
        default_factory=lambda: dict(RATE_LIMIT_RULES)
    )
    clock: Callable[[], datetime] = field(default=_utcnow)

    def rule_for(self, function_name: str) -> RateLimitRule:
        """Return the rule for a function, falling back to the default."""
        return self.rules.get(function_name) or self.rules[DEFAULT_RULE_NAME]

    def check(self, function_name: str, user_id: str) -> RateLimitDecision:
        """Check and record a request for a user."""
        rule = self.rule_for(function_name)
        now = self.clock()
        window_start = now - rule.window
        try:
            timestamps = self.repository.list_since(
                user_id, function_name, window_start
            )
            if len(timestamps) >= rule.max_requests:
                reset_at = min(timestamps) + rule.window
                wait_seconds = math.ceil((reset_at - now).total_seconds())
                return RateLimitDecision(
                    allowed=False,
                    remaining=0,
                    reset_at=reset_at,
                    message=f"请求过于频繁，请在 {wait_seconds} 秒后重试",
                )

            self.repository.record(user_id, function_name, now)
            self._prune(user_id, function_name, window_start)
            return RateLimitDecision(
                allowed=True,
                remaining=rule.max_requests - len(timestamps) - 1,
                reset_at=now + rule.window,
            )
        except Exception:
            _logger.exception(
                "Rate limit check failed: function=%s user=%s", function_name, user_id
            )
            return RateLimitDecision(
                allowed=True,
                remaining=rule.max_requests,
                reset_at=now + rule.window,
            )

    def remaining(self, function_name: str, user_id: str) -> int:
        """Return how many requests are left in the current window."""
        rule = self.rule_for(function_name)
        window_start = self.clock() - rule.window
        try:
            used = self.repository.count_since(user_id, function_name, window_start)
        except Exception:
            _logger.exception(
                "Rate limit count failed: function=%s user=%s", function_name, user_id
            )
            return rule.max_requests
        return max(0, rule.max_requests - used)

    def _prune(self, user_id: str, function_name: str, before: datetime) -> None:
        try:
            removed = self.repository.delete_before(user_id, function_name, before)
        except Exception:
            _logger.warning(
                "Failed to prune rate limit logs: function=%s user=%s",
                function_name,
                user_id,
            )
            return
        if removed:
            _logger.info("Pruned %s expired rate limit logs", removed)
