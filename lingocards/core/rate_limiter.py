"""
Per-user, per-endpoint fixed-window rate limiting.

The limiter keeps its counters in an explicit store owned by the instance.
The application creates one limiter at startup and hands it to endpoints
through a dependency, so tests and multi-worker deployments can swap in
their own instance.
"""
import logging
import math
import time
from dataclasses import dataclass
from threading import Lock
from typing import Callable, Dict, Optional
import uuid

from fastapi import Depends, Request

from lingocards.core.exceptions import RateLimitError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RateLimitRule:
    max_requests: int
    window_seconds: float


@dataclass
class RateLimitEntry:
    count: int
    reset_at: float


@dataclass(frozen=True)
class RateLimitResult:
    allowed: bool
    retry_after: Optional[int] = None


@dataclass(frozen=True)
class RateLimitInfo:
    remaining: int
    reset_at: float


class RateLimiter:
    """Fixed-window counters keyed by ``endpoint:user``."""

    def __init__(
        self,
        rules: Dict[str, RateLimitRule],
        sweep_interval: float = 60.0,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.rules = dict(rules)
        self.sweep_interval = sweep_interval
        self._clock = clock
        self._entries: Dict[str, RateLimitEntry] = {}
        self._lock = Lock()
        self._last_sweep = clock()

    @staticmethod
    def _key(user_id, endpoint: str) -> str:
        return f"{endpoint}:{user_id}"

    def check(self, user_id, endpoint: str, now: Optional[float] = None) -> RateLimitResult:
        """Count one request and report whether it is within budget."""
        rule = self.rules.get(endpoint)
        if rule is None:
            return RateLimitResult(allowed=True)

        now = self._clock() if now is None else now
        key = self._key(user_id, endpoint)

        with self._lock:
            if now - self._last_sweep >= self.sweep_interval:
                self._sweep_locked(now)

            entry = self._entries.get(key)
            if entry is None or now >= entry.reset_at:
                self._entries[key] = RateLimitEntry(count=1, reset_at=now + rule.window_seconds)
                return RateLimitResult(allowed=True)

            if entry.count >= rule.max_requests:
                retry_after = max(1, math.ceil(entry.reset_at - now))
                logger.warning(f"Rate limit exceeded for {key}, retry after {retry_after}s")
                return RateLimitResult(allowed=False, retry_after=retry_after)

            entry.count += 1
            return RateLimitResult(allowed=True)

    def reset(self, user_id, endpoint: str) -> None:
        with self._lock:
            self._entries.pop(self._key(user_id, endpoint), None)

    def info(self, user_id, endpoint: str, now: Optional[float] = None) -> Optional[RateLimitInfo]:
        """Remaining budget for a caller, or None when the endpoint is unlimited."""
        rule = self.rules.get(endpoint)
        if rule is None:
            return None

        now = self._clock() if now is None else now
        with self._lock:
            entry = self._entries.get(self._key(user_id, endpoint))
            if entry is None or now >= entry.reset_at:
                return RateLimitInfo(remaining=rule.max_requests, reset_at=now + rule.window_seconds)
            return RateLimitInfo(
                remaining=max(0, rule.max_requests - entry.count),
                reset_at=entry.reset_at,
            )

    def sweep_expired(self, now: Optional[float] = None) -> int:
        """Drop expired windows. Returns the number of entries removed."""
        now = self._clock() if now is None else now
        with self._lock:
            return self._sweep_locked(now)

    def _sweep_locked(self, now: float) -> int:
        expired = [key for key, entry in self._entries.items() if now >= entry.reset_at]
        for key in expired:
            del self._entries[key]
        self._last_sweep = now
        return len(expired)

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)


def get_rate_limiter(request: Request) -> RateLimiter:
    """Dependency returning the limiter the application was created with."""
    return request.app.state.rate_limiter


def rate_limit(endpoint: str):
    """
    Build a dependency that counts one request against ``endpoint`` for the
    calling user and raises RateLimitError once the budget is spent.
    """
    def dependency(user_id: uuid.UUID, limiter: RateLimiter = Depends(get_rate_limiter)) -> None:
        result = limiter.check(user_id, endpoint)
        if not result.allowed:
            raise RateLimitError("Rate limit exceeded, please try again later", retry_after=result.retry_after)

    return dependency
