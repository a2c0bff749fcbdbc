"""Per-plan request throttling over fixed minute and hour windows.

Runs alongside the monthly quota: the quota bounds how much a plan may use in
a period, the throttle bounds how fast. Counters live in Redis so every
worker shares them; an in-memory store implements the same protocol for
development and tests.
"""
import threading
import time
from dataclasses import dataclass
from typing import Callable, Optional, Protocol, runtime_checkable

import redis.asyncio as redis
import structlog

from textgate.exceptions import RateLimitedError
from textgate.schemas.plan import PlanType

logger = structlog.get_logger(__name__)

MINUTE = 60
HOUR = 3600


@dataclass(frozen=True)
class RateLimitWindow:
    """At most ``max_requests`` per ``window_seconds``."""

    name: str
    max_requests: int
    window_seconds: int


RATE_LIMITS: dict[PlanType, tuple[RateLimitWindow, ...]] = {
    PlanType.FREE: (RateLimitWindow("minute", 10, MINUTE), RateLimitWindow("hour", 100, HOUR)),
    PlanType.BASIC: (RateLimitWindow("minute", 30, MINUTE), RateLimitWindow("hour", 500, HOUR)),
    PlanType.PROFESSIONAL: (RateLimitWindow("minute", 100, MINUTE), RateLimitWindow("hour", 2000, HOUR)),
    PlanType.ENTERPRISE: (RateLimitWindow("minute", 500, MINUTE), RateLimitWindow("hour", 10000, HOUR)),
}


@dataclass(frozen=True)
class RateLimitStatus:
    """Counter state of one window after the current request."""

    window: RateLimitWindow
    count: int
    reset_at: int

    @property
    def allowed(self) -> bool:
        return self.count <= self.window.max_requests

    @property
    def remaining(self) -> int:
        return max(0, self.window.max_requests - self.count)


@runtime_checkable
class RateLimitStoreProtocol(Protocol):
    """Shared counters that expire with their window."""

    async def hit(self, key: str, ttl_seconds: int) -> int:
        """Increment *key*, expire it after *ttl_seconds*, return the new count."""
        ...


class RedisRateLimitStore(RateLimitStoreProtocol):
    """Window counters in Redis (INCR + EXPIRE in one transaction)."""

    def __init__(self, client: redis.Redis) -> None:
        """
        Initialize with a Redis client.

        Args:
            client: ``redis.asyncio`` client, created with ``redis.from_url``
        """
        self.client = client

    async def hit(self, key: str, ttl_seconds: int) -> int:
        async with self.client.pipeline(transaction=True) as pipe:
            pipe.incr(key)
            pipe.expire(key, ttl_seconds)
            count, _ = await pipe.execute()
        return int(count)


class InMemoryRateLimitStore(RateLimitStoreProtocol):
    """Process-local window counters guarded by a lock."""

    def __init__(self, clock: Callable[[], float] = time.time) -> None:
        """Initialize empty; *clock* drives expiry."""
        self._clock = clock
        self._counters: dict[str, tuple[int, float]] = {}
        self._lock = threading.Lock()

    async def hit(self, key: str, ttl_seconds: int) -> int:
        now = self._clock()
        with self._lock:
            count, expires_at = self._counters.get(key, (0, now + ttl_seconds))
            if expires_at <= now:
                count, expires_at = 0, now + ttl_seconds
            count += 1
            self._counters[key] = (count, expires_at)
            return count


class RateLimiter:
    """Throttles a user's requests by the limits of their plan."""

    def __init__(
        self,
        store: RateLimitStoreProtocol,
        limits: Optional[dict[PlanType, tuple[RateLimitWindow, ...]]] = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        """
        Initialize rate limiter.

        Args:
            store: Counter store shared by every worker
            limits: Windows per plan, defaults to RATE_LIMITS
            clock: Source of the current Unix time
        """
        self.store = store
        self.limits = limits or RATE_LIMITS
        self.clock = clock

    def windows_for(self, plan_type: PlanType) -> tuple[RateLimitWindow, ...]:
        """Windows for the plan, free limits for a plan with none configured."""
        return self.limits.get(plan_type, self.limits[PlanType.FREE])

    async def check(self, user_id: str, plan_type: PlanType) -> list[RateLimitStatus]:
        """
        Count one request for the user in every window of their plan.

        Windows are checked shortest first and counting stops at the first
        window that is exhausted.

        Returns:
            Status of each counted window

        Raises:
            RateLimitedError: If a window is exhausted
        """
        now = int(self.clock())
        statuses = []

        for window in self.windows_for(plan_type):
            window_start = now - now % window.window_seconds
            reset_at = window_start + window.window_seconds
            key = f"rate_limit:{user_id}:{window.window_seconds}:{window_start}"

            try:
                count = await self.store.hit(key, window.window_seconds)
            except Exception as e:
                logger.error(
                    "rate_limit_check_failed",
                    user_id=user_id,
                    window=window.name,
                    error=str(e),
                )
                # On error, allow request (fail open for availability)
                continue

            status = RateLimitStatus(window=window, count=count, reset_at=reset_at)
            if not status.allowed:
                logger.warning(
                    "rate_limit_exceeded",
                    user_id=user_id,
                    plan_type=plan_type.value,
                    window=window.name,
                    limit=window.max_requests,
                    count=count,
                )
                raise RateLimitedError(
                    limit=window.max_requests,
                    window=window.name,
                    reset_at=reset_at,
                    retry_after=max(1, reset_at - now),
                )
            statuses.append(status)

        logger.debug(
            "rate_limit_checked",
            user_id=user_id,
            plan_type=plan_type.value,
            remaining={status.window.name: status.remaining for status in statuses},
        )
        return statuses
