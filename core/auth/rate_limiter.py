#!/usr/bin/env python3
"""
Rate Limiter - Fixed-window request budgets per identity.

Each identity owns one window. A request arriving after the window's reset
time opens a fresh window with count 1. Within a window, requests are
allowed until count reaches the limit; later ones are denied with
remaining 0 and the same reset time.

Window state lives in a RateWindowStore:
- InMemoryRateWindowStore: per-process and lock-protected, bounded in size
- RedisRateWindowStore: shared across processes, atomic via a Lua script
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Callable, Dict, Optional, Tuple
import logging
import math
import threading

from redis import Redis

from database.models import utcnow

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RateLimitResult:
    allowed: bool
    remaining: int
    reset_at: datetime
    limit: int

    def retry_after_seconds(self, now: datetime) -> int:
        return max(0, math.ceil((self.reset_at - now).total_seconds()))

    def headers(self) -> Dict[str, str]:
        return {
            'X-RateLimit-Limit': str(self.limit),
            'X-RateLimit-Remaining': str(self.remaining),
            'X-RateLimit-Reset': self.reset_at.isoformat(),
        }


class RateWindowStore(ABC):
    """Atomic hit-and-compare on one identity's window."""

    @abstractmethod
    def hit(self, key: str, limit: int, window_seconds: int, now: datetime) -> Tuple[bool, int, datetime]:
        """
        Count one request against key.

        Returns:
            (allowed, count in the window, window reset time)
        """
        pass


class InMemoryRateWindowStore(RateWindowStore):
    """
    Windows in a dict bounded by max_entries.

    When the dict is full, expired windows are dropped first. If every
    tracked window is still open, the new identity is denied until the
    soonest one resets; live windows are never dropped, so a tracked
    identity cannot get a fresh count mid-window.
    """

    def __init__(self, max_entries: int = 100000):
        self.max_entries = max_entries
        self._lock = threading.Lock()
        # key -> [count, reset_at]
        self._windows: Dict[str, list] = {}

    def hit(self, key: str, limit: int, window_seconds: int, now: datetime) -> Tuple[bool, int, datetime]:
        with self._lock:
            window = self._windows.get(key)
            if window is None and len(self._windows) >= self.max_entries:
                self._evict_expired(now)
                if len(self._windows) >= self.max_entries:
                    reset_at = min(reset for _, reset in self._windows.values())
                    logger.warning(f"Rate limit store full ({self.max_entries} windows), denying {key}")
                    return False, limit, reset_at

            if window is None or now > window[1]:
                window = [1, now + timedelta(seconds=window_seconds)]
                self._windows[key] = window
                return True, 1, window[1]

            if window[0] >= limit:
                return False, window[0], window[1]

            window[0] += 1
            return True, window[0], window[1]

    def _evict_expired(self, now: datetime) -> None:
        expired = [key for key, (_, reset_at) in self._windows.items() if now > reset_at]
        for key in expired:
            del self._windows[key]
        logger.debug(f"Evicted {len(expired)} expired rate limit windows")

    def __len__(self) -> int:
        with self._lock:
            return len(self._windows)


_HIT_SCRIPT = """
local count = redis.call('INCR', KEYS[1])
if count == 1 then
    redis.call('PEXPIRE', KEYS[1], ARGV[1])
end
local ttl = redis.call('PTTL', KEYS[1])
return {count, ttl}
"""


class RedisRateWindowStore(RateWindowStore):
    """
    Windows as Redis counters that expire with the window.

    The counter keeps increasing past the limit while denied; the key's TTL
    is the window's reset.
    """

    def __init__(self, redis_conn: Redis, key_prefix: str = 'ratelimit:'):
        self.redis = redis_conn
        self.key_prefix = key_prefix
        self._script = redis_conn.register_script(_HIT_SCRIPT)

    @classmethod
    def from_url(cls, redis_url: str, **kwargs) -> 'RedisRateWindowStore':
        return cls(Redis.from_url(redis_url), **kwargs)

    def hit(self, key: str, limit: int, window_seconds: int, now: datetime) -> Tuple[bool, int, datetime]:
        count, ttl_ms = self._script(keys=[self.key_prefix + key], args=[int(window_seconds * 1000)])
        count = int(count)
        ttl_ms = int(ttl_ms)
        if ttl_ms < 0:
            ttl_ms = int(window_seconds * 1000)
        return count <= limit, min(count, limit), now + timedelta(milliseconds=ttl_ms)


class RateLimiter:
    def __init__(self, store: Optional[RateWindowStore] = None, clock: Callable[[], datetime] = utcnow):
        self.store = store or InMemoryRateWindowStore()
        self.clock = clock

    def check(self, identity: str, limit: int, window_seconds: int) -> RateLimitResult:
        if limit < 1:
            raise ValueError(f"Rate limit must be positive, got {limit}")
        if window_seconds <= 0:
            raise ValueError(f"Rate limit window must be positive, got {window_seconds}")

        allowed, count, reset_at = self.store.hit(identity, limit, window_seconds, self.clock())
        remaining = max(0, limit - count) if allowed else 0

        if not allowed:
            logger.info(f"Rate limit exceeded for {identity} until {reset_at.isoformat()}")
        return RateLimitResult(allowed=allowed, remaining=remaining, reset_at=reset_at, limit=limit)
