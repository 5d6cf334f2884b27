"""
dautracker/features/activity/store.py

Per-day activity bitmaps in Redis.

One bitmap per calendar date, keyed `<prefix>YYYYMMDD`; bit offset = user id.
Every primitive returns a StoreResult instead of raising, so transport
failures stay visible to the caller as data.
"""

from __future__ import annotations

from datetime import date
from typing import Callable, TypeVar

from redis import Redis
from redis.exceptions import RedisError, ResponseError

from dautracker.core.errors import StoreUnavailable
from dautracker.core.metrics import store_operations_total
from dautracker.models.activity import StoreResult

T = TypeVar("T")

DEFAULT_KEY_PREFIX = "dau:"
DEFAULT_EXPIRE_DAYS = 7
SECONDS_PER_DAY = 86400
KEY_DATE_FORMAT = "%Y%m%d"


def _is_unknown_command(exc: ResponseError) -> bool:
    text = str(exc).lower()
    return "unknown command" in text or "unknown subcommand" in text


class ActivityKeyStore:
    """Key naming, expiry policy and bit primitives over a Redis client."""

    def __init__(
        self,
        client: Redis,
        *,
        key_prefix: str = DEFAULT_KEY_PREFIX,
        expire_days: int = DEFAULT_EXPIRE_DAYS,
    ):
        self.client = client
        self.key_prefix = key_prefix
        self.expire_seconds = expire_days * SECONDS_PER_DAY

    def key_for(self, day: date) -> str:
        return f"{self.key_prefix}{day.strftime(KEY_DATE_FORMAT)}"

    def set_bit(self, day: date, user_id: int) -> StoreResult[bool]:
        """SETBIT to 1. The value is the bit's previous state, not success."""
        key = self.key_for(day)
        return self._call("setbit", lambda: bool(self.client.setbit(key, user_id, 1)))

    def refresh_expiry(self, day: date) -> StoreResult[bool]:
        """Reset the key's TTL to the full retention window."""
        key = self.key_for(day)
        return self._call("expire", lambda: bool(self.client.expire(key, self.expire_seconds)))

    def set_active(self, day: date, user_id: int) -> StoreResult[bool]:
        result = self.set_bit(day, user_id)
        if not result.ok:
            return result
        expiry = self.refresh_expiry(day)
        if not expiry.ok:
            return StoreResult.failure(expiry.error)
        return result

    def get_active(self, day: date, user_id: int) -> StoreResult[bool]:
        key = self.key_for(day)
        return self._call("getbit", lambda: bool(self.client.getbit(key, user_id)))

    def count(self, day: date) -> StoreResult[int]:
        key = self.key_for(day)
        return self._call("bitcount", lambda: int(self.client.bitcount(key) or 0))

    def memory_usage(self, day: date) -> StoreResult[int]:
        """
        Bytes the store reports for the day's key.

        A missing key (nil reply) and a server without MEMORY USAGE both
        yield 0 rather than a failure.
        """
        key = self.key_for(day)
        try:
            usage = self.client.memory_usage(key)
        except ResponseError as exc:
            if not _is_unknown_command(exc):
                return self._failed("memory_usage", exc)
            usage = 0
        except RedisError as exc:
            return self._failed("memory_usage", exc)
        store_operations_total.inc(labels={"operation": "memory_usage", "outcome": "ok"})
        return StoreResult.success(int(usage or 0))

    def ping(self) -> StoreResult[bool]:
        return self._call("ping", lambda: bool(self.client.ping()))

    # Internal helpers -------------------------------------------------
    def _call(self, operation: str, fn: Callable[[], T]) -> StoreResult[T]:
        try:
            value = fn()
        except RedisError as exc:
            return self._failed(operation, exc)
        store_operations_total.inc(labels={"operation": operation, "outcome": "ok"})
        return StoreResult.success(value)

    @staticmethod
    def _failed(operation: str, exc: RedisError) -> StoreResult:
        store_operations_total.inc(labels={"operation": operation, "outcome": "error"})
        error = StoreUnavailable(f"{operation} failed: {exc}")
        error.__cause__ = exc
        return StoreResult.failure(error)
