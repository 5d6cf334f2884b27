"""
dautracker/features/activity/service.py

Daily active user tracking on top of ActivityKeyStore.

Handles:
- User id validation and default-date substitution
- Single and batch activity recording
- Membership, count and calendar-range queries

Store failures never propagate out of this module: each operation logs the
failure and collapses it to False, 0 or an empty mapping.
"""

from __future__ import annotations

import logging
from datetime import date, timedelta
from typing import Callable, Dict, Iterable, Optional

from dautracker.core.config import settings
from dautracker.core.redis_client import get_redis
from dautracker.features.activity.store import ActivityKeyStore
from dautracker.models.activity import StoreResult

logger = logging.getLogger("dautracker")

DISPLAY_DATE_FORMAT = "%Y-%m-%d"


def is_valid_user_id(user_id: object) -> bool:
    # bool is an int subclass; True must not become user 1.
    return isinstance(user_id, int) and not isinstance(user_id, bool) and user_id > 0


class ActivityTracker:
    def __init__(self, store: ActivityKeyStore, today: Callable[[], date] = date.today):
        self.store = store
        self._today = today

    def today(self) -> date:
        return self._today()

    def record_active(self, user_id: Optional[int], day: Optional[date] = None) -> bool:
        """
        Mark a user active for a day.

        Returns True when the store accepted the write, including when the
        user was already active.
        """
        if not is_valid_user_id(user_id):
            logger.warning("activity.invalid_user_id", extra={"user_id": user_id})
            return False

        day = day or self.today()
        result = self.store.set_active(day, user_id)
        if not result.ok:
            self._log_failure("activity.record_failed", result, user_id=user_id, day=day)
            return False

        logger.debug(
            "activity.recorded",
            extra={"user_id": user_id, "day": day.isoformat(), "key": self.store.key_for(day)},
        )
        return True

    def batch_record_active(self, user_ids: Optional[Iterable[Optional[int]]], day: Optional[date] = None) -> int:
        """
        Mark many users active for one day, one round-trip per id.

        Invalid ids are skipped without being counted. A failed id does not
        stop the rest. The key's TTL is refreshed once, after the whole batch.
        """
        # Materialized so an empty generator also short-circuits.
        user_ids = list(user_ids or ())
        if not user_ids:
            return 0

        day = day or self.today()
        total = 0
        success_count = 0
        for user_id in user_ids:
            total += 1
            if not is_valid_user_id(user_id):
                continue
            result = self.store.set_bit(day, user_id)
            if result.ok:
                success_count += 1
            else:
                self._log_failure("activity.batch_record_failed", result, user_id=user_id, day=day)

        expiry = self.store.refresh_expiry(day)
        if not expiry.ok:
            self._log_failure("activity.expiry_refresh_failed", expiry, day=day)

        logger.info(
            "activity.batch_recorded",
            extra={"total": total, "succeeded": success_count, "day": day.isoformat()},
        )
        return success_count

    def is_active(self, user_id: Optional[int], day: Optional[date] = None) -> bool:
        if not is_valid_user_id(user_id):
            return False

        day = day or self.today()
        result = self.store.get_active(day, user_id)
        if not result.ok:
            self._log_failure("activity.check_failed", result, user_id=user_id, day=day)
        return result.unwrap_or(False)

    def dau_count(self, day: Optional[date] = None) -> int:
        day = day or self.today()
        result = self.store.count(day)
        if not result.ok:
            self._log_failure("activity.count_failed", result, day=day)
        count = result.unwrap_or(0)
        logger.debug("activity.counted", extra={"day": day.isoformat(), "dau": count})
        return count

    def dau_count_range(self, start: Optional[date], end: Optional[date]) -> Dict[str, int]:
        """
        DAU for every calendar day from start to end, inclusive.

        Keys are YYYY-MM-DD in chronological order. A reversed range is empty.
        """
        counts: Dict[str, int] = {}
        if start is None or end is None:
            return counts

        # Offsets from start never step past end, so date.max is safe.
        for offset in range((end - start).days + 1):
            current = start + timedelta(days=offset)
            counts[current.strftime(DISPLAY_DATE_FORMAT)] = self.dau_count(current)

        logger.info(
            "activity.range_counted",
            extra={"start": start.isoformat(), "end": end.isoformat(), "days": len(counts)},
        )
        return counts

    def key_memory_usage(self, day: Optional[date] = None) -> int:
        day = day or self.today()
        result = self.store.memory_usage(day)
        if not result.ok:
            self._log_failure("activity.memory_usage_failed", result, day=day)
        return result.unwrap_or(0)

    @staticmethod
    def _log_failure(event: str, result: StoreResult, *, day: date, user_id: Optional[int] = None) -> None:
        extra = {"day": day.isoformat(), "error_code": result.error.code}
        if user_id is not None:
            extra["user_id"] = user_id
        logger.error(event, exc_info=result.error.__cause__ or result.error, extra=extra)


_tracker: Optional[ActivityTracker] = None


def get_tracker() -> ActivityTracker:
    """Shared tracker wired to the configured Redis; used as the API dependency."""
    global _tracker
    if _tracker is None:
        store = ActivityKeyStore(
            get_redis(),
            key_prefix=settings.DAU_KEY_PREFIX,
            expire_days=settings.DAU_EXPIRE_DAYS,
        )
        _tracker = ActivityTracker(store)
    return _tracker


def reset_tracker() -> None:
    """FOR TESTING ONLY - forces re-initialization on next get_tracker() call."""
    global _tracker
    _tracker = None
