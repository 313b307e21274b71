"""Shared invalidation timestamps for the wiki JSON cache."""

import logging
import time
from collections.abc import Callable

from django.conf import settings
from django.core.cache import caches

logger = logging.getLogger(__name__)

DATABASES_KEY = "databases"


def current_timestamp() -> int:
    """Return the current time as Unix seconds."""
    return int(time.time())


class TimestampStore:
    """Invalidation timestamps kept in a cache shared by the whole farm.

    Values never expire; they only move forward through ``reset``.
    """

    def __init__(
        self,
        cache=None,
        namespace: str | None = None,
        clock: Callable[[], int] | None = None,
    ):
        self.cache = cache if cache is not None else caches[settings.FARM_CACHE_ALIAS]
        self.namespace = namespace or settings.FARM_CACHE_NAMESPACE
        self.clock = clock or current_timestamp

    def make_key(self, key: str) -> str:
        """Build the farm-wide cache key for an entry."""
        return f"{self.namespace}:{key}"

    def get(self, key: str) -> int:
        """Return the invalidation timestamp for ``key``, or 0 if unset."""
        try:
            value = self.cache.get(self.make_key(key))
        except Exception as e:
            logger.warning("Failed to read invalidation timestamp for %s: %s", key, e)
            return 0

        try:
            return int(value or 0)
        except (TypeError, ValueError):
            logger.warning("Ignoring malformed invalidation timestamp for %s: %r", key, value)
            return 0

    def reset(self, key: str) -> int:
        """Move the invalidation timestamp for ``key`` forward and return it.

        The new value is now, or one past the stored value when the clock has
        not moved on, so a snapshot generated for the old value is always
        stale afterwards.
        """
        timestamp = max(self.clock(), self.get(key) + 1)
        try:
            self.cache.set(self.make_key(key), timestamp, timeout=None)
        except Exception as e:
            logger.warning("Failed to write invalidation timestamp for %s: %s", key, e)
        return timestamp
