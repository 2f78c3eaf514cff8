"""
Cache adapter implementations.

Provides the Django cache implementation of CachePort. The backend is
chosen in settings (Redis in production, LocMem in tests).
"""

import logging
from typing import Any, Optional

from asgiref.sync import sync_to_async
from django.core.cache import cache

from core.infrastructure.cache import CachePort
from core.metrics import cache_hits_total, cache_misses_total

logger = logging.getLogger(__name__)


def _namespace(key: str) -> str:
    """Metric label for a key: everything before the last segment."""
    return key.rsplit(":", 1)[0]


class DjangoCacheAdapter(CachePort):
    """
    Django cache adapter implementing CachePort.

    Backend errors are logged and treated as a miss, so an unreachable
    cache degrades to store reads.
    """

    async def get(self, key: str) -> Optional[Any]:
        try:
            value = await sync_to_async(cache.get)(key)
        except Exception as e:  # pylint: disable=broad-exception-caught
            logger.error("Error getting from cache: %s", e, exc_info=True)
            return None
        if value is None:
            cache_misses_total.labels(cache_key=_namespace(key)).inc()
            logger.debug("Cache miss: %s", key)
        else:
            cache_hits_total.labels(cache_key=_namespace(key)).inc()
            logger.debug("Cache hit: %s", key)
        return value

    async def set(self, key: str, value: Any, timeout: Optional[int] = None) -> None:
        try:
            await sync_to_async(cache.set)(key, value, timeout=timeout)
            logger.debug("Cache set: %s (timeout=%s)", key, timeout)
        except Exception as e:  # pylint: disable=broad-exception-caught
            logger.error("Error setting cache: %s", e, exc_info=True)

    async def delete(self, key: str) -> None:
        try:
            await sync_to_async(cache.delete)(key)
            logger.debug("Cache delete: %s", key)
        except Exception as e:  # pylint: disable=broad-exception-caught
            logger.error("Error deleting from cache: %s", e, exc_info=True)


# Global cache instance
cache_adapter = DjangoCacheAdapter()
