"""
Cache abstraction (port).

Caches in this service are read-through only: a miss always falls back
to the store, and no issuance or activation decision reads from here.
"""
from abc import ABC, abstractmethod
from typing import Any, Optional


class CachePort(ABC):
    """Key/value cache used for status snapshots."""

    @abstractmethod
    async def get(self, key: str) -> Optional[Any]:
        """Return the cached value, or None on a miss or backend error."""

    @abstractmethod
    async def set(self, key: str, value: Any, timeout: Optional[int] = None) -> None:
        """Store a value; timeout None means the backend default."""

    @abstractmethod
    async def delete(self, key: str) -> None:
        """Drop a key if present."""
