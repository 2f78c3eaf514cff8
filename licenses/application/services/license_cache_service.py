"""
License cache service.

Caches status snapshots of activated licenses only; an activated license
never changes again. Issuance and activation never read these entries.
"""
import hashlib
import logging
from datetime import datetime
from typing import Any, Dict, Optional

from django.conf import settings

from core.domain.value_objects import LicenseStatus
from core.infrastructure.cache_adapters import cache_adapter
from licenses.domain.license import License
from licenses.domain.license_key import mask_license_key

logger = logging.getLogger(__name__)

# Cache TTL (in seconds)
CACHE_TTL_LICENSE_STATUS = 300


class LicenseCacheService:
    """Service for caching license status snapshots."""

    @staticmethod
    def _license_status_key(license_key: str) -> str:
        """Generate cache key for license status."""
        key_hash = hashlib.sha256(license_key.encode()).hexdigest()[:16]
        return f"license:status:{key_hash}"

    @staticmethod
    async def get_license_snapshot(license_key: str) -> Optional[Dict[str, Any]]:
        """
        Get a cached license snapshot.

        Args:
            license_key: License key

        Returns:
            Snapshot dict (see snapshot_from_license) or None
        """
        cache_key = LicenseCacheService._license_status_key(license_key)
        cached = await cache_adapter.get(cache_key)
        if not isinstance(cached, dict) or cached.get("license_key") != license_key:
            return None
        if cached.get("status") != LicenseStatus.ACTIVATED.value:
            return None
        return cached

    @staticmethod
    async def set_license_snapshot(license: License, ttl: Optional[int] = None) -> None:
        """
        Cache a license snapshot.

        Args:
            license: License to cache
            ttl: Time to live in seconds
        """
        cache_key = LicenseCacheService._license_status_key(license.license_key)
        timeout = ttl or getattr(settings, "LICENSE_STATUS_CACHE_TTL", CACHE_TTL_LICENSE_STATUS)
        await cache_adapter.set(
            cache_key, LicenseCacheService.snapshot_from_license(license), timeout=timeout
        )

    @staticmethod
    async def invalidate_license_status(license_key: str) -> None:
        """
        Invalidate cached license status.

        Args:
            license_key: License key
        """
        cache_key = LicenseCacheService._license_status_key(license_key)
        await cache_adapter.delete(cache_key)
        logger.info("Invalidated license status cache: %s", mask_license_key(license_key))

    @staticmethod
    def snapshot_from_license(license: License) -> Dict[str, Any]:
        return {
            "license_key": license.license_key,
            "status": license.status.value,
            "bound_machine_id": license.bound_machine_id,
            "activated_at": license.activated_at.isoformat() if license.activated_at else None,
            "created_at": license.created_at.isoformat(),
        }

    @staticmethod
    def parse_timestamp(value: Optional[str]) -> Optional[datetime]:
        return datetime.fromisoformat(value) if value else None
