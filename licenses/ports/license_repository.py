"""
License repository port (interface).

This defines the contract for license persistence operations.
Implementations are in the infrastructure layer.
"""
from abc import ABC, abstractmethod
from typing import Any, Dict, Optional

from core.domain.value_objects import LicenseStatus
from licenses.domain.license import License


class LicenseRepository(ABC):
    """
    Abstract repository for License entities.

    This is a port in hexagonal architecture - it defines
    what operations are available, not how they're implemented.
    Every write is a single atomic primitive; there is no general save().
    """

    @abstractmethod
    async def insert_if_absent(self, license: License) -> bool:
        """
        Insert a license unless its key already exists.

        Args:
            license: License entity to insert

        Returns:
            True if inserted, False if a license with that key exists
        """
        pass

    @abstractmethod
    async def find_by_key(self, license_key: str) -> Optional[License]:
        """
        Find a license by key string.

        Args:
            license_key: License key string

        Returns:
            License entity or None if not found
        """
        pass

    @abstractmethod
    async def find_by_user_identity(self, user_id: str) -> Optional[License]:
        """
        Find the license issued for an allow-list identity.

        Args:
            user_id: Allow-list identifier

        Returns:
            License entity or None if not found
        """
        pass

    @abstractmethod
    async def exists_by_key(self, license_key: str) -> bool:
        """
        Check if a license key is taken.

        Args:
            license_key: License key string

        Returns:
            True if a license with this key exists
        """
        pass

    @abstractmethod
    async def compare_and_swap_status(
        self,
        license_key: str,
        expected_status: LicenseStatus,
        new_fields: Dict[str, Any],
    ) -> bool:
        """
        Update a license only if its status still matches.

        Args:
            license_key: License key string
            expected_status: Status the record must have at update time
            new_fields: Fields to write (status, bound_machine_id, activated_at)

        Returns:
            True if the update was applied, False otherwise
        """
        pass
