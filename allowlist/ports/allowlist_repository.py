"""
AllowList repository port (interface).

This defines the contract for allow-list persistence operations.
Implementations are in the infrastructure layer.
"""
from abc import ABC, abstractmethod
from typing import Iterable, List, Optional

from allowlist.domain.entry import AllowListEntry


class AllowListRepository(ABC):
    """
    Abstract repository for allow-list entries.

    This is a port in hexagonal architecture - it defines
    what operations are available, not how they're implemented.
    Ineligibility is reported through return values, never raised.
    """

    @abstractmethod
    async def is_eligible(self, user_id: str) -> bool:
        """
        Check whether a user ID is provisioned and not yet consumed.

        Args:
            user_id: Allow-list identifier

        Returns:
            True if the ID may still be used to issue a license
        """
        pass

    @abstractmethod
    async def try_consume(self, user_id: str) -> bool:
        """
        Atomically mark a user ID as consumed.

        At most one of any number of concurrent callers for the same ID
        observes True.

        Args:
            user_id: Allow-list identifier

        Returns:
            True if this call consumed the ID, False if it was not eligible
            or already consumed
        """
        pass

    @abstractmethod
    async def find(self, user_id: str) -> Optional[AllowListEntry]:
        """
        Find an allow-list entry.

        Args:
            user_id: Allow-list identifier

        Returns:
            AllowListEntry or None if the ID was never provisioned
        """
        pass

    @abstractmethod
    async def add_eligible(self, user_ids: Iterable[str]) -> int:
        """
        Add provisioned IDs; existing entries are left untouched.

        Only the provisioning loader calls this.

        Args:
            user_ids: Identifiers to provision

        Returns:
            Number of new entries created
        """
        pass

    @abstractmethod
    async def find_consumed(self) -> List[AllowListEntry]:
        """
        Find all consumed entries.

        Returns:
            Consumed AllowListEntry entities, oldest consumption first
        """
        pass
