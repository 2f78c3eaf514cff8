"""
Django implementation of AllowListRepository port.

This adapter converts between domain entities and Django ORM models.
Consumption is a single conditional UPDATE, so the database decides
which of several concurrent requests wins.
"""
import logging
from typing import Iterable, List, Optional

from asgiref.sync import sync_to_async
from django.db import DatabaseError
from django.utils import timezone

from allowlist.domain.entry import AllowListEntry
from allowlist.infrastructure.models import AllowListEntry as AllowListEntryModel
from allowlist.ports.allowlist_repository import AllowListRepository
from core.domain.exceptions import StoreUnavailableError
from core.domain.value_objects import UserIdentity

logger = logging.getLogger(__name__)


class DjangoAllowListRepository(AllowListRepository):
    """
    Django ORM implementation of AllowListRepository.

    Database failures are raised as StoreUnavailableError.
    """

    def _to_domain(self, model: AllowListEntryModel) -> AllowListEntry:
        """
        Convert Django model to domain entity.

        Args:
            model: Django AllowListEntry model

        Returns:
            AllowListEntry domain entity
        """
        return AllowListEntry(
            user_identity=UserIdentity(model.user_id),
            consumed_at=model.consumed_at,
            created_at=model.created_at,
        )

    @sync_to_async
    def is_eligible(self, user_id: str) -> bool:
        """
        Check whether a user ID is provisioned and not yet consumed.

        Args:
            user_id: Allow-list identifier

        Returns:
            True if the ID may still be used
        """
        try:
            # pylint: disable=no-member
            return AllowListEntryModel.objects.filter(
                user_id=user_id, consumed_at__isnull=True
            ).exists()
        except DatabaseError as e:
            logger.error("Allow-list lookup failed: %s", e, exc_info=True)
            raise StoreUnavailableError() from e

    @sync_to_async
    def try_consume(self, user_id: str) -> bool:
        """
        Atomically mark a user ID as consumed.

        Args:
            user_id: Allow-list identifier

        Returns:
            True if exactly this call flipped the entry to consumed
        """
        try:
            # pylint: disable=no-member
            updated = AllowListEntryModel.objects.filter(
                user_id=user_id, consumed_at__isnull=True
            ).update(consumed_at=timezone.now())
        except DatabaseError as e:
            logger.error("Allow-list consumption failed: %s", e, exc_info=True)
            raise StoreUnavailableError() from e
        return updated == 1

    @sync_to_async
    def find(self, user_id: str) -> Optional[AllowListEntry]:
        """
        Find an allow-list entry.

        Args:
            user_id: Allow-list identifier

        Returns:
            AllowListEntry or None if not provisioned
        """
        try:
            model = AllowListEntryModel.objects.get(user_id=user_id)  # pylint: disable=no-member
            return self._to_domain(model)
        except AllowListEntryModel.DoesNotExist:  # pylint: disable=no-member
            return None
        except DatabaseError as e:
            logger.error("Allow-list lookup failed: %s", e, exc_info=True)
            raise StoreUnavailableError() from e

    @sync_to_async
    def add_eligible(self, user_ids: Iterable[str]) -> int:
        """
        Add provisioned IDs, ignoring ones that already exist.

        Args:
            user_ids: Identifiers to provision

        Returns:
            Number of new entries created
        """
        wanted = {UserIdentity(user_id).value for user_id in user_ids}
        if not wanted:
            return 0
        try:
            # pylint: disable=no-member
            existing = set(
                AllowListEntryModel.objects.filter(user_id__in=wanted).values_list(
                    "user_id", flat=True
                )
            )
            new_ids = sorted(wanted - existing)
            AllowListEntryModel.objects.bulk_create(
                [AllowListEntryModel(user_id=user_id) for user_id in new_ids],
                ignore_conflicts=True,
            )
        except DatabaseError as e:
            logger.error("Allow-list provisioning failed: %s", e, exc_info=True)
            raise StoreUnavailableError() from e
        return len(new_ids)

    @sync_to_async
    def find_consumed(self) -> List[AllowListEntry]:
        """
        Find all consumed entries.

        Returns:
            Consumed entries, oldest consumption first
        """
        try:
            models = list(
                AllowListEntryModel.objects.filter(  # pylint: disable=no-member
                    consumed_at__isnull=False
                ).order_by("consumed_at")
            )
        except DatabaseError as e:
            logger.error("Consumed allow-list lookup failed: %s", e, exc_info=True)
            raise StoreUnavailableError() from e
        return [self._to_domain(model) for model in models]
