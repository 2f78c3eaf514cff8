"""
Django implementation of LicenseRepository port.

This adapter converts between domain entities and Django ORM models.
Uniqueness and the status transition are enforced by the database:
a unique index on license_key and a conditional UPDATE on status.
"""
import logging
from typing import Any, Dict, Optional

from asgiref.sync import sync_to_async
from django.db import DatabaseError, IntegrityError, transaction
from django.utils import timezone

from core.domain.exceptions import IdentityAlreadyConsumedError, StoreUnavailableError
from core.domain.value_objects import Email, LicenseStatus, UserIdentity
from licenses.domain.license import License
from licenses.domain.license_key import mask_license_key
from licenses.infrastructure.models import License as LicenseModel
from licenses.ports.license_repository import LicenseRepository

logger = logging.getLogger(__name__)


class DjangoLicenseRepository(LicenseRepository):
    """
    Django ORM implementation of LicenseRepository.

    This adapter:
    1. Converts Django models to domain entities
    2. Maps unique-key conflicts to insert_if_absent() == False
    3. Raises StoreUnavailableError for other database failures
    """

    def _to_domain(self, model: LicenseModel) -> License:
        """
        Convert Django model to domain entity.

        Args:
            model: Django License model

        Returns:
            License domain entity
        """
        return License(
            license_key=model.license_key,
            owner_email=Email(model.owner_email),
            owner_name=model.owner_name,
            owner_phone=model.owner_phone,
            user_identity=UserIdentity(model.user_identity),
            status=LicenseStatus(model.status),
            bound_machine_id=model.bound_machine_id,
            activated_at=model.activated_at,
            created_at=model.created_at,
        )

    def _to_model(self, license: License) -> LicenseModel:
        """
        Convert domain entity to an unsaved Django model.

        Args:
            license: License domain entity

        Returns:
            Django License model
        """
        return LicenseModel(
            license_key=license.license_key,
            owner_email=str(license.owner_email),
            owner_name=license.owner_name,
            owner_phone=license.owner_phone,
            user_identity=str(license.user_identity),
            status=license.status.value,
            bound_machine_id=license.bound_machine_id,
            activated_at=license.activated_at,
            created_at=license.created_at,
        )

    @sync_to_async
    def insert_if_absent(self, license: License) -> bool:
        """
        Insert a license unless its key already exists.

        Args:
            license: License entity to insert

        Returns:
            True if inserted, False on a key conflict

        Raises:
            IdentityAlreadyConsumedError: If the identity already has a license
            StoreUnavailableError: On other database failures
        """
        model = self._to_model(license)
        try:
            with transaction.atomic():
                model.save(force_insert=True)
            return True
        except IntegrityError as e:
            # pylint: disable=no-member
            if LicenseModel.objects.filter(license_key=license.license_key).exists():
                logger.warning(
                    "License key %s already exists, not inserted",
                    mask_license_key(license.license_key),
                )
                return False
            if LicenseModel.objects.filter(user_identity=str(license.user_identity)).exists():
                raise IdentityAlreadyConsumedError(
                    f"User ID '{license.user_identity}' already has a license"
                )
            logger.error("License insert violated a constraint: %s", e, exc_info=True)
            raise StoreUnavailableError() from e
        except DatabaseError as e:
            logger.error("License insert failed: %s", e, exc_info=True)
            raise StoreUnavailableError() from e

    @sync_to_async
    def find_by_key(self, license_key: str) -> Optional[License]:
        """
        Find a license by key string.

        Args:
            license_key: License key string

        Returns:
            License entity or None if not found
        """
        try:
            model = LicenseModel.objects.get(license_key=license_key)  # pylint: disable=no-member
            return self._to_domain(model)
        except LicenseModel.DoesNotExist:  # pylint: disable=no-member
            return None
        except DatabaseError as e:
            logger.error("License lookup failed: %s", e, exc_info=True)
            raise StoreUnavailableError() from e

    @sync_to_async
    def find_by_user_identity(self, user_id: str) -> Optional[License]:
        """
        Find the license issued for an allow-list identity.

        Args:
            user_id: Allow-list identifier

        Returns:
            License entity or None if not found
        """
        try:
            model = LicenseModel.objects.get(user_identity=user_id)  # pylint: disable=no-member
            return self._to_domain(model)
        except LicenseModel.DoesNotExist:  # pylint: disable=no-member
            return None
        except DatabaseError as e:
            logger.error("License lookup failed: %s", e, exc_info=True)
            raise StoreUnavailableError() from e

    @sync_to_async
    def exists_by_key(self, license_key: str) -> bool:
        """
        Check if a license key is taken.

        Args:
            license_key: License key string

        Returns:
            True if a license with this key exists
        """
        try:
            return LicenseModel.objects.filter(  # pylint: disable=no-member
                license_key=license_key
            ).exists()
        except DatabaseError as e:
            logger.error("License key check failed: %s", e, exc_info=True)
            raise StoreUnavailableError() from e

    @sync_to_async
    def compare_and_swap_status(
        self,
        license_key: str,
        expected_status: LicenseStatus,
        new_fields: Dict[str, Any],
    ) -> bool:
        """
        Update a license only if its status still matches.

        Args:
            license_key: License key string
            expected_status: Status the row must have at update time
            new_fields: Fields to write

        Returns:
            True if exactly one row was updated
        """
        values = {
            name: value.value if isinstance(value, LicenseStatus) else value
            for name, value in new_fields.items()
        }
        values["updated_at"] = timezone.now()
        try:
            updated = LicenseModel.objects.filter(  # pylint: disable=no-member
                license_key=license_key, status=expected_status.value
            ).update(**values)
        except DatabaseError as e:
            logger.error("License status update failed: %s", e, exc_info=True)
            raise StoreUnavailableError() from e
        return updated == 1
