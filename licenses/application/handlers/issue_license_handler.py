"""
IssueLicenseHandler.

Handles the issue license command.
"""

from django.conf import settings

from allowlist.ports.allowlist_repository import AllowListRepository
from core.domain.events import EventBus
from core.domain.exceptions import DomainException, InputInvalidError
from core.domain.value_objects import Email
from core.infrastructure.events import event_bus as default_event_bus
from core.metrics import license_issue_rejections_total, licenses_issued_total
from licenses.application.commands.issue_license import IssueLicenseCommand
from licenses.application.dto.license_dto import IssueLicenseResponseDTO
from licenses.domain.license import OwnerInfo
from licenses.domain.license_key import DEFAULT_MAX_ATTEMPTS, LicenseKeyGenerator
from licenses.domain.services import LicenseLifecycle
from licenses.ports.license_repository import LicenseRepository


class IssueLicenseHandler:
    """Handler for IssueLicenseCommand."""

    def __init__(
        self,
        allowlist_repository: AllowListRepository,
        license_repository: LicenseRepository,
        key_generator: LicenseKeyGenerator = None,
        event_bus: EventBus = None,
    ):
        """Initialize handler with repositories."""
        if key_generator is None:
            key_generator = LicenseKeyGenerator(
                max_attempts=getattr(settings, "LICENSE_KEY_MAX_ATTEMPTS", DEFAULT_MAX_ATTEMPTS)
            )
        self.lifecycle = LicenseLifecycle(
            allowlist_repository=allowlist_repository,
            license_repository=license_repository,
            key_generator=key_generator,
            event_bus=event_bus or default_event_bus,
        )

    async def handle(self, command: IssueLicenseCommand) -> IssueLicenseResponseDTO:
        """
        Handle issue license command.

        Args:
            command: IssueLicenseCommand

        Returns:
            IssueLicenseResponseDTO with the new key

        Raises:
            InputInvalidError: If owner details are malformed
            IdentityIneligibleError: If the user ID is not allow-listed
            IdentityAlreadyConsumedError: If the user ID was already used
            StoreUnavailableError: If storage failed
        """
        try:
            try:
                owner = OwnerInfo(
                    email=Email(command.email),
                    name=command.name,
                    phone=command.phone_number,
                )
            except (TypeError, ValueError) as e:
                raise InputInvalidError(str(e)) from e

            license = await self.lifecycle.issue(command.user_id, owner)
        except DomainException as e:
            license_issue_rejections_total.labels(reason=e.code).inc()
            raise

        licenses_issued_total.inc()

        return IssueLicenseResponseDTO(
            license_key=license.license_key,
            user_id=str(license.user_identity),
            email=str(license.owner_email),
            created_at=license.created_at,
        )
