"""
ActivateLicenseHandler.

Handles the activate license command.
"""

from core.domain.events import EventBus
from core.domain.exceptions import DomainException
from core.domain.value_objects import ActivationResult
from core.infrastructure.events import event_bus as default_event_bus
from core.metrics import license_activation_rejections_total, licenses_activated_total
from licenses.application.commands.activate_license import ActivateLicenseCommand
from licenses.application.dto.license_dto import ActivateLicenseResponseDTO
from licenses.domain.services import LicenseLifecycle
from licenses.ports.license_repository import LicenseRepository


class ActivateLicenseHandler:
    """Handler for ActivateLicenseCommand."""

    def __init__(self, license_repository: LicenseRepository, event_bus: EventBus = None):
        """Initialize handler with repository."""
        # Activation never touches the allow-list.
        self.lifecycle = LicenseLifecycle(
            allowlist_repository=None,
            license_repository=license_repository,
            event_bus=event_bus or default_event_bus,
        )

    async def handle(self, command: ActivateLicenseCommand) -> ActivateLicenseResponseDTO:
        """
        Handle activate license command.

        Args:
            command: ActivateLicenseCommand

        Returns:
            ActivateLicenseResponseDTO with the activation outcome

        Raises:
            LicenseNotFoundError: If the key is unknown
            EmailMismatchError: If the email does not own the key
            MachineMismatchError: If the key is bound to another machine
        """
        try:
            result, license = await self.lifecycle.activate(
                command.license_key, command.email, command.machine_id
            )
        except DomainException as e:
            license_activation_rejections_total.labels(reason=e.code).inc()
            raise

        if result == ActivationResult.ACTIVATED:
            licenses_activated_total.inc()

        return ActivateLicenseResponseDTO(
            result=result,
            license_key=license.license_key,
            machine_id=license.bound_machine_id,
            activated_at=license.activated_at,
        )
