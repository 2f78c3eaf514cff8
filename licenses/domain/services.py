"""
License domain services.

LicenseLifecycle drives the two state machines of the service: an
allow-list identity goes from eligible to consumed exactly once, and a
license goes from ASSIGNED to ACTIVATED exactly once. Every decision that
two concurrent requests could both make is delegated to a single atomic
store primitive.
"""
import logging
from typing import Optional, Tuple

from allowlist.ports.allowlist_repository import AllowListRepository
from core.domain.events import EventBus
from core.domain.exceptions import (
    EmailMismatchError,
    IdentityAlreadyConsumedError,
    IdentityIneligibleError,
    InputInvalidError,
    KeyCollisionError,
    LicenseNotFoundError,
    MachineMismatchError,
    StoreUnavailableError,
)
from core.domain.value_objects import (
    ActivationResult,
    Email,
    LicenseStatus,
    MachineId,
    UserIdentity,
)
from licenses.domain.events import LicenseActivated, LicenseIssued
from licenses.domain.license import License, OwnerInfo
from licenses.domain.license_key import LicenseKeyGenerator, is_well_formed, mask_license_key
from licenses.ports.license_repository import LicenseRepository

logger = logging.getLogger(__name__)


class LicenseLifecycle:
    """Domain service for issuing and activating licenses."""

    def __init__(
        self,
        allowlist_repository: AllowListRepository,
        license_repository: LicenseRepository,
        key_generator: Optional[LicenseKeyGenerator] = None,
        event_bus: Optional[EventBus] = None,
    ):
        """
        Args:
            allowlist_repository: Store deciding identity consumption
            license_repository: Store holding issued licenses
            key_generator: Key factory (default settings when omitted)
            event_bus: Receives LicenseIssued / LicenseActivated when given
        """
        self.allowlist_repository = allowlist_repository
        self.license_repository = license_repository
        self.key_generator = key_generator or LicenseKeyGenerator()
        self.event_bus = event_bus

    async def issue(self, user_id: str, owner: OwnerInfo) -> License:
        """
        Consume an allow-list identity and issue a license for it.

        Args:
            user_id: Allow-list identifier
            owner: Requester snapshot stored on the license

        Returns:
            The persisted License in ASSIGNED state

        Raises:
            InputInvalidError: If the user ID is malformed
            IdentityIneligibleError: If the ID is not on the allow-list
            IdentityAlreadyConsumedError: If the ID was already used
            StoreUnavailableError: If a store operation failed
        """
        identity = _parse(UserIdentity, user_id)

        entry = await self.allowlist_repository.find(identity.value)
        if entry is None:
            logger.info("Issue declined: user ID %s is not on the allow-list", identity)
            raise IdentityIneligibleError(f"User ID '{identity}' is not a valid ID.")
        if entry.is_consumed:
            logger.info("Issue declined: user ID %s already used", identity)
            raise IdentityAlreadyConsumedError(f"User ID '{identity}' has already been used.")

        if not await self.allowlist_repository.try_consume(identity.value):
            logger.warning("Issue declined: user ID %s lost consumption race", identity)
            raise IdentityAlreadyConsumedError(f"User ID '{identity}' has already been used.")

        try:
            license = await self._insert_new_license(identity, owner)
        except Exception:
            logger.error(
                "User ID %s was consumed but no license was stored; requires reconciliation",
                identity,
                exc_info=True,
            )
            raise

        logger.info(
            "Issued license %s for user ID %s",
            mask_license_key(license.license_key),
            identity,
        )
        await self._publish(
            LicenseIssued(
                license_key=license.license_key,
                user_id=identity.value,
                recipient_email=str(owner.email),
                recipient_name=license.owner_name,
                occurred_at=license.created_at,
            )
        )
        return license

    async def _insert_new_license(self, identity: UserIdentity, owner: OwnerInfo) -> License:
        """Generate keys until one is inserted or attempts run out."""
        attempts = self.key_generator.max_attempts
        for attempt in range(1, attempts + 1):
            try:
                return await self._try_insert(identity, owner)
            except KeyCollisionError:
                logger.warning(
                    "License key taken between check and insert (attempt %d/%d)",
                    attempt,
                    attempts,
                )
        raise StoreUnavailableError("Could not store a license with a unique key")

    async def _try_insert(self, identity: UserIdentity, owner: OwnerInfo) -> License:
        key = await self.key_generator.generate_unique(self.license_repository.exists_by_key)
        license = License.create(license_key=key, user_identity=identity, owner=owner)
        if not await self.license_repository.insert_if_absent(license):
            raise KeyCollisionError()
        return license

    async def activate(
        self, license_key: str, email: str, machine_id: str
    ) -> Tuple[ActivationResult, License]:
        """
        Bind a license to a machine, or confirm an existing binding.

        Args:
            license_key: Key presented by the client
            email: Address the license was issued to
            machine_id: Machine requesting activation

        Returns:
            Tuple of (ActivationResult, license as stored after the call)

        Raises:
            InputInvalidError: If email or machine ID is malformed
            LicenseNotFoundError: If the key is unknown
            EmailMismatchError: If the email does not own the license
            MachineMismatchError: If the license is bound to another machine
            StoreUnavailableError: If a store operation failed
        """
        key = (license_key or "").strip()
        _parse(Email, email)
        machine = _parse(MachineId, machine_id)

        if not is_well_formed(key):
            raise LicenseNotFoundError()

        license = await self.license_repository.find_by_key(key)
        if license is None:
            raise LicenseNotFoundError()

        if not license.owner_email.matches(email):
            logger.info("Activation declined: email mismatch for %s", mask_license_key(key))
            raise EmailMismatchError()

        if license.is_activated:
            return self._confirm_binding(license, machine.value), license

        activated = license.activate(machine.value)
        swapped = await self.license_repository.compare_and_swap_status(
            key, LicenseStatus.ASSIGNED, activated.activation_fields()
        )
        if swapped:
            logger.info("Activated license %s", mask_license_key(key))
            await self._publish(
                LicenseActivated(
                    license_key=key,
                    machine_id=machine.value,
                    occurred_at=activated.activated_at,
                )
            )
            return ActivationResult.ACTIVATED, activated

        # Another request activated the license first.
        current = await self.license_repository.find_by_key(key)
        if current is None or not current.is_activated:
            raise StoreUnavailableError("License changed during activation")
        return self._confirm_binding(current, machine.value), current

    def _confirm_binding(self, license: License, machine_id: str) -> ActivationResult:
        if license.is_bound_to(machine_id):
            return ActivationResult.ALREADY_ACTIVATED
        logger.warning(
            "Activation declined: %s is bound to another machine",
            mask_license_key(license.license_key),
        )
        raise MachineMismatchError()

    async def _publish(self, event) -> None:
        if self.event_bus is not None:
            await self.event_bus.publish(event)


def _parse(value_type, raw):
    """Build a value object, mapping validation failures to InputInvalidError."""
    try:
        return value_type(raw)
    except (TypeError, ValueError) as e:
        raise InputInvalidError(str(e)) from e
