"""
License domain entity.

This is the core domain entity representing an issued license.
It contains business logic and is independent of infrastructure.
"""
from dataclasses import dataclass, replace
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from core.domain.value_objects import Email, LicenseStatus, MachineId, UserIdentity
from licenses.domain.license_key import is_well_formed


@dataclass(frozen=True)
class OwnerInfo:
    """Snapshot of the requester taken at issuance time."""

    email: Email
    name: str
    phone: str

    def __post_init__(self):
        if not self.name or not self.name.strip():
            raise ValueError("Owner name is required")
        if not self.phone or not self.phone.strip():
            raise ValueError("Owner phone is required")


@dataclass(frozen=True)
class License:
    """
    License domain entity.

    A license is issued for exactly one allow-listed user identity and
    can be bound to exactly one machine. Status only ever moves from
    ASSIGNED to ACTIVATED.
    """

    license_key: str
    owner_email: Email
    owner_name: str
    owner_phone: str
    user_identity: UserIdentity
    status: LicenseStatus
    bound_machine_id: Optional[str]
    activated_at: Optional[datetime]
    created_at: datetime

    def __post_init__(self):
        """Validate license entity."""
        if not is_well_formed(self.license_key):
            raise ValueError(f"Malformed license key: {self.license_key!r}")
        if self.status == LicenseStatus.ACTIVATED:
            if not self.bound_machine_id or self.activated_at is None:
                raise ValueError("An activated license must be bound to a machine")
        elif self.bound_machine_id is not None or self.activated_at is not None:
            raise ValueError("An assigned license cannot be bound to a machine")

    @classmethod
    def create(
        cls,
        license_key: str,
        user_identity: UserIdentity,
        owner: OwnerInfo,
        created_at: Optional[datetime] = None,
    ) -> "License":
        """
        Create a freshly issued, unbound license.

        Args:
            license_key: Generated license key
            user_identity: Consumed allow-list identity
            owner: Requester snapshot
            created_at: Issuance time (defaults to now)

        Returns:
            License entity in ASSIGNED state
        """
        return cls(
            license_key=license_key,
            owner_email=owner.email,
            owner_name=owner.name.strip(),
            owner_phone=owner.phone.strip(),
            user_identity=user_identity,
            status=LicenseStatus.ASSIGNED,
            bound_machine_id=None,
            activated_at=None,
            created_at=created_at or datetime.now(timezone.utc),
        )

    @property
    def is_activated(self) -> bool:
        return self.status == LicenseStatus.ACTIVATED

    def is_bound_to(self, machine_id: str) -> bool:
        """True if the license is bound to this machine."""
        return self.is_activated and self.bound_machine_id == machine_id

    def activate(self, machine_id: str, activated_at: Optional[datetime] = None) -> "License":
        """
        Create a new License instance bound to a machine.

        Args:
            machine_id: Machine to bind to
            activated_at: Activation time (defaults to now)

        Returns:
            New License instance in ACTIVATED state

        Raises:
            ValueError: If the license is already activated
        """
        if self.is_activated:
            raise ValueError("License is already activated")

        return replace(
            self,
            status=LicenseStatus.ACTIVATED,
            bound_machine_id=MachineId(machine_id).value,
            activated_at=activated_at or datetime.now(timezone.utc),
        )

    def activation_fields(self) -> Dict[str, Any]:
        """Fields written by the ASSIGNED -> ACTIVATED compare-and-swap."""
        return {
            "status": self.status,
            "bound_machine_id": self.bound_machine_id,
            "activated_at": self.activated_at,
        }
