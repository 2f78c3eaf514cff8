"""
License domain events.

Domain events represent something that happened in the license domain.
"""

import uuid
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from core.domain.events import DomainEvent
from licenses.domain.license_key import mask_license_key


class LicenseIssued(DomainEvent):
    """Event raised when a license has been durably issued."""

    def __init__(
        self,
        license_key: str,
        user_id: str,
        recipient_email: str,
        recipient_name: str,
        occurred_at: Optional[datetime] = None,
    ):
        """
        Initialize LicenseIssued event.

        Args:
            license_key: Issued license key
            user_id: Consumed allow-list identity
            recipient_email: Address the key is delivered to
            recipient_name: Name used in the delivery message
            occurred_at: When the event occurred
        """
        super().__init__(
            event_id=uuid.uuid4(),
            occurred_at=occurred_at or datetime.now(timezone.utc),
            aggregate_id=license_key,
            event_type="LicenseIssued",
        )
        self.license_key = license_key
        self.user_id = user_id
        self.recipient_email = recipient_email
        self.recipient_name = recipient_name

    def payload(self) -> Dict[str, Any]:
        return {
            "license_key": mask_license_key(self.license_key),
            "user_id": self.user_id,
        }


class LicenseActivated(DomainEvent):
    """Event raised when a license is bound to a machine."""

    def __init__(
        self,
        license_key: str,
        machine_id: str,
        occurred_at: Optional[datetime] = None,
    ):
        """
        Initialize LicenseActivated event.

        Args:
            license_key: Activated license key
            machine_id: Machine the license is now bound to
            occurred_at: When the event occurred
        """
        super().__init__(
            event_id=uuid.uuid4(),
            occurred_at=occurred_at or datetime.now(timezone.utc),
            aggregate_id=license_key,
            event_type="LicenseActivated",
        )
        self.license_key = license_key
        self.machine_id = machine_id

    def payload(self) -> Dict[str, Any]:
        return {
            "license_key": mask_license_key(self.license_key),
            "machine_id": self.machine_id,
        }
