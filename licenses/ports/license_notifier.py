"""
License notifier port (interface).

Delivers a freshly issued license key to its owner. Delivery is
best-effort: the license record is the source of truth.
"""
from abc import ABC, abstractmethod


class LicenseNotifier(ABC):
    """Abstract delivery channel for issued license keys."""

    @abstractmethod
    def send_license(
        self,
        recipient_address: str,
        recipient_name: str,
        license_key: str,
        user_id: str,
    ) -> bool:
        """
        Deliver a license key.

        Args:
            recipient_address: Owner email address
            recipient_name: Owner display name
            license_key: Issued license key
            user_id: Allow-list identity the key was issued for

        Returns:
            True if the message was handed to the delivery backend
        """
        pass
