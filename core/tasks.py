"""
Celery tasks for background processing.

Tasks for license key delivery.
"""
import logging

from LicenseGateService.celery import app

from core.infrastructure.notifications import DjangoMailLicenseNotifier, LicenseDeliveryError
from licenses.domain.license_key import mask_license_key

logger = logging.getLogger(__name__)


@app.task(bind=True, max_retries=3)
def deliver_license_email_task(
    self, recipient_address: str, recipient_name: str, license_key: str, user_id: str
):
    """
    Celery task for license email delivery.

    Retries with exponential backoff. A failed delivery never touches the
    license record or the allow-list.

    Args:
        recipient_address: Owner email address
        recipient_name: Owner display name
        license_key: Issued license key
        user_id: Allow-list identity the key was issued for
    """
    notifier = DjangoMailLicenseNotifier()
    if notifier.send_license(recipient_address, recipient_name, license_key, user_id):
        return True

    logger.error(
        "License email delivery failed for %s (attempt %d/%d)",
        mask_license_key(license_key),
        self.request.retries + 1,
        self.max_retries + 1,
    )
    raise self.retry(
        exc=LicenseDeliveryError(f"Could not deliver license {mask_license_key(license_key)}"),
        countdown=2 ** self.request.retries,
    )
