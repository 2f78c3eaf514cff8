"""
License delivery by email.

Sends issued license keys through Django's mail framework; the backend
(SMTP in production, locmem in tests) comes from EMAIL_BACKEND.
"""
import logging
import smtplib

from django.conf import settings
from django.core.mail import send_mail
from django.utils.html import format_html

from licenses.domain.license_key import mask_license_key
from licenses.ports.license_notifier import LicenseNotifier

logger = logging.getLogger(__name__)

DEFAULT_SUBJECT = "Your License Key"


class LicenseDeliveryError(Exception):
    """Raised by the delivery task so Celery retries it."""

    pass


class DjangoMailLicenseNotifier(LicenseNotifier):
    """Email adapter for LicenseNotifier."""

    def __init__(self, from_email: str = None, subject: str = None):
        self.from_email = from_email or getattr(
            settings, "LICENSE_EMAIL_FROM", settings.DEFAULT_FROM_EMAIL
        )
        self.subject = subject or getattr(settings, "LICENSE_EMAIL_SUBJECT", DEFAULT_SUBJECT)

    @staticmethod
    def render_text(recipient_name: str, license_key: str, user_id: str) -> str:
        return (
            f"Hello {recipient_name},\n\n"
            f"Your User ID {user_id} has been validated. Here is your license key:\n\n"
            f"    {license_key}\n"
        )

    @staticmethod
    def render_html(recipient_name: str, license_key: str, user_id: str) -> str:
        return format_html(
            "<p>Hello {},</p>"
            "<p>Your User ID <strong>{}</strong> has been validated. "
            "Here is your license key:</p>"
            '<h2 style="text-align:center;">{}</h2>',
            recipient_name,
            user_id,
            license_key,
        )

    def send_license(
        self,
        recipient_address: str,
        recipient_name: str,
        license_key: str,
        user_id: str,
    ) -> bool:
        try:
            sent = send_mail(
                subject=self.subject,
                message=self.render_text(recipient_name, license_key, user_id),
                from_email=self.from_email,
                recipient_list=[recipient_address],
                html_message=self.render_html(recipient_name, license_key, user_id),
            )
        except (smtplib.SMTPException, OSError) as e:
            logger.warning(
                "License email for %s to %s failed: %s",
                mask_license_key(license_key),
                recipient_address,
                e,
            )
            return False

        if sent:
            logger.info(
                "License email for %s sent to %s",
                mask_license_key(license_key),
                recipient_address,
            )
        return bool(sent)
