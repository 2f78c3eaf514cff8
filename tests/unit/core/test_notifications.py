"""
Unit tests for license email delivery.
"""
import smtplib
from unittest import mock

import pytest

from core.infrastructure.event_handlers import LicenseNotificationHandler
from core.infrastructure.notifications import DjangoMailLicenseNotifier
from core.tasks import deliver_license_email_task
from licenses.domain.events import LicenseIssued


def issued_event():
    return LicenseIssued(
        license_key="ABCD-1234-EFGH",
        user_id="U100",
        recipient_email="ada@example.com",
        recipient_name="Ada",
    )


class TestDjangoMailLicenseNotifier:
    """Tests for DjangoMailLicenseNotifier."""

    def test_sends_key(self, mailoutbox):
        sent = DjangoMailLicenseNotifier().send_license(
            "ada@example.com", "Ada", "ABCD-1234-EFGH", "U100"
        )

        assert sent is True
        assert len(mailoutbox) == 1
        message = mailoutbox[0]
        assert message.to == ["ada@example.com"]
        assert message.subject == "Your License Key"
        assert "ABCD-1234-EFGH" in message.body
        html, mimetype = message.alternatives[0]
        assert mimetype == "text/html"
        assert "ABCD-1234-EFGH" in html

    def test_html_escapes_name(self):
        html = DjangoMailLicenseNotifier.render_html("<b>Ada</b>", "ABCD-1234-EFGH", "U100")
        assert "<b>Ada</b>" not in html
        assert "&lt;b&gt;Ada&lt;/b&gt;" in html

    def test_smtp_failure_returns_false(self):
        with mock.patch(
            "core.infrastructure.notifications.send_mail",
            side_effect=smtplib.SMTPException("down"),
        ):
            sent = DjangoMailLicenseNotifier().send_license(
                "ada@example.com", "Ada", "ABCD-1234-EFGH", "U100"
            )
        assert sent is False


class TestDeliverLicenseEmailTask:
    """Tests for the delivery task."""

    def test_task_delivers(self, mailoutbox):
        result = deliver_license_email_task.apply(
            args=("ada@example.com", "Ada", "ABCD-1234-EFGH", "U100")
        )

        assert result.successful()
        assert len(mailoutbox) == 1

    def test_task_retries_then_fails(self):
        with mock.patch.object(DjangoMailLicenseNotifier, "send_license", return_value=False) as send:
            result = deliver_license_email_task.apply(
                args=("ada@example.com", "Ada", "ABCD-1234-EFGH", "U100")
            )

        assert result.failed()
        assert send.call_count == deliver_license_email_task.max_retries + 1


class TestLicenseNotificationHandler:
    """Tests for LicenseNotificationHandler."""

    @pytest.mark.asyncio
    async def test_queues_delivery(self, mailoutbox):
        await LicenseNotificationHandler().handle(issued_event())

        assert len(mailoutbox) == 1
        assert mailoutbox[0].to == ["ada@example.com"]

    @pytest.mark.asyncio
    async def test_skipped_when_email_disabled(self, mailoutbox, settings):
        settings.LICENSE_EMAIL_ENABLED = False
        await LicenseNotificationHandler().handle(issued_event())

        assert mailoutbox == []
