"""
Event handlers for domain events.

These handlers process domain events for side effects like audit
logging, license delivery and cache invalidation. They run after the
store write has committed and cannot undo it.
"""

import logging

from asgiref.sync import sync_to_async
from django.conf import settings

from core.domain.events import DomainEvent, EventHandler
from licenses.domain.events import LicenseActivated, LicenseIssued
from licenses.domain.license_key import mask_license_key

logger = logging.getLogger(__name__)


class AuditLogEventHandler(EventHandler):
    """Logs every domain event to the audit logger."""

    async def handle(self, event: DomainEvent) -> None:
        """
        Handle domain event for audit logging.

        Args:
            event: Domain event to log
        """
        record = event.to_dict()
        logger.info(
            "Audit log: %s - %s",
            event.event_type,
            record["data"].get("license_key", event.aggregate_id),
            extra={
                "event_id": record["event_id"],
                "event_type": record["event_type"],
                "occurred_at": record["occurred_at"],
                "event_data": record["data"],
            },
        )


class LicenseNotificationHandler(EventHandler):
    """
    Queues delivery of a newly issued license key.

    With LICENSE_EMAIL_ENABLED off, nothing is sent and the key is
    returned in the issue response instead.
    """

    async def handle(self, event: DomainEvent) -> None:
        if not isinstance(event, LicenseIssued):
            return

        if not getattr(settings, "LICENSE_EMAIL_ENABLED", False):
            logger.warning(
                "Email is not configured; license %s was not delivered by email",
                mask_license_key(event.license_key),
            )
            return

        from core.tasks import deliver_license_email_task

        await sync_to_async(deliver_license_email_task.delay)(
            event.recipient_email,
            event.recipient_name,
            event.license_key,
            event.user_id,
        )
        logger.info("Queued license email for %s", mask_license_key(event.license_key))


class LicenseCacheInvalidationHandler(EventHandler):
    """Drops the cached status of a license whose state changed."""

    async def handle(self, event: DomainEvent) -> None:
        """
        Handle domain event for cache invalidation.

        Args:
            event: Domain event
        """
        from licenses.application.services.license_cache_service import LicenseCacheService

        license_key = getattr(event, "license_key", None)
        if not license_key:
            logger.warning(
                "No license key on %s, cache not invalidated", event.event_type
            )
            return
        await LicenseCacheService.invalidate_license_status(license_key)


def register_event_handlers(bus=None):
    """Register all event handlers with the event bus."""
    if bus is None:
        from core.infrastructure.events import event_bus as bus

    audit_handler = AuditLogEventHandler()

    bus.subscribe(LicenseIssued, audit_handler)
    bus.subscribe(LicenseActivated, audit_handler)
    bus.subscribe(LicenseIssued, LicenseNotificationHandler())
    bus.subscribe(LicenseActivated, LicenseCacheInvalidationHandler())

    logger.info("Event handlers registered")
