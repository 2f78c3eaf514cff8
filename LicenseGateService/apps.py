"""
App configuration for License Gate Service.
"""

import logging
import sys

from django.apps import AppConfig

logger = logging.getLogger(__name__)

SKIP_SETUP_COMMANDS = ("migrate", "makemigrations", "collectstatic")


class LicenseGateServiceConfig(AppConfig):
    """App configuration for LicenseGateService."""

    name = "LicenseGateService"
    verbose_name = "License Gate Service"

    def ready(self):
        """Called when Django starts."""
        if len(sys.argv) > 1 and sys.argv[1] in SKIP_SETUP_COMMANDS:
            return

        from core.infrastructure.event_handlers import register_event_handlers
        from core.instrumentation import setup_opentelemetry

        setup_opentelemetry()
        # Subscriptions are idempotent, so a second ready() is harmless.
        register_event_handlers()
        logger.debug("License Gate Service ready")
