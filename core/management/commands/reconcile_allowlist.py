"""
Django management command to report consumed user IDs without a license.

Such IDs come from an issuance that failed after the ID was consumed.
The command only reports them; fixing is an operator decision.
"""

from asgiref.sync import async_to_sync

from django.core.management.base import BaseCommand

from allowlist.application.services.provisioning import find_unlicensed_consumptions
from allowlist.infrastructure.repositories.django_allowlist_repository import (
    DjangoAllowListRepository,
)
from licenses.infrastructure.repositories.django_license_repository import DjangoLicenseRepository


class Command(BaseCommand):
    """Command to list consumed user IDs that have no license."""

    help = "List consumed user IDs that have no license record"

    def add_arguments(self, parser):
        """Add command arguments."""
        parser.add_argument(
            "--fail-on-orphans",
            action="store_true",
            help="Exit with status 1 when orphaned IDs are found",
        )

    def handle(self, *args, **options):
        """Execute the command."""
        orphans = async_to_sync(find_unlicensed_consumptions)(
            DjangoAllowListRepository(), DjangoLicenseRepository()
        )

        if not orphans:
            # pylint: disable=no-member
            self.stdout.write(self.style.SUCCESS("Every consumed user ID has a license"))
            return

        # pylint: disable=no-member
        self.stdout.write(
            self.style.WARNING(f"Found {len(orphans)} consumed user ID(s) without a license:")
        )
        for entry in orphans:
            self.stdout.write(f"  - {entry.user_identity} (consumed at {entry.consumed_at})")

        if options["fail_on_orphans"]:
            raise SystemExit(1)
