"""
Django management command to load allow-listed user IDs.

Reads a JSON array of IDs and adds the new ones as eligible. Existing
entries keep their consumption state.
"""

from pathlib import Path

from asgiref.sync import async_to_sync
from django.conf import settings
from django.core.management.base import BaseCommand, CommandError

from allowlist.application.services.provisioning import provision_allowlist, read_user_ids
from allowlist.infrastructure.repositories.django_allowlist_repository import (
    DjangoAllowListRepository,
)
from core.domain.exceptions import DomainException


class Command(BaseCommand):
    """Command to load the allow-list."""

    help = "Load eligible user IDs from a JSON array file"

    def add_arguments(self, parser):
        """Add command arguments."""
        parser.add_argument(
            "source",
            nargs="?",
            default=None,
            help="JSON file of user IDs (default: ALLOWLIST_SOURCE_FILE)",
        )
        parser.add_argument(
            "--consumed",
            default=None,
            help="JSON file of user IDs that were already used (used-user-ids.json)",
        )

    def handle(self, *args, **options):
        """Execute the command."""
        source = Path(options["source"] or settings.ALLOWLIST_SOURCE_FILE)
        if not source.exists():
            raise CommandError(f"User ID file not found: {source}")

        consumed_path = options["consumed"]
        if consumed_path and not Path(consumed_path).exists():
            raise CommandError(f"Consumed user ID file not found: {consumed_path}")

        try:
            user_ids = read_user_ids(source)
            consumed_ids = read_user_ids(Path(consumed_path)) if consumed_path else []
            report = async_to_sync(provision_allowlist)(
                DjangoAllowListRepository(), user_ids, consumed_ids
            )
        except DomainException as e:
            raise CommandError(e.message) from e

        # pylint: disable=no-member
        self.stdout.write(
            self.style.SUCCESS(
                f"Loaded {report.received} user ID(s) from {source}: "
                f"{report.added} new, {report.marked_consumed} marked as used"
            )
        )
        if report.already_consumed:
            self.stdout.write(
                self.style.WARNING(
                    f"{len(report.already_consumed)} ID(s) were already marked as used"
                )
            )
