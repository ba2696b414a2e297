"""
Django management command to list locked-out licenses.
"""

from asgiref.sync import async_to_sync
from django.core.management.base import BaseCommand

from licenses.application.handlers.list_lockouts_handler import ListLockoutsHandler
from licenses.application.queries.list_lockouts import ListLockoutsQuery
from licenses.infrastructure.repositories.django_license_repository import DjangoLicenseRepository


class Command(BaseCommand):
    """Command to report lockouts."""

    help = "List licenses that are locked after IP mismatches"

    def add_arguments(self, parser):
        """Add command arguments."""
        parser.add_argument(
            "--all",
            action="store_true",
            help="Include licenses whose lockout has already ended",
        )

    def handle(self, *args, **options):
        """Execute the command."""
        handler = ListLockoutsHandler(license_repository=DjangoLicenseRepository())
        items = async_to_sync(handler.handle)(ListLockoutsQuery(include_inactive=options["all"]))

        if not items:
            self.stdout.write(self.style.SUCCESS("No locked licenses"))
            return

        self.stdout.write(f"Found {len(items)} license(s)")
        for item in items:
            until = item.blocked_until.isoformat() if item.blocked_until else "-"
            self.stdout.write(
                f"  - {item.identifier}: {item.failure_count} mismatch(es), "
                f"blocked until {until}, bound to {item.last_activation_ip or '-'}"
            )
            if item.last_failure:
                self.stdout.write(f"      last: {item.last_failure}")
