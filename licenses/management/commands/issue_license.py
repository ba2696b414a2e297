"""
Django management command to issue a license from the shell.
"""

from asgiref.sync import async_to_sync
from django.core.management.base import BaseCommand, CommandError

from core.domain.exceptions import DomainException
from licenses.application.commands.issue_license import IssueLicenseCommand
from licenses.application.handlers.issue_license_handler import IssueLicenseHandler
from licenses.infrastructure.repositories.django_license_repository import DjangoLicenseRepository


class Command(BaseCommand):
    """Command to issue a license."""

    help = "Issue a license key to an identifier"

    def add_arguments(self, parser):
        """Add command arguments."""
        parser.add_argument("identifier", help="Customer or machine the license is issued to")
        parser.add_argument(
            "--months",
            type=int,
            required=True,
            help="Issuance period in calendar months",
        )
        parser.add_argument(
            "--software",
            action="append",
            default=[],
            help="Entitled software identifier (repeatable)",
        )
        parser.add_argument("--owner-email", default=None, help="Recipient of lockout reports")

    def handle(self, *args, **options):
        """Execute the command."""
        handler = IssueLicenseHandler(license_repository=DjangoLicenseRepository())
        command = IssueLicenseCommand(
            identifier=options["identifier"],
            months=options["months"],
            software=options["software"],
            owner_email=options["owner_email"],
        )
        try:
            result = async_to_sync(handler.handle)(command)
        except (DomainException, ValueError) as e:
            raise CommandError(str(e)) from e

        self.stdout.write(self.style.SUCCESS(f"Issued license for {result.identifier}"))
        self.stdout.write(f"  key:      {result.license_key}")
        self.stdout.write(f"  expires:  {result.expires_at.isoformat()}")
        if result.software:
            self.stdout.write(f"  software: {', '.join(result.software)}")
