"""
IssueLicenseHandler.

Handles the issue license command. Issuance only writes the initial
record; all later state changes go through verification.
"""

import logging
from datetime import datetime
from typing import Callable, Optional

from dateutil.relativedelta import relativedelta
from django.utils import timezone

from core.domain.events import EventBus
from core.domain.exceptions import DomainException, DuplicateLicenseError
from core.metrics import licenses_issued_total
from licenses.application import config
from licenses.application.commands.issue_license import IssueLicenseCommand
from licenses.application.dto.license_dto import IssuedLicenseDTO
from licenses.domain.events import LicenseIssued
from licenses.domain.license import LicenseRecord
from licenses.ports.license_repository import LicenseRepository

logger = logging.getLogger(__name__)


class IssueLicenseHandler:
    """Handler for IssueLicenseCommand."""

    def __init__(
        self,
        license_repository: LicenseRepository,
        clock: Callable[[], datetime] = timezone.now,
        event_bus: Optional[EventBus] = None,
    ):
        """Initialize handler with repository."""
        if event_bus is None:
            from core.infrastructure.events import event_bus as default_bus

            event_bus = default_bus

        self.license_repository = license_repository
        self.clock = clock
        self.event_bus = event_bus

    async def handle(self, command: IssueLicenseCommand) -> IssuedLicenseDTO:
        """
        Handle issue license command.

        Args:
            command: IssueLicenseCommand

        Returns:
            IssuedLicenseDTO with the generated license key

        Raises:
            DomainException: If the issuance period is not positive
            DuplicateLicenseError: If the identifier already has a license
        """
        if command.months < 1:
            raise DomainException(
                "Issuance period must be at least one month", code="INVALID_PERIOD"
            )

        identifier = command.identifier.strip()
        if await self.license_repository.find_by_identifier(identifier):
            raise DuplicateLicenseError(
                f"A license already exists for identifier {identifier!r}"
            )

        expires_at = self.clock() + relativedelta(months=command.months)
        record = LicenseRecord.create(
            identifier=identifier,
            expires_at=expires_at,
            allowed_software=command.software,
            owner_email=command.owner_email,
            key_prefix=config.get_setting("KEY_PREFIX"),
        )
        saved = await self.license_repository.create(record)

        licenses_issued_total.inc()
        logger.info(
            "License issued to %s, expires %s",
            saved.identifier,
            saved.expires_at.isoformat(),
            extra={"license_id": str(saved.id)},
        )
        await self.event_bus.publish(
            LicenseIssued(
                license_id=saved.id,
                identifier=saved.identifier,
                expires_at=saved.expires_at,
            )
        )

        return IssuedLicenseDTO(
            id=saved.id,
            license_key=saved.license_key.key,
            identifier=saved.identifier,
            expires_at=saved.expires_at,
            software=saved.allowed_software.to_list(),
        )
