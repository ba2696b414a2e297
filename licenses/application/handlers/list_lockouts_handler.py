"""
ListLockoutsHandler.

Handler for the lockout report query.
"""

from typing import List

from licenses.application.dto.license_dto import LockoutReportItemDTO
from licenses.application.queries.list_lockouts import ListLockoutsQuery
from licenses.ports.license_repository import LicenseRepository


class ListLockoutsHandler:
    """Handler for ListLockoutsQuery."""

    def __init__(self, license_repository: LicenseRepository):
        """Initialize handler with repository."""
        self.license_repository = license_repository

    async def handle(self, query: ListLockoutsQuery) -> List[LockoutReportItemDTO]:
        """
        Handle list lockouts query.

        Args:
            query: ListLockoutsQuery

        Returns:
            One item per license with recorded mismatches
        """
        records = await self.license_repository.find_with_failures(
            blocked_only=not query.include_inactive
        )
        return [
            LockoutReportItemDTO(
                identifier=record.identifier,
                failure_count=record.failure_count,
                blocked_until=record.blocked_until,
                last_activation_ip=record.last_activation_ip,
                last_failure=record.failure_history.last,
            )
            for record in records
        ]
