"""
License repository port (interface).

This defines the contract for license record persistence operations.
Implementations are in the infrastructure layer.
"""
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional
import uuid

from licenses.domain.license import LicenseRecord


class LicenseRepository(ABC):
    """
    Abstract repository for LicenseRecord entities.

    This is a port in hexagonal architecture - it defines
    what operations are available, not how they're implemented.
    """

    @abstractmethod
    async def create(self, record: LicenseRecord) -> LicenseRecord:
        """
        Persist a newly issued license record.

        Args:
            record: LicenseRecord entity to insert

        Returns:
            Saved license record

        Raises:
            DuplicateLicenseError: If the identifier is already taken
        """
        pass

    @abstractmethod
    async def find_by_key(self, raw_key: str) -> Optional[LicenseRecord]:
        """
        Find a license record by its raw license key.

        Args:
            raw_key: License key presented by the client

        Returns:
            LicenseRecord entity (with its current revision) or None
        """
        pass

    @abstractmethod
    async def find_by_identifier(self, identifier: str) -> Optional[LicenseRecord]:
        """
        Find a license record by its target identifier.

        Args:
            identifier: Identifier the license was issued to

        Returns:
            LicenseRecord entity or None if not found
        """
        pass

    @abstractmethod
    async def conditional_write(
        self,
        license_id: uuid.UUID,
        changes: Dict[str, Any],
        expected_revision: int,
    ) -> bool:
        """
        Write changed fields only if the stored revision is unchanged.

        On success the stored revision becomes expected_revision + 1.

        Args:
            license_id: License UUID
            changes: Mutated fields keyed by LicenseRecord attribute name
            expected_revision: Revision the changes were computed from

        Returns:
            True if committed, False on conflict
        """
        pass

    @abstractmethod
    async def find_with_failures(self, blocked_only: bool = True) -> List[LicenseRecord]:
        """
        List license records that recorded IP mismatches.

        Args:
            blocked_only: Only return records whose lockout is in force

        Returns:
            List of LicenseRecord entities
        """
        pass
