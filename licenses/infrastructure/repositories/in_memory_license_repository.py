"""
In-memory implementation of LicenseRepository port.

Used by tests and local tooling. The revision check and the write
happen under one lock, matching the atomicity of the database update.
"""
import asyncio
import uuid
from dataclasses import replace
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from core.domain.exceptions import DuplicateLicenseError
from licenses.domain.license import LicenseRecord
from licenses.domain.license_key import hash_license_key
from licenses.ports.license_repository import LicenseRepository


class InMemoryLicenseRepository(LicenseRepository):
    """Dictionary-backed LicenseRepository."""

    def __init__(self, records: Optional[List[LicenseRecord]] = None):
        self._records: Dict[uuid.UUID, LicenseRecord] = {}
        self._lock = asyncio.Lock()
        for record in records or []:
            self._records[record.id] = record

    def get(self, license_id: uuid.UUID) -> Optional[LicenseRecord]:
        """Synchronous read of the stored record, for assertions."""
        return self._records.get(license_id)

    async def create(self, record: LicenseRecord) -> LicenseRecord:
        async with self._lock:
            for existing in self._records.values():
                if existing.identifier == record.identifier:
                    raise DuplicateLicenseError(
                        f"A license already exists for identifier {record.identifier!r}"
                    )
                if existing.license_key.key_hash == record.license_key.key_hash:
                    raise DuplicateLicenseError("License key collision")
            self._records[record.id] = record
            return record

    async def find_by_key(self, raw_key: str) -> Optional[LicenseRecord]:
        found = None
        key_hash = hash_license_key(raw_key)
        for record in self._records.values():
            if record.license_key.key_hash == key_hash and record.license_key.verify_key(raw_key):
                found = record
                break
        # suspend after the read, as a store round-trip would
        await asyncio.sleep(0)
        return found

    async def find_by_identifier(self, identifier: str) -> Optional[LicenseRecord]:
        for record in self._records.values():
            if record.identifier == identifier:
                return record
        return None

    async def conditional_write(
        self,
        license_id: uuid.UUID,
        changes: Dict[str, Any],
        expected_revision: int,
    ) -> bool:
        async with self._lock:
            current = self._records.get(license_id)
            if current is None or current.revision != expected_revision:
                return False
            self._records[license_id] = replace(
                current,
                revision=current.revision + 1,
                updated_at=datetime.now(timezone.utc),
                **changes,
            )
            return True

    async def find_with_failures(self, blocked_only: bool = True) -> List[LicenseRecord]:
        now = datetime.now(timezone.utc)
        records = [
            record
            for record in self._records.values()
            if record.failure_count > 0 and (not blocked_only or record.is_blocked(now))
        ]
        return sorted(
            records,
            key=lambda record: record.blocked_until or datetime.min.replace(tzinfo=timezone.utc),
            reverse=True,
        )
