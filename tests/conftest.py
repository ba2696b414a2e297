"""
Pytest configuration and shared fixtures.
"""

from datetime import datetime, timedelta, timezone
from typing import List, Optional

import pytest
from asgiref.sync import async_to_sync

from core.infrastructure.events import InMemoryEventBus
from licenses.domain.license import LicenseRecord
from licenses.infrastructure.repositories.django_license_repository import DjangoLicenseRepository
from licenses.infrastructure.repositories.in_memory_license_repository import (
    InMemoryLicenseRepository,
)
from licenses.ports.notifier import LockoutNotifier

NOW = datetime(2026, 3, 10, 12, 0, tzinfo=timezone.utc)


class RecordingNotifier(LockoutNotifier):
    """Notifier that records its calls and can be told to fail."""

    def __init__(self, error: Optional[Exception] = None):
        self.calls: List[tuple] = []
        self.error = error

    async def notify(self, record, request_ip, software):
        self.calls.append((record, request_ip, software))
        if self.error:
            raise self.error


def build_record(
    identifier: str = "acme-workstation-1",
    expires_at: Optional[datetime] = None,
    software=("editor", "renderer"),
    last_ip: Optional[str] = "1.1.1.1",
    hours_since_activation: float = 1,
    now: datetime = NOW,
    **changes,
) -> LicenseRecord:
    """Build a license record bound to last_ip some hours before now."""
    record = LicenseRecord.create(
        identifier=identifier,
        expires_at=expires_at or now + timedelta(days=365),
        allowed_software=software,
    )
    return record.with_changes(
        last_activation_ip=last_ip,
        last_activation_at=now - timedelta(hours=hours_since_activation),
        **changes,
    )


@pytest.fixture
def now():
    """Fixed evaluation time."""
    return NOW


@pytest.fixture
def make_record():
    """Factory fixture for LicenseRecord entities."""
    return build_record


@pytest.fixture
def notifier():
    """Fixture for a recording notifier."""
    return RecordingNotifier()


@pytest.fixture
def event_bus():
    """Fixture for an isolated event bus."""
    return InMemoryEventBus()


@pytest.fixture
def in_memory_repository():
    """Fixture for InMemoryLicenseRepository."""
    return InMemoryLicenseRepository()


@pytest.fixture
def license_repository():
    """Fixture for DjangoLicenseRepository."""
    return DjangoLicenseRepository()


@pytest.fixture
def db_record(db, license_repository):
    """Fixture for a LicenseRecord saved in database, bound to 1.1.1.1 an hour ago."""
    from django.utils import timezone as dj_timezone

    record = build_record(identifier="db-workstation", now=dj_timezone.now())
    return async_to_sync(license_repository.create)(record)


@pytest.fixture
def api_client():
    """Fixture for DRF API client."""
    from rest_framework.test import APIClient

    return APIClient()


@pytest.fixture
def admin_client(api_client, settings):
    """Fixture for an API client carrying the admin secret."""
    api_client.credentials(HTTP_X_ADMIN_SECRET=settings.LICENSE_ADMIN_SECRET)
    return api_client
