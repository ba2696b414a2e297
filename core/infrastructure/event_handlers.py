"""
Event handlers for domain events.

These handlers process committed domain events for side effects
outside the verification decision path.
"""

import logging

from asgiref.sync import sync_to_async

from core.domain.events import DomainEvent, EventHandler
from licenses.domain.events import LicenseIssued, LicenseLockedOut, LicenseRebound

logger = logging.getLogger(__name__)

LICENSE_EVENTS = (LicenseIssued, LicenseLockedOut, LicenseRebound)


class AuditLogEventHandler(EventHandler):
    """
    Event handler for audit logging.

    Logs every license event and writes it to the AuditLog table.
    """

    async def handle(self, event: DomainEvent) -> None:
        """
        Handle domain event for audit logging.

        Args:
            event: Domain event to log
        """
        logger.info(
            "Audit log: %s - %s",
            event.event_type,
            event.license_id,
            extra={
                "event_id": str(event.event_id),
                "event_type": event.event_type,
                "license_id": str(event.license_id),
                "occurred_at": event.occurred_at.isoformat(),
            },
        )
        await self._write(event)

    @sync_to_async
    def _write(self, event: DomainEvent) -> None:
        from licenses.infrastructure.models import AuditLog

        AuditLog.objects.create(
            event_id=event.event_id,
            entity_id=event.license_id,
            action=event.event_type,
            changes=event.payload(),
            occurred_at=event.occurred_at,
        )


def register_event_handlers():
    """Register all event handlers with the event bus."""
    from core.infrastructure.events import event_bus

    audit_handler = AuditLogEventHandler()
    for event_type in LICENSE_EVENTS:
        event_bus.subscribe(event_type, audit_handler)

    logger.info("Event handlers registered")
