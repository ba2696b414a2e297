"""
Lockout notifier adapters.
"""
import logging
from typing import List, Optional

from asgiref.sync import sync_to_async
from django.conf import settings

from licenses.domain.license import LicenseRecord
from licenses.ports.notifier import LockoutNotifier

logger = logging.getLogger(__name__)


def lockout_payload(record: LicenseRecord, request_ip: str, software: Optional[str]) -> dict:
    """Serialize a committed lockout for the notification task."""
    return {
        "license_id": str(record.id),
        "identifier": record.identifier,
        "license_key": record.license_key.key,
        "previous_ip": record.last_activation_ip,
        "request_ip": request_ip,
        "software": software,
        "failure_count": record.failure_count,
        "blocked_until": record.blocked_until.isoformat() if record.blocked_until else None,
        "failure_history": record.failure_history.to_list(),
    }


class EmailLockoutNotifier(LockoutNotifier):
    """
    Notifier that hands lockout reports to a Celery task for email delivery.

    Recipients are LICENSE_LOCKOUT_NOTIFY_EMAILS plus the license owner.
    The task is published once, without publish retries.
    """

    def __init__(self, recipients: Optional[List[str]] = None):
        self._recipients = recipients

    def recipients_for(self, record: LicenseRecord) -> List[str]:
        recipients = list(
            self._recipients
            if self._recipients is not None
            else getattr(settings, "LICENSE_LOCKOUT_NOTIFY_EMAILS", [])
        )
        if record.owner_email and str(record.owner_email) not in recipients:
            recipients.append(str(record.owner_email))
        return recipients

    async def notify(
        self, record: LicenseRecord, request_ip: str, software: Optional[str]
    ) -> None:
        from core.tasks import send_lockout_notification_task

        recipients = self.recipients_for(record)
        if not recipients:
            logger.info("Lockout of %s has no notification recipients", record.identifier)
            return

        await sync_to_async(send_lockout_notification_task.apply_async)(
            args=(lockout_payload(record, request_ip, software), recipients),
            retry=False,
        )
        logger.debug("Lockout notification queued for %s", record.identifier)
