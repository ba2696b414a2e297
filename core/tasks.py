"""
Celery tasks for background processing.

Lockout notifications are delivered here, outside the request that
caused them.
"""
import logging
from typing import List

from django.conf import settings
from django.core.mail import send_mail

from LicenseVerificationService.celery import app

from core.metrics import lockout_notifications_failed_total

logger = logging.getLogger(__name__)

LOCKOUT_SUBJECT = "License {identifier} locked after use from a new address"

LOCKOUT_BODY = """\
License {identifier} ({license_key}) was presented from {request_ip} while it is
bound to {previous_ip}.

Requested software: {software}
Recorded mismatches: {failure_count}
Locked until: {blocked_until}

Recent mismatch history:
{history}
"""


def render_lockout_email(payload: dict) -> str:
    """Render the plain-text body of a lockout report."""
    history = payload.get("failure_history") or []
    return LOCKOUT_BODY.format(
        identifier=payload["identifier"],
        license_key=payload["license_key"],
        request_ip=payload["request_ip"],
        previous_ip=payload.get("previous_ip") or "-",
        software=payload.get("software") or "-",
        failure_count=payload["failure_count"],
        blocked_until=payload["blocked_until"],
        history="\n".join(f"  {entry}" for entry in history[-5:]) or "  -",
    )


@app.task(acks_late=False, ignore_result=True)
def send_lockout_notification_task(payload: dict, recipients: List[str]) -> int:
    """
    Celery task delivering a lockout report by email.

    Runs at most once per lockout: failures are logged and counted,
    never retried.

    Args:
        payload: Serialized lockout details
        recipients: Email addresses to notify

    Returns:
        Number of messages sent
    """
    if not recipients:
        logger.info("No recipients for lockout report of %s", payload.get("identifier"))
        return 0

    try:
        return send_mail(
            subject=LOCKOUT_SUBJECT.format(identifier=payload["identifier"]),
            message=render_lockout_email(payload),
            from_email=settings.DEFAULT_FROM_EMAIL,
            recipient_list=recipients,
        )
    except Exception as exc:  # pylint: disable=broad-exception-caught
        lockout_notifications_failed_total.inc()
        logger.error(
            "Lockout notification failed for %s: %s",
            payload.get("identifier"),
            exc,
            exc_info=True,
        )
        return 0
