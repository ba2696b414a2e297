"""
VerifyLicenseHandler.

Handles the verify license command: read the record, evaluate the
lockout policy, and commit any mutation with a revision-guarded write.
A lost write is retried against a fresh read, so a decision is only
returned once its mutation is the one the store holds.
"""

import logging
from datetime import datetime
from typing import Callable, Optional

from django.utils import timezone

from core.domain.events import EventBus
from core.domain.exceptions import StoreUnavailableError
from core.domain.value_objects import VerificationDecision
from core.metrics import (
    license_commit_conflicts_total,
    license_lockouts_total,
    license_verifications_total,
    lockout_notifications_failed_total,
)
from licenses.application import config
from licenses.application.commands.verify_license import VerifyLicenseCommand
from licenses.application.dto.license_dto import VerificationResultDTO
from licenses.domain.events import LicenseLockedOut, LicenseRebound
from licenses.domain.license import LicenseRecord
from licenses.domain.services import Evaluation, LockoutPolicy
from licenses.ports.license_repository import LicenseRepository
from licenses.ports.notifier import LockoutNotifier

logger = logging.getLogger(__name__)


class VerifyLicenseHandler:
    """Handler for VerifyLicenseCommand."""

    def __init__(
        self,
        license_repository: LicenseRepository,
        notifier: LockoutNotifier,
        policy: Optional[LockoutPolicy] = None,
        clock: Callable[[], datetime] = timezone.now,
        max_attempts: Optional[int] = None,
        event_bus: Optional[EventBus] = None,
    ):
        """
        Initialize handler.

        Args:
            license_repository: Store holding license records
            notifier: Receives a report for every committed IP mismatch
            policy: Lockout policy, built from settings when omitted
            clock: Source of the evaluation time
            max_attempts: Read-evaluate-write attempts before giving up
            event_bus: Bus for committed license events
        """
        if event_bus is None:
            from core.infrastructure.events import event_bus as default_bus

            event_bus = default_bus

        self.license_repository = license_repository
        self.notifier = notifier
        self.policy = policy or config.build_policy()
        self.clock = clock
        self.max_attempts = max_attempts or config.get_setting("MAX_ATTEMPTS")
        self.event_bus = event_bus

    async def handle(self, command: VerifyLicenseCommand) -> VerificationResultDTO:
        """
        Handle verify license command.

        Args:
            command: VerifyLicenseCommand

        Returns:
            VerificationResultDTO carrying the decision
        """
        for attempt in range(1, self.max_attempts + 1):
            try:
                record = await self.license_repository.find_by_key(command.license_key)
                now = self.clock()
                evaluation = self.policy.evaluate(
                    record, now, command.request_ip, requested_software=command.software
                )
                if not evaluation.has_mutation:
                    return self._result(evaluation)

                committed = await self.license_repository.conditional_write(
                    record.id, evaluation.changes, expected_revision=record.revision
                )
            except StoreUnavailableError as e:
                logger.error("License store unavailable during verification: %s", e)
                return self._exhausted()

            if committed:
                stored = evaluation.record.committed(now)
                await self._after_commit(evaluation.decision, record, stored, command)
                return self._result(evaluation)

            license_commit_conflicts_total.inc()
            logger.info(
                "Concurrent update on license %s, retrying (attempt %d of %d)",
                record.identifier,
                attempt,
                self.max_attempts,
            )

        logger.error(
            "Verification gave up after %d conflicting attempts", self.max_attempts
        )
        return self._exhausted()

    async def _after_commit(
        self,
        decision: VerificationDecision,
        previous: LicenseRecord,
        stored: LicenseRecord,
        command: VerifyLicenseCommand,
    ) -> None:
        """Publish the committed change and notify on lockouts."""
        if decision is VerificationDecision.DENIED_IP_MISMATCH:
            license_lockouts_total.inc()
            logger.warning(
                "License %s locked until %s after use from %s (bound to %s)",
                stored.identifier,
                stored.blocked_until.isoformat(),
                command.request_ip,
                stored.last_activation_ip,
                extra={"license_id": str(stored.id), "failure_count": stored.failure_count},
            )
            await self.event_bus.publish(
                LicenseLockedOut(
                    license_id=stored.id,
                    previous_ip=stored.last_activation_ip,
                    request_ip=command.request_ip,
                    failure_count=stored.failure_count,
                    blocked_until=stored.blocked_until,
                )
            )
            await self._notify(stored, command)
        else:
            await self.event_bus.publish(
                LicenseRebound(
                    license_id=stored.id,
                    previous_ip=previous.last_activation_ip,
                    request_ip=command.request_ip,
                )
            )

    async def _notify(self, record: LicenseRecord, command: VerifyLicenseCommand) -> None:
        try:
            await self.notifier.notify(record, command.request_ip, command.software)
        except Exception as e:
            lockout_notifications_failed_total.inc()
            logger.error(
                "Lockout notification for %s failed: %s", record.identifier, e, exc_info=True
            )

    def _result(self, evaluation: Evaluation) -> VerificationResultDTO:
        decision = evaluation.decision
        license_verifications_total.labels(decision=decision.value).inc()
        logger.info("License verification decided %s", decision.value)

        record = evaluation.record
        return VerificationResultDTO.for_decision(
            decision,
            blocked_until=record.blocked_until
            if decision is VerificationDecision.BLOCKED
            else None,
            license_id=record.id if record else None,
        )

    def _exhausted(self) -> VerificationResultDTO:
        license_verifications_total.labels(
            decision=VerificationDecision.RETRY_EXHAUSTED.value
        ).inc()
        return VerificationResultDTO.for_decision(VerificationDecision.RETRY_EXHAUSTED)
