"""
License domain services.

Domain services contain business logic that doesn't naturally
fit within a single entity. LockoutPolicy is the anti-sharing decision
procedure: a pure function of a license record, the current time and
the incoming request. It performs no I/O.
"""
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Any, Dict, Optional

from core.domain.value_objects import VerificationDecision
from licenses.domain.license import LicenseRecord

GRACE_WINDOW_HOURS = 24
MAX_LOCKOUT_DAYS = 7


def format_failure_entry(
    last_ip: str, last_at: datetime, request_ip: str, now: datetime
) -> str:
    """Human-readable log line for one mismatch attempt."""
    return f"{last_ip} at {last_at.isoformat()} -> {request_ip} at {now.isoformat()}"


@dataclass(frozen=True)
class Evaluation:
    """
    Result of evaluating a verification request.

    Attributes:
        decision: Terminal decision
        changes: Mutated fields keyed by record attribute name, empty when
            nothing has to be committed
        record: Record as it looks after the mutation (None when not found)
    """

    decision: VerificationDecision
    changes: Dict[str, Any] = field(default_factory=dict)
    record: Optional[LicenseRecord] = None

    @property
    def has_mutation(self) -> bool:
        """True when the evaluation must be committed."""
        return bool(self.changes)


class LockoutPolicy:
    """Domain service deciding ALLOW or DENY for a verification request."""

    def __init__(
        self,
        grace_window_hours: float = GRACE_WINDOW_HOURS,
        max_lockout_days: int = MAX_LOCKOUT_DAYS,
    ):
        """
        Initialize policy.

        Args:
            grace_window_hours: Hours after which a new origin rebinds
                without penalty
            max_lockout_days: Cap on the lockout length in days
        """
        self.grace_window_hours = grace_window_hours
        self.max_lockout_days = max_lockout_days

    def lockout_days(self, failure_count: int) -> int:
        """Lockout length in whole days for the given cumulative failures."""
        return min(failure_count, self.max_lockout_days)

    def evaluate(
        self,
        record: Optional[LicenseRecord],
        now: datetime,
        request_ip: str,
        requested_software: Optional[str] = None,
    ) -> Evaluation:
        """
        Evaluate a verification request. First matching rule wins.

        Args:
            record: Current license record, None if the key is unknown
            now: Evaluation time
            request_ip: Origin of the request
            requested_software: Software to check entitlement for, if any

        Returns:
            Evaluation with the decision and the mutation to commit
        """
        if record is None:
            return Evaluation(VerificationDecision.NOT_FOUND)

        if requested_software and not record.allowed_software.allows(requested_software):
            return Evaluation(VerificationDecision.SOFTWARE_DENIED, record=record)

        if record.is_blocked(now):
            return Evaluation(VerificationDecision.BLOCKED, record=record)

        if record.is_expired(now):
            return Evaluation(VerificationDecision.EXPIRED, record=record)

        if (
            record.last_activation_ip is not None
            and request_ip != record.last_activation_ip
            and record.hours_since_activation(now) < self.grace_window_hours
        ):
            return self._mismatch(record, now, request_ip)

        return self._accept(record, now, request_ip)

    def _mismatch(self, record: LicenseRecord, now: datetime, request_ip: str) -> Evaluation:
        """Escalate the lockout for a new origin inside the grace window."""
        failure_count = record.failure_count + 1
        blocked_until = now + timedelta(days=self.lockout_days(failure_count))
        if record.blocked_until is not None and record.blocked_until > blocked_until:
            blocked_until = record.blocked_until

        changes = {
            "failure_history": record.failure_history.append(
                format_failure_entry(
                    record.last_activation_ip, record.last_activation_at, request_ip, now
                )
            ),
            "failure_count": failure_count,
            "blocked_until": blocked_until,
        }
        return Evaluation(
            VerificationDecision.DENIED_IP_MISMATCH,
            changes=changes,
            record=record.with_changes(**changes),
        )

    def _accept(self, record: LicenseRecord, now: datetime, request_ip: str) -> Evaluation:
        """Allow the request, rebinding the origin when it changed."""
        if request_ip == record.last_activation_ip:
            return Evaluation(VerificationDecision.ALLOWED, record=record)

        changes = {
            "last_activation_ip": request_ip,
            "last_activation_at": now,
            "ip_history": record.ip_history.append_distinct(request_ip),
        }
        return Evaluation(
            VerificationDecision.ALLOWED,
            changes=changes,
            record=record.with_changes(**changes),
        )
