"""
License DTOs for API responses.
"""
import uuid
from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional

from core.domain.value_objects import VerificationDecision

DECISION_MESSAGES = {
    VerificationDecision.NOT_FOUND: "License key not found",
    VerificationDecision.SOFTWARE_DENIED: "License does not cover the requested software",
    VerificationDecision.BLOCKED: "License is temporarily blocked",
    VerificationDecision.EXPIRED: "License has expired",
    VerificationDecision.DENIED_IP_MISMATCH: (
        "License is already in use from another address; it is now blocked"
    ),
    VerificationDecision.ALLOWED: "License is valid",
    VerificationDecision.RETRY_EXHAUSTED: (
        "License verification is temporarily unavailable, please retry"
    ),
}


@dataclass
class VerificationResultDTO:
    """DTO for a verification decision."""

    decision: VerificationDecision
    message: str
    blocked_until: Optional[datetime] = None
    license_id: Optional[uuid.UUID] = None

    @classmethod
    def for_decision(
        cls,
        decision: VerificationDecision,
        blocked_until: Optional[datetime] = None,
        license_id: Optional[uuid.UUID] = None,
    ) -> "VerificationResultDTO":
        return cls(
            decision=decision,
            message=DECISION_MESSAGES[decision],
            blocked_until=blocked_until,
            license_id=license_id,
        )


@dataclass
class IssuedLicenseDTO:
    """DTO for issue license response."""

    id: uuid.UUID
    license_key: str
    identifier: str
    expires_at: datetime
    software: List[str] = field(default_factory=list)


@dataclass
class LockoutReportItemDTO:
    """DTO for lockout report item."""

    identifier: str
    failure_count: int
    blocked_until: Optional[datetime]
    last_activation_ip: Optional[str]
    last_failure: Optional[str]
