"""
License domain events.

Each event describes a change already committed to a license record.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from core.domain.events import DomainEvent


@dataclass(frozen=True, kw_only=True)
class LicenseIssued(DomainEvent):
    """A license record was created."""

    identifier: str
    expires_at: datetime


@dataclass(frozen=True, kw_only=True)
class LicenseLockedOut(DomainEvent):
    """
    An IP mismatch escalated the lockout of a license.

    failure_count is the cumulative mismatch count including this one.
    """

    previous_ip: Optional[str]
    request_ip: str
    failure_count: int
    blocked_until: datetime


@dataclass(frozen=True, kw_only=True)
class LicenseRebound(DomainEvent):
    """A license was bound to a new origin; previous_ip is None on first use."""

    previous_ip: Optional[str]
    request_ip: str
