"""
LicenseRecord domain entity.

This is the core domain entity representing one issued license and its
usage and lockout state. It contains business logic and is independent
of infrastructure.
"""
import uuid
from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from typing import Iterable, Optional

from core.domain.value_objects import BoundedHistory, Email, SoftwareEntitlement
from licenses.domain.license_key import LicenseKey


@dataclass(frozen=True)
class LicenseRecord:
    """
    LicenseRecord domain entity.

    Immutable: every state change produces a new instance, and only the
    verification protocol commits those changes to the store.
    """

    id: uuid.UUID
    identifier: str
    license_key: LicenseKey
    expires_at: datetime
    allowed_software: SoftwareEntitlement
    last_activation_at: datetime
    created_at: datetime
    updated_at: datetime
    last_activation_ip: Optional[str] = None
    failure_count: int = 0
    failure_history: BoundedHistory = field(default_factory=BoundedHistory)
    ip_history: BoundedHistory = field(default_factory=BoundedHistory)
    blocked_until: Optional[datetime] = None
    owner_email: Optional[Email] = None
    revision: int = 0

    def __post_init__(self):
        """Validate license record entity."""
        if not self.identifier or len(self.identifier.strip()) == 0:
            raise ValueError("License identifier cannot be empty")
        if len(self.identifier) > 255:
            raise ValueError("License identifier too long")
        if self.failure_count < 0:
            raise ValueError("Failure count cannot be negative")
        if self.revision < 0:
            raise ValueError("Revision cannot be negative")

    @classmethod
    def create(
        cls,
        identifier: str,
        expires_at: datetime,
        allowed_software: Optional[Iterable[str]] = None,
        owner_email: Optional[str] = None,
        key_prefix: str = "LV",
        license_id: Optional[uuid.UUID] = None,
    ) -> "LicenseRecord":
        """
        Create a freshly issued license record.

        Args:
            identifier: Target identifier the license is issued to
            expires_at: Hard expiry
            allowed_software: Entitled software identifiers
            owner_email: Optional recipient for lockout reports
            key_prefix: Prefix of the generated license key
            license_id: Optional UUID (generated if not provided)

        Returns:
            LicenseRecord with no binding, no failures and revision 0
        """
        now = datetime.now(timezone.utc)
        return cls(
            id=license_id or uuid.uuid4(),
            identifier=identifier.strip(),
            license_key=LicenseKey.generate(key_prefix),
            expires_at=expires_at,
            allowed_software=SoftwareEntitlement(frozenset(allowed_software or ())),
            last_activation_at=now,
            created_at=now,
            updated_at=now,
            owner_email=Email(owner_email) if owner_email else None,
        )

    def is_blocked(self, current_time: datetime) -> bool:
        """Check whether a lockout is in force at current_time."""
        return self.blocked_until is not None and current_time < self.blocked_until

    def is_expired(self, current_time: datetime) -> bool:
        """Check whether the license has passed its hard expiry."""
        return current_time > self.expires_at

    def hours_since_activation(self, current_time: datetime) -> float:
        """Hours elapsed since the current origin was bound."""
        return (current_time - self.last_activation_at).total_seconds() / 3600

    def with_changes(self, **changes) -> "LicenseRecord":
        """Return a copy with the given fields replaced."""
        return replace(self, **changes)

    def committed(self, current_time: datetime) -> "LicenseRecord":
        """Return the record as stored after a successful conditional write."""
        return replace(self, revision=self.revision + 1, updated_at=current_time)
