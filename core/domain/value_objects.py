"""
Value objects for the domain.

Value objects are immutable objects that are defined by their attributes
rather than their identity. They have no identity and are compared by value.
"""
import ipaddress
from abc import ABC
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, Iterator, Optional, Tuple

HISTORY_CAPACITY = 50


@dataclass(frozen=True)
class ValueObject(ABC):
    """
    Base class for value objects.

    Value objects are immutable and compared by value.
    """

    def __eq__(self, other):
        """Compare value objects by their attributes."""
        if not isinstance(other, self.__class__):
            return False
        return self.__dict__ == other.__dict__

    def __hash__(self):
        """Make value objects hashable."""
        return hash(tuple(sorted(self.__dict__.items())))


@dataclass(frozen=True)
class Email(ValueObject):
    """Email value object with validation."""

    value: str

    def __post_init__(self):
        """Validate email format."""
        if not self.value or "@" not in self.value:
            raise ValueError(f"Invalid email address: {self.value}")

    def __str__(self) -> str:
        """Return email as string."""
        return self.value


@dataclass(frozen=True)
class IPAddress(ValueObject):
    """Network origin of a verification request, normalized."""

    value: str

    def __post_init__(self):
        """Validate and normalize the address."""
        if not self.value or not self.value.strip():
            raise ValueError("IP address cannot be empty")
        try:
            normalized = str(ipaddress.ip_address(self.value.strip()))
        except ValueError as e:
            raise ValueError(f"Invalid IP address: {self.value}") from e
        object.__setattr__(self, "value", normalized)

    @classmethod
    def parse(cls, raw: Optional[str]) -> Optional["IPAddress"]:
        """Return an IPAddress for raw, or None when raw is not an address."""
        if not raw:
            return None
        try:
            return cls(raw)
        except ValueError:
            return None

    def __str__(self) -> str:
        """Return address as string."""
        return self.value


@dataclass(frozen=True)
class BoundedHistory(ValueObject):
    """
    Fixed-capacity ring buffer of log entries.

    Entries are kept oldest first. Appending to a full buffer evicts
    the oldest entry. Every operation returns a new buffer.
    """

    entries: Tuple[str, ...] = ()
    capacity: int = HISTORY_CAPACITY

    def __post_init__(self):
        """Validate capacity and trim to it."""
        if self.capacity < 1:
            raise ValueError("History capacity must be at least 1")
        entries = tuple(self.entries)
        if len(entries) > self.capacity:
            entries = entries[-self.capacity:]
        object.__setattr__(self, "entries", entries)

    @classmethod
    def of(cls, entries: Optional[Iterable[str]], capacity: int = HISTORY_CAPACITY) -> "BoundedHistory":
        """Build a buffer from stored entries."""
        return cls(entries=tuple(entries or ()), capacity=capacity)

    @property
    def last(self) -> Optional[str]:
        """Newest entry, or None when empty."""
        return self.entries[-1] if self.entries else None

    def append(self, entry: str) -> "BoundedHistory":
        """Return a buffer with entry appended, evicting the oldest when full."""
        entries = self.entries + (entry,)
        if len(entries) > self.capacity:
            entries = entries[1:]
        return BoundedHistory(entries=entries, capacity=self.capacity)

    def append_distinct(self, entry: str) -> "BoundedHistory":
        """Append entry unless it equals the newest entry."""
        if self.last == entry:
            return self
        return self.append(entry)

    def to_list(self) -> list:
        """Return entries as a plain list for persistence."""
        return list(self.entries)

    def __len__(self) -> int:
        return len(self.entries)

    def __iter__(self) -> Iterator[str]:
        return iter(self.entries)


@dataclass(frozen=True)
class SoftwareEntitlement(ValueObject):
    """Set of software identifiers a license grants."""

    names: frozenset = field(default_factory=frozenset)

    def __post_init__(self):
        """Normalize names to a frozenset of stripped strings."""
        cleaned = frozenset(name.strip() for name in self.names if name and name.strip())
        object.__setattr__(self, "names", cleaned)

    def allows(self, software: str) -> bool:
        """Check whether software is part of the entitlement."""
        return software in self.names

    def to_list(self) -> list:
        """Return names sorted for persistence."""
        return sorted(self.names)

    def __contains__(self, software: str) -> bool:
        return self.allows(software)

    def __len__(self) -> int:
        return len(self.names)


class VerificationDecision(Enum):
    """Outcome of a license verification."""

    NOT_FOUND = "not_found"
    SOFTWARE_DENIED = "software_denied"
    BLOCKED = "blocked"
    EXPIRED = "expired"
    DENIED_IP_MISMATCH = "denied_ip_mismatch"
    ALLOWED = "allowed"
    RETRY_EXHAUSTED = "retry_exhausted"

    @property
    def is_policy_outcome(self) -> bool:
        """False for transient infrastructure failures."""
        return self is not VerificationDecision.RETRY_EXHAUSTED

    def __str__(self) -> str:
        """Return decision as string."""
        return self.value
