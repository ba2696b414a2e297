"""
Committed-change events and the bus they travel on.

An event is built only after its change was written, so handlers never
see a decision that a concurrent writer later replaced.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field, fields
from datetime import datetime, timezone
from typing import Any, Dict
from uuid import UUID, uuid4


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True, kw_only=True)
class DomainEvent:
    """
    A committed change to one license record.

    Subclasses add their own fields; those fields make up the payload
    stored in the audit log.
    """

    license_id: UUID
    occurred_at: datetime = field(default_factory=_utcnow)
    event_id: UUID = field(default_factory=uuid4)

    @property
    def event_type(self) -> str:
        return type(self).__name__

    def payload(self) -> Dict[str, Any]:
        """Subclass fields as JSON-ready values."""
        own = {f.name for f in fields(DomainEvent)}
        data = {}
        for f in fields(self):
            if f.name in own:
                continue
            value = getattr(self, f.name)
            data[f.name] = value.isoformat() if isinstance(value, datetime) else value
        return data


class EventHandler(ABC):
    """Reacts to published events."""

    @abstractmethod
    async def handle(self, event: DomainEvent) -> None:
        pass


class EventBus(ABC):
    """Routes each published event to the handlers subscribed to its class."""

    @abstractmethod
    async def publish(self, event: DomainEvent) -> None:
        pass

    @abstractmethod
    def subscribe(self, event_type: type, handler: EventHandler) -> None:
        pass
