"""
Lockout notifier port (interface).

Notifiers deliver a report about an IP-mismatch denial. Delivery is
best effort: callers log failures and never let them change a decision.
"""
from abc import ABC, abstractmethod
from typing import Optional

from licenses.domain.license import LicenseRecord


class LockoutNotifier(ABC):
    """Abstract notifier for IP-mismatch denials."""

    @abstractmethod
    async def notify(
        self, record: LicenseRecord, request_ip: str, software: Optional[str]
    ) -> None:
        """
        Dispatch a denial report.

        Args:
            record: License record after the lockout was committed
            request_ip: Origin of the rejected request
            software: Software identifier the client asked for, if any
        """
        pass
