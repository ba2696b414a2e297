"""
VerifyLicenseCommand.

Command to verify a license key presented from a network origin.
"""
from dataclasses import dataclass
from typing import Optional


@dataclass
class VerifyLicenseCommand:
    """Command to verify a license key."""

    license_key: str
    request_ip: str
    software: Optional[str] = None
