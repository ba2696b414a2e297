"""
IssueLicenseCommand.

Command to issue a new license to a target identifier.
"""
from dataclasses import dataclass, field
from typing import List, Optional


@dataclass
class IssueLicenseCommand:
    """
    Command to issue a license.

    The license expires the given number of calendar months from now.
    """

    identifier: str
    months: int
    software: List[str] = field(default_factory=list)
    owner_email: Optional[str] = None
