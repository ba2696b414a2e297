"""
ListLockoutsQuery.

Query to list licenses that recorded IP mismatches.
"""
from dataclasses import dataclass


@dataclass
class ListLockoutsQuery:
    """Query to list locked licenses; include_inactive adds past lockouts."""

    include_inactive: bool = False
