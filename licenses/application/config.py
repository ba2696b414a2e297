"""
Verification policy configuration.

Values come from the LICENSE_VERIFICATION settings dict; anything
missing falls back to DEFAULTS.
"""
from typing import Any

from django.conf import settings

from licenses.domain.services import GRACE_WINDOW_HOURS, MAX_LOCKOUT_DAYS, LockoutPolicy

DEFAULTS = {
    "GRACE_WINDOW_HOURS": GRACE_WINDOW_HOURS,
    "MAX_LOCKOUT_DAYS": MAX_LOCKOUT_DAYS,
    "MAX_ATTEMPTS": 5,
    "KEY_PREFIX": "LV",
}


def get_setting(name: str) -> Any:
    """Return a verification setting, falling back to its default."""
    if name not in DEFAULTS:
        raise KeyError(f"Unknown license verification setting: {name}")
    overrides = getattr(settings, "LICENSE_VERIFICATION", None) or {}
    return overrides.get(name, DEFAULTS[name])


def build_policy() -> LockoutPolicy:
    """Build the lockout policy from settings."""
    return LockoutPolicy(
        grace_window_hours=get_setting("GRACE_WINDOW_HOURS"),
        max_lockout_days=get_setting("MAX_LOCKOUT_DAYS"),
    )
