"""
LicenseKey value object.

A license key is an opaque shared secret. The store looks it up by its
SHA-256 hash; the raw key is only compared in constant time.
"""

import hashlib
import secrets
import string
from dataclasses import dataclass


def generate_license_key(prefix: str) -> str:
    """
    Generate a license key in format: PREFIX-XXXX-XXXX-XXXX-XXXX.

    Args:
        prefix: Key prefix (e.g., 'LV')

    Returns:
        Generated license key string
    """
    chars = string.ascii_uppercase + string.digits
    parts = ["".join(secrets.choice(chars) for _ in range(4)) for _ in range(4)]
    return f"{prefix}-{'-'.join(parts)}"


def hash_license_key(raw_key: str) -> str:
    """Return the lookup hash of a raw license key."""
    return hashlib.sha256(raw_key.encode()).hexdigest()


@dataclass(frozen=True)
class LicenseKey:
    """Opaque license key together with its lookup hash."""

    key: str
    key_hash: str

    def __post_init__(self):
        """Validate license key."""
        if not self.key or len(self.key.strip()) == 0:
            raise ValueError("License key cannot be empty")
        if len(self.key) > 100:
            raise ValueError("License key too long")
        if not self.key_hash or len(self.key_hash) != 64:
            raise ValueError("Invalid key hash")

    @classmethod
    def generate(cls, prefix: str) -> "LicenseKey":
        """Generate a new random key."""
        key = generate_license_key(prefix)
        return cls(key=key, key_hash=hash_license_key(key))

    def verify_key(self, raw_key: str) -> bool:
        """
        Verify a raw license key against the stored hash.

        Args:
            raw_key: The raw license key to verify

        Returns:
            True if key matches, False otherwise
        """
        return secrets.compare_digest(self.key_hash, hash_license_key(raw_key))

    def __str__(self) -> str:
        return self.key
