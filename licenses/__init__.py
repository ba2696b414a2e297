"""
Licenses module - License records and verification.

This module handles:
- LicenseRecord entity and domain logic
- The lockout policy deciding each verification
- Issuing licenses
- Optimistic-concurrency persistence of usage and lockout state
"""
