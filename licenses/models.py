"""
Model registration for the licenses app.

The ORM models live in licenses.infrastructure.models.
"""
from licenses.infrastructure.models import AuditLog, LicenseRecord  # noqa: F401
