"""
LicenseRecord and AuditLog models.
"""
import uuid

from django.db import models
from django.utils import timezone


class LicenseRecord(models.Model):
    """
    One issued license together with its usage and lockout state.

    Every write other than the initial insert goes through a
    revision-guarded update; see DjangoLicenseRepository.conditional_write.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    identifier = models.CharField(max_length=255, unique=True, db_index=True)
    key = models.CharField(max_length=100, unique=True, db_index=True)
    key_hash = models.CharField(max_length=64, db_index=True, help_text="Hashed version for secure lookup")
    owner_email = models.EmailField(null=True, blank=True)
    expires_at = models.DateTimeField()
    allowed_software = models.JSONField(default=list, blank=True)
    last_activation_ip = models.CharField(max_length=45, null=True, blank=True)
    last_activation_at = models.DateTimeField(default=timezone.now)
    failure_count = models.PositiveIntegerField(default=0)
    failure_history = models.JSONField(default=list, blank=True)
    ip_history = models.JSONField(default=list, blank=True)
    blocked_until = models.DateTimeField(null=True, blank=True, db_index=True)
    revision = models.PositiveIntegerField(default=0)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = "license_records"
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["key_hash"], name="license_rec_key_has_8d1f2a_idx"),
            models.Index(fields=["failure_count", "blocked_until"], name="license_rec_failure_4c7e9b_idx"),
        ]

    def __str__(self):
        return f"{self.identifier} ({self.key})"

    @property
    def is_blocked(self) -> bool:
        """
        Check if a lockout is currently in force.

        Returns:
            True if blocked_until lies in the future
        """
        return self.blocked_until is not None and self.blocked_until > timezone.now()


class AuditLog(models.Model):
    """
    Immutable audit trail of committed license changes.
    """

    ACTION_CHOICES = [
        ("LicenseIssued", "License Issued"),
        ("LicenseLockedOut", "License Locked Out"),
        ("LicenseRebound", "License Rebound"),
    ]

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    event_id = models.UUIDField(unique=True)
    entity_type = models.CharField(max_length=50, default="license_record")
    entity_id = models.UUIDField()
    action = models.CharField(max_length=50, choices=ACTION_CHOICES)
    changes = models.JSONField(default=dict, help_text="Details of the change")
    occurred_at = models.DateTimeField()
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = "audit_logs"
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["entity_type", "entity_id"], name="audit_logs_entity__5a2b7c_idx"),
            models.Index(fields=["created_at"], name="audit_logs_created_9e3d1f_idx"),
            models.Index(fields=["action"], name="audit_logs_action_2f6a8e_idx"),
        ]

    def __str__(self):
        return f"{self.action} - {self.entity_type} {self.entity_id}"
