"""
Django admin configuration for licenses app.
"""
import json

from django.contrib import admin
from django.utils.html import format_html

from licenses.infrastructure.models import AuditLog, LicenseRecord


def _pre(data):
    return format_html(
        '<pre style="background: #f5f5f5; padding: 10px; '
        'border-radius: 4px; overflow-x: auto;">{}</pre>',
        json.dumps(data, indent=2),
    )


@admin.register(LicenseRecord)
class LicenseRecordAdmin(admin.ModelAdmin):
    """
    Admin interface for LicenseRecord model.

    Usage and lockout state is only ever written by the verification
    flow, so it is shown read-only here.
    """

    list_display = [
        "identifier",
        "key",
        "expires_at",
        "last_activation_ip",
        "failure_count",
        "blocked_display",
        "created_at",
    ]
    list_filter = ["expires_at", "blocked_until", "created_at"]
    search_fields = ["identifier", "key", "owner_email", "last_activation_ip"]
    readonly_fields = [
        "id",
        "key",
        "key_hash",
        "last_activation_ip",
        "last_activation_at",
        "failure_count",
        "failure_history_display",
        "ip_history_display",
        "blocked_until",
        "revision",
        "created_at",
        "updated_at",
    ]
    fieldsets = (
        (
            "Basic Information",
            {
                "fields": ("id", "identifier", "key", "key_hash", "owner_email"),
            },
        ),
        (
            "Entitlement",
            {
                "fields": ("expires_at", "allowed_software"),
            },
        ),
        (
            "Usage",
            {
                "fields": (
                    "last_activation_ip",
                    "last_activation_at",
                    "ip_history_display",
                ),
            },
        ),
        (
            "Lockout",
            {
                "fields": (
                    "failure_count",
                    "blocked_until",
                    "failure_history_display",
                ),
            },
        ),
        (
            "Timestamps",
            {
                "fields": ("revision", "created_at", "updated_at"),
                "classes": ("collapse",),
            },
        ),
    )

    def blocked_display(self, obj):
        """Display lockout state with color coding."""
        if obj.is_blocked:
            return format_html('<span style="color: red; font-weight: bold;">BLOCKED</span>')
        return format_html('<span style="color: green;">OK</span>')

    blocked_display.short_description = "Lockout"

    def failure_history_display(self, obj):
        """Display failure history in a formatted way."""
        return _pre(obj.failure_history) if obj.failure_history else "-"

    failure_history_display.short_description = "Failure History"

    def ip_history_display(self, obj):
        """Display IP history in a formatted way."""
        return _pre(obj.ip_history) if obj.ip_history else "-"

    ip_history_display.short_description = "IP History"


@admin.register(AuditLog)
class AuditLogAdmin(admin.ModelAdmin):
    """Admin interface for AuditLog model."""

    list_display = ["action", "entity_type", "entity_id", "occurred_at", "created_at"]
    list_filter = ["action", "entity_type", "created_at"]
    search_fields = ["entity_id", "event_id"]
    readonly_fields = ["id", "event_id", "occurred_at", "created_at", "changes_display"]
    fieldsets = (
        (
            "Basic Information",
            {
                "fields": ("id", "event_id", "entity_type", "entity_id", "action"),
            },
        ),
        (
            "Details",
            {
                "fields": ("changes_display", "occurred_at", "created_at"),
            },
        ),
    )

    def changes_display(self, obj):
        """Display changes in a formatted way."""
        return _pre(obj.changes) if obj.changes else "-"

    changes_display.short_description = "Changes"

    def has_add_permission(self, request):
        """Audit logs are read-only."""
        return False

    def has_change_permission(self, request, obj=None):
        """Audit logs are read-only."""
        return False

    def has_delete_permission(self, request, obj=None):
        """Audit logs should not be deleted."""
        return False
