"""
App configuration for License Verification Service.
"""

import logging

from django.apps import AppConfig
from django.conf import settings

logger = logging.getLogger(__name__)


class LicenseVerificationServiceConfig(AppConfig):
    """App configuration for LicenseVerificationService."""

    name = "LicenseVerificationService"
    verbose_name = "License Verification Service"

    def ready(self):
        """Register event handlers and, when enabled, tracing."""
        from core.infrastructure.event_handlers import register_event_handlers

        register_event_handlers()

        if getattr(settings, "OTEL_ENABLED", False):
            from core.instrumentation import setup_opentelemetry

            setup_opentelemetry()
