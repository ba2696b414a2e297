"""
Django management command to register event handlers.

The project AppConfig registers them at startup; this command exists
for shells and workers started without it.
"""

from django.core.management.base import BaseCommand

from core.infrastructure.event_handlers import LICENSE_EVENTS, register_event_handlers
from core.infrastructure.events import event_bus


class Command(BaseCommand):
    """Command to register event handlers."""

    help = "Register event handlers with the event bus"

    def handle(self, *args, **options):
        """Execute the command."""
        register_event_handlers()
        for event_type in LICENSE_EVENTS:
            names = ", ".join(h.__class__.__name__ for h in event_bus.handlers_for(event_type))
            self.stdout.write(f"  {event_type.__name__}: {names or '-'}")
        self.stdout.write(self.style.SUCCESS("Event handlers registered successfully"))
