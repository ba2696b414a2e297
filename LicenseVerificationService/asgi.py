"""
ASGI config for LicenseVerificationService project.
"""

import os

from django.core.asgi import get_asgi_application

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "LicenseVerificationService.settings.prod")

application = get_asgi_application()
