"""
Admin secret authentication middleware.

This middleware protects the provisioning APIs under /api/v1/admin/
with the shared admin secret from LICENSE_ADMIN_SECRET.
"""

import hmac
import logging
from typing import Optional

from django.conf import settings
from django.http import HttpRequest, HttpResponse, JsonResponse
from django.utils.deprecation import MiddlewareMixin

from core.domain.exceptions import InvalidAdminSecretError

logger = logging.getLogger(__name__)

ADMIN_API_PREFIX = "/api/v1/admin/"
ADMIN_SECRET_HEADER = "X-Admin-Secret"


class AdminSecretAuthenticationMiddleware(MiddlewareMixin):
    """
    Middleware for admin secret authentication.

    This middleware:
    1. Leaves every path outside /api/v1/admin/ untouched
    2. Compares the X-Admin-Secret header in constant time
    3. Returns 401 Unauthorized if authentication fails
    """

    def process_request(self, request: HttpRequest) -> Optional[HttpResponse]:
        """
        Process request and validate the admin secret.

        Args:
            request: HTTP request

        Returns:
            HttpResponse with 401 if authentication fails, None otherwise
        """
        if not request.path.startswith(ADMIN_API_PREFIX):
            return None

        provided = request.headers.get(ADMIN_SECRET_HEADER, "")
        expected = getattr(settings, "LICENSE_ADMIN_SECRET", "")

        if not expected:
            logger.error("LICENSE_ADMIN_SECRET is not configured; rejecting admin request")
            return self._unauthorized(InvalidAdminSecretError("Admin API is not configured"))

        if not provided:
            return self._unauthorized(
                InvalidAdminSecretError(f"Missing admin secret. Provide {ADMIN_SECRET_HEADER} header.")
            )

        if not hmac.compare_digest(provided.encode(), expected.encode()):
            logger.warning(
                "Invalid admin secret attempted",
                extra={"remote_addr": getattr(request, "client_ip", None)},
            )
            return self._unauthorized(InvalidAdminSecretError())

        request.is_admin = True  # type: ignore
        return None

    def _unauthorized(self, exc: InvalidAdminSecretError) -> JsonResponse:
        return JsonResponse({"error": {"code": exc.code, "message": exc.message}}, status=401)
