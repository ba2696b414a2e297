"""
API exception handlers.

This module provides custom exception handling for REST API responses.
Verification decisions are responses, not exceptions; what reaches this
handler are issuance errors and unexpected failures.
"""

import logging
from typing import Any, Dict, Optional

from django.http import Http404
from rest_framework import status
from rest_framework.exceptions import APIException
from rest_framework.response import Response
from rest_framework.views import exception_handler

from core.domain.exceptions import (
    DomainException,
    DuplicateLicenseError,
    InfrastructureException,
    InvalidAdminSecretError,
)

logger = logging.getLogger(__name__)

DOMAIN_STATUS = (
    (DuplicateLicenseError, status.HTTP_409_CONFLICT),
    (InvalidAdminSecretError, status.HTTP_401_UNAUTHORIZED),
    (InfrastructureException, status.HTTP_503_SERVICE_UNAVAILABLE),
)


def custom_exception_handler(exc: Exception, context: Dict[str, Any]) -> Response:
    """Custom exception handler for REST API."""
    trace_id = _get_trace_id(context)

    if isinstance(exc, DomainException):
        response = _handle_domain_exception(exc, trace_id)
    elif isinstance(exc, APIException):
        response = exception_handler(exc, context)
        detail = response.data
        if isinstance(detail, dict):
            detail = detail.get("detail", exc.default_detail)
        response.data = {
            "error": {
                "code": str(exc.default_code).upper().replace("-", "_"),
                "message": str(detail),
            }
        }
    elif isinstance(exc, Http404):
        response = Response(
            {"error": {"code": "NOT_FOUND", "message": "Resource not found"}},
            status=status.HTTP_404_NOT_FOUND,
        )
    else:
        response = _handle_unexpected_exception(exc, trace_id)

    if trace_id:
        response["X-Trace-ID"] = trace_id
    return response


def _get_trace_id(context: Dict[str, Any]) -> Optional[str]:
    """Extract trace ID from request context."""
    request = context.get("request")
    if not request:
        return None
    return getattr(request, "trace_id", getattr(request, "correlation_id", None))


def _handle_domain_exception(exc: DomainException, trace_id: Optional[str]) -> Response:
    """Handle domain-specific exceptions."""
    status_code = status.HTTP_400_BAD_REQUEST
    for exc_type, mapped_status in DOMAIN_STATUS:
        if isinstance(exc, exc_type):
            status_code = mapped_status
            break

    logger.warning("Domain exception: %s - %s", exc.code, exc.message, extra={"trace_id": trace_id})
    response = Response({"error": {"code": exc.code, "message": exc.message}}, status=status_code)
    if isinstance(exc, InfrastructureException):
        response["Retry-After"] = "1"
    return response


def _handle_unexpected_exception(exc: Exception, trace_id: Optional[str]) -> Response:
    """Handle unexpected or untracked exceptions."""
    logger.error("Unexpected error: %s", exc, extra={"trace_id": trace_id}, exc_info=True)
    return Response(
        {"error": {"code": "INTERNAL_ERROR", "message": "An internal error occurred"}},
        status=status.HTTP_500_INTERNAL_SERVER_ERROR,
    )
