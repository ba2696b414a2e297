"""
License verification API views.

This endpoint is called by licensed software to check whether it may run.
"""

from asgiref.sync import async_to_sync
from drf_spectacular.utils import extend_schema
from rest_framework import status
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from api.v1.licenses.serializers import (
    VerifyLicenseRequestSerializer,
    VerifyLicenseResponseSerializer,
)
from core.domain.value_objects import VerificationDecision
from core.instrumentation import Status, StatusCode, get_tracer
from licenses.application.commands.verify_license import VerifyLicenseCommand
from licenses.application.dto.license_dto import VerificationResultDTO
from licenses.application.handlers.verify_license_handler import VerifyLicenseHandler
from licenses.infrastructure.notifiers import EmailLockoutNotifier
from licenses.infrastructure.repositories.django_license_repository import DjangoLicenseRepository

# Initialize collaborators (in production, use DI container)
_license_repo = DjangoLicenseRepository()
_notifier = EmailLockoutNotifier()

tracer = get_tracer(__name__)

DECISION_STATUS = {
    VerificationDecision.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    VerificationDecision.SOFTWARE_DENIED: status.HTTP_403_FORBIDDEN,
    VerificationDecision.BLOCKED: status.HTTP_403_FORBIDDEN,
    VerificationDecision.EXPIRED: status.HTTP_403_FORBIDDEN,
    VerificationDecision.DENIED_IP_MISMATCH: status.HTTP_403_FORBIDDEN,
    VerificationDecision.ALLOWED: status.HTTP_200_OK,
    VerificationDecision.RETRY_EXHAUSTED: status.HTTP_500_INTERNAL_SERVER_ERROR,
}

RETRY_AFTER_SECONDS = "1"


def build_response(result: VerificationResultDTO) -> Response:
    """Map a verification result to its HTTP response."""
    body = {"message": result.message}
    if result.decision is VerificationDecision.BLOCKED and result.blocked_until:
        body["blockedUntil"] = result.blocked_until.isoformat()

    response = Response(body, status=DECISION_STATUS[result.decision])
    if result.decision is VerificationDecision.RETRY_EXHAUSTED:
        response["Retry-After"] = RETRY_AFTER_SECONDS
    return response


class VerifyLicenseView(APIView):
    """View for verifying a license key."""

    @extend_schema(
        operation_id="verify_license",
        summary="Verify License",
        description=(
            "Check a license key from the calling address. A key used from a new "
            "address within 24 hours of its last use is locked for an escalating "
            "number of days (1 per recorded mismatch, at most 7)."
        ),
        tags=["License API"],
        request=VerifyLicenseRequestSerializer,
        responses={
            200: VerifyLicenseResponseSerializer,
            400: {"description": "Invalid request body"},
            403: VerifyLicenseResponseSerializer,
            404: {"description": "License key not found"},
            500: {"description": "Verification temporarily unavailable, retry"},
        },
    )
    def post(self, request: Request) -> Response:
        """Verify a license key."""
        return async_to_sync(self._handle_verify_license)(request)

    async def _handle_verify_license(self, request: Request) -> Response:
        """Async handler for verify license."""
        with tracer.start_as_current_span("verify_license") as span:
            span.set_attribute("operation", "verify_license")

            serializer = VerifyLicenseRequestSerializer(data=request.data)
            if not serializer.is_valid():
                span.set_status(Status(StatusCode.ERROR, "Validation failed"))
                return Response(
                    {"message": "Invalid request body", "errors": serializer.errors},
                    status=status.HTTP_400_BAD_REQUEST,
                )

            client_ip = getattr(request, "client_ip", None)
            if not client_ip:
                span.set_status(Status(StatusCode.ERROR, "Client address unknown"))
                return Response(
                    {"message": "Unable to determine client address"},
                    status=status.HTTP_400_BAD_REQUEST,
                )

            software = serializer.validated_data.get("software") or None
            span.set_attribute("client_ip", client_ip)
            if software:
                span.set_attribute("software", software)

            handler = VerifyLicenseHandler(
                license_repository=_license_repo,
                notifier=_notifier,
            )
            result = await handler.handle(
                VerifyLicenseCommand(
                    license_key=serializer.validated_data["licenseKey"],
                    request_ip=client_ip,
                    software=software,
                )
            )

            span.set_attribute("decision", result.decision.value)
            if not result.decision.is_policy_outcome:
                span.set_status(Status(StatusCode.ERROR, result.message))
            request._request.license_decision = result.decision.value  # pylint: disable=protected-access
            return build_response(result)
