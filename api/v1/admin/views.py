"""
Admin API views.

Provisioning endpoints guarded by AdminSecretAuthenticationMiddleware.
"""

from asgiref.sync import async_to_sync
from drf_spectacular.utils import OpenApiParameter, extend_schema
from rest_framework import status
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from api.v1.admin.serializers import IssueLicenseRequestSerializer, IssueLicenseResponseSerializer
from core.instrumentation import Status, StatusCode, get_tracer
from licenses.application.commands.issue_license import IssueLicenseCommand
from licenses.application.handlers.issue_license_handler import IssueLicenseHandler
from licenses.infrastructure.repositories.django_license_repository import DjangoLicenseRepository

_license_repo = DjangoLicenseRepository()

tracer = get_tracer(__name__)


class IssueLicenseView(APIView):
    """View for issuing licenses."""

    @extend_schema(
        operation_id="issue_license",
        summary="Issue License",
        description="Issue a new license key to an identifier for a number of months.",
        tags=["Admin API"],
        parameters=[
            OpenApiParameter(
                name="X-Admin-Secret",
                type=str,
                location=OpenApiParameter.HEADER,
                required=True,
                description="Shared admin secret",
            ),
        ],
        request=IssueLicenseRequestSerializer,
        responses={
            201: IssueLicenseResponseSerializer,
            400: {"description": "Invalid request body"},
            401: {"description": "Missing or invalid admin secret"},
            409: {"description": "A license already exists for this identifier"},
        },
    )
    def post(self, request: Request) -> Response:
        """Issue a license."""
        return async_to_sync(self._handle_issue_license)(request)

    async def _handle_issue_license(self, request: Request) -> Response:
        """Async handler for issue license."""
        with tracer.start_as_current_span("issue_license") as span:
            span.set_attribute("operation", "issue_license")

            serializer = IssueLicenseRequestSerializer(data=request.data)
            if not serializer.is_valid():
                span.set_status(Status(StatusCode.ERROR, "Validation failed"))
                return Response(
                    {"message": "Invalid request body", "errors": serializer.errors},
                    status=status.HTTP_400_BAD_REQUEST,
                )

            data = serializer.validated_data
            span.set_attribute("identifier", data["identifier"])
            span.set_attribute("months", data["months"])

            handler = IssueLicenseHandler(license_repository=_license_repo)
            result = await handler.handle(
                IssueLicenseCommand(
                    identifier=data["identifier"],
                    months=data["months"],
                    software=data.get("software", []),
                    owner_email=data.get("ownerEmail"),
                )
            )

            response_serializer = IssueLicenseResponseSerializer(
                {
                    "id": result.id,
                    "licenseKey": result.license_key,
                    "identifier": result.identifier,
                    "expiresAt": result.expires_at,
                    "software": result.software,
                }
            )
            return Response(response_serializer.data, status=status.HTTP_201_CREATED)
