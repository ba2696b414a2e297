"""
Serializers for the license verification endpoint.
"""

from rest_framework import serializers


class VerifyLicenseRequestSerializer(serializers.Serializer):
    """Serializer for verify license request."""

    licenseKey = serializers.CharField(required=True, max_length=100, trim_whitespace=True)
    software = serializers.CharField(
        required=False, allow_blank=True, allow_null=True, max_length=100
    )


class VerifyLicenseResponseSerializer(serializers.Serializer):
    """Serializer for verify license response."""

    message = serializers.CharField()
    blockedUntil = serializers.DateTimeField(required=False)
