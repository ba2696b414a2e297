"""
Serializers for admin API endpoints.
"""

from rest_framework import serializers


class IssueLicenseRequestSerializer(serializers.Serializer):
    """Serializer for issue license request."""

    identifier = serializers.CharField(required=True, max_length=255)
    months = serializers.IntegerField(required=True, min_value=1, max_value=1200)
    software = serializers.ListField(
        child=serializers.CharField(max_length=100), required=False, default=list
    )
    ownerEmail = serializers.EmailField(required=False, allow_null=True)


class IssueLicenseResponseSerializer(serializers.Serializer):
    """Serializer for issue license response."""

    id = serializers.UUIDField()
    licenseKey = serializers.CharField()
    identifier = serializers.CharField()
    expiresAt = serializers.DateTimeField()
    software = serializers.ListField(child=serializers.CharField())
