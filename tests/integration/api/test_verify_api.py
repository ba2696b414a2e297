"""
Integration tests for the license verification API.
"""

from datetime import timedelta

import pytest
from django.db import InterfaceError
from django.urls import reverse
from django.utils import timezone

from licenses.infrastructure.models import AuditLog
from licenses.infrastructure.models import LicenseRecord as LicenseRecordModel


def verify_url():
    return reverse("licenses:verify-license")


def post_verify(client, key, ip, software=None):
    body = {"licenseKey": key}
    if software is not None:
        body["software"] = software
    return client.post(verify_url(), body, format="json", HTTP_X_FORWARDED_FOR=ip)


@pytest.mark.django_db
@pytest.mark.integration
class TestVerifyLicenseAPI:
    """Tests for POST /api/v1/licenses/verify."""

    def test_valid_license(self, api_client, db_record):
        response = post_verify(api_client, db_record.license_key.key, "1.1.1.1", "editor")

        assert response.status_code == 200
        assert response.json() == {"message": "License is valid"}
        assert "X-Correlation-ID" in response

    def test_unknown_key(self, api_client, db):
        response = post_verify(api_client, "LV-0000-0000-0000-0000", "1.1.1.1")

        assert response.status_code == 404
        assert response.json()["message"] == "License key not found"

    def test_software_not_covered(self, api_client, db_record):
        response = post_verify(api_client, db_record.license_key.key, "1.1.1.1", "compiler")

        assert response.status_code == 403
        assert response.json()["message"] == "License does not cover the requested software"

    def test_missing_license_key(self, api_client, db):
        response = api_client.post(verify_url(), {}, format="json")

        assert response.status_code == 400
        body = response.json()
        assert body["message"] == "Invalid request body"
        assert "licenseKey" in body["errors"]

    def test_expired_license(self, api_client, db_record):
        LicenseRecordModel.objects.filter(id=db_record.id).update(
            expires_at=timezone.now() - timedelta(days=1)
        )

        response = post_verify(api_client, db_record.license_key.key, "1.1.1.1")

        assert response.status_code == 403
        assert response.json()["message"] == "License has expired"

    def test_mismatch_then_blocked(self, api_client, db_record, mailoutbox):
        key = db_record.license_key.key

        first = post_verify(api_client, key, "2.2.2.2", "editor")
        second = post_verify(api_client, key, "1.1.1.1")

        assert first.status_code == 403
        assert first.json() == {
            "message": "License is already in use from another address; it is now blocked"
        }

        assert second.status_code == 403
        body = second.json()
        assert body["message"] == "License is temporarily blocked"
        assert "blockedUntil" in body

        stored = LicenseRecordModel.objects.get(id=db_record.id)
        assert stored.failure_count == 1
        assert stored.revision == 1
        assert stored.last_activation_ip == "1.1.1.1"
        assert len(stored.failure_history) == 1
        assert body["blockedUntil"] == stored.blocked_until.isoformat()

        assert len(mailoutbox) == 1
        message = mailoutbox[0]
        assert "db-workstation" in message.subject
        assert "2.2.2.2" in message.body
        assert message.to == ["security@example.com"]

        assert AuditLog.objects.filter(
            entity_id=db_record.id, action="LicenseLockedOut"
        ).count() == 1

    def test_lockout_answers_when_broker_is_down(self, api_client, db_record, monkeypatch):
        class UnreachableBroker:
            def apply_async(self, args=None, kwargs=None, **options):
                raise ConnectionRefusedError("broker down")

        monkeypatch.setattr("core.tasks.send_lockout_notification_task", UnreachableBroker())

        response = post_verify(api_client, db_record.license_key.key, "2.2.2.2")

        assert response.status_code == 403
        assert response.json()["message"] == (
            "License is already in use from another address; it is now blocked"
        )
        assert LicenseRecordModel.objects.get(id=db_record.id).failure_count == 1

    def test_rebind_after_grace_window(self, api_client, db_record):
        LicenseRecordModel.objects.filter(id=db_record.id).update(
            last_activation_at=timezone.now() - timedelta(hours=30)
        )

        response = post_verify(api_client, db_record.license_key.key, "2.2.2.2")

        assert response.status_code == 200
        stored = LicenseRecordModel.objects.get(id=db_record.id)
        assert stored.last_activation_ip == "2.2.2.2"
        assert stored.ip_history == ["2.2.2.2"]
        assert stored.failure_count == 0
        assert AuditLog.objects.filter(action="LicenseRebound").count() == 1

    def test_first_forwarded_address_is_used(self, api_client, db_record):
        response = post_verify(
            api_client, db_record.license_key.key, "1.1.1.1, 10.0.0.1, 10.0.0.2"
        )
        assert response.status_code == 200

    def test_source_port_change_is_same_origin(self, api_client, db_record):
        first = post_verify(api_client, db_record.license_key.key, "1.1.1.1:5678")
        second = post_verify(api_client, db_record.license_key.key, "1.1.1.1:40001")

        assert first.status_code == 200
        assert second.status_code == 200
        stored = LicenseRecordModel.objects.get(id=db_record.id)
        assert stored.failure_count == 0
        assert stored.last_activation_ip == "1.1.1.1"

    def test_remote_addr_when_forwarding_untrusted(self, api_client, db_record, settings):
        settings.LICENSE_TRUST_FORWARDED_FOR = False

        response = api_client.post(
            verify_url(),
            {"licenseKey": db_record.license_key.key},
            format="json",
            HTTP_X_FORWARDED_FOR="1.1.1.1",
            REMOTE_ADDR="9.9.9.9",
        )

        assert response.status_code == 403
        stored = LicenseRecordModel.objects.get(id=db_record.id)
        assert "9.9.9.9" in stored.failure_history[0]

    def test_retry_exhausted(self, api_client, db_record, monkeypatch):
        from licenses.infrastructure.repositories.django_license_repository import (
            DjangoLicenseRepository,
        )

        async def always_conflict(self, license_id, changes, expected_revision):
            return False

        monkeypatch.setattr(DjangoLicenseRepository, "conditional_write", always_conflict)

        response = post_verify(api_client, db_record.license_key.key, "2.2.2.2")

        assert response.status_code == 500
        assert response["Retry-After"] == "1"
        assert response.json()["message"] == (
            "License verification is temporarily unavailable, please retry"
        )
        assert LicenseRecordModel.objects.get(id=db_record.id).failure_count == 0

    def test_lost_connection_asks_for_retry(self, api_client, db_record, monkeypatch):
        def closed_connection(*args, **kwargs):
            raise InterfaceError("connection already closed")

        monkeypatch.setattr(LicenseRecordModel.objects, "filter", closed_connection)

        response = post_verify(api_client, db_record.license_key.key, "1.1.1.1")

        assert response.status_code == 500
        assert response["Retry-After"] == "1"
        assert response.json() == {
            "message": "License verification is temporarily unavailable, please retry"
        }


@pytest.mark.django_db
@pytest.mark.integration
class TestHealthAPI:
    """Tests for health endpoints."""

    def test_health(self, api_client):
        response = api_client.get(reverse("health"))
        assert response.status_code == 200
        assert response.json()["service"] == "license-verification-service"

    def test_ready(self, api_client):
        response = api_client.get(reverse("ready"))
        assert response.status_code == 200
        assert response.json()["checks"] == {"database": True, "cache": True}