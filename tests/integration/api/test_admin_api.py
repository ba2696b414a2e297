"""
Integration tests for the admin issuance API.
"""

import re

import pytest
from django.urls import reverse

from licenses.infrastructure.models import AuditLog
from licenses.infrastructure.models import LicenseRecord as LicenseRecordModel


def issue_url():
    return reverse("admin-api:issue-license")


@pytest.mark.django_db
@pytest.mark.integration
class TestIssueLicenseAPI:
    """Tests for POST /api/v1/admin/licenses."""

    def test_issue_license(self, admin_client):
        response = admin_client.post(
            issue_url(),
            {
                "identifier": "acme-workstation-7",
                "months": 6,
                "software": ["editor"],
                "ownerEmail": "it@acme.example",
            },
            format="json",
        )

        assert response.status_code == 201
        body = response.json()
        assert body["identifier"] == "acme-workstation-7"
        assert body["software"] == ["editor"]
        assert re.fullmatch(r"LV(-[A-Z0-9]{4}){4}", body["licenseKey"])

        stored = LicenseRecordModel.objects.get(identifier="acme-workstation-7")
        assert str(stored.id) == body["id"]
        assert stored.key == body["licenseKey"]
        assert stored.owner_email == "it@acme.example"
        assert stored.last_activation_ip is None
        assert AuditLog.objects.filter(action="LicenseIssued").count() == 1

    def test_issued_key_verifies(self, admin_client, api_client):
        issued = admin_client.post(
            issue_url(), {"identifier": "acme-8", "months": 1}, format="json"
        ).json()

        response = api_client.post(
            reverse("licenses:verify-license"),
            {"licenseKey": issued["licenseKey"]},
            format="json",
            HTTP_X_FORWARDED_FOR="5.5.5.5",
        )

        assert response.status_code == 200
        assert LicenseRecordModel.objects.get(identifier="acme-8").last_activation_ip == "5.5.5.5"

    def test_missing_secret(self, api_client, db):
        response = api_client.post(
            issue_url(), {"identifier": "acme-9", "months": 1}, format="json"
        )

        assert response.status_code == 401
        assert response.json()["error"]["code"] == "INVALID_ADMIN_SECRET"
        assert not LicenseRecordModel.objects.exists()

    def test_wrong_secret(self, api_client, db):
        api_client.credentials(HTTP_X_ADMIN_SECRET="guess")

        response = api_client.post(
            issue_url(), {"identifier": "acme-9", "months": 1}, format="json"
        )

        assert response.status_code == 401

    def test_unconfigured_secret_rejects(self, admin_client, settings):
        settings.LICENSE_ADMIN_SECRET = ""

        response = admin_client.post(
            issue_url(), {"identifier": "acme-9", "months": 1}, format="json"
        )

        assert response.status_code == 401

    def test_duplicate_identifier(self, admin_client, db_record):
        response = admin_client.post(
            issue_url(), {"identifier": "db-workstation", "months": 1}, format="json"
        )

        assert response.status_code == 409
        assert response.json()["error"]["code"] == "DUPLICATE_LICENSE"

    @pytest.mark.parametrize(
        "payload",
        [
            {"months": 1},
            {"identifier": "acme-10"},
            {"identifier": "acme-10", "months": 0},
            {"identifier": "acme-10", "months": 1, "ownerEmail": "not-an-email"},
        ],
    )
    def test_invalid_body(self, admin_client, db, payload):
        response = admin_client.post(issue_url(), payload, format="json")

        assert response.status_code == 400
        assert response.json()["message"] == "Invalid request body"
