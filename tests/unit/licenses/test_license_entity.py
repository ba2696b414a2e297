"""
Unit tests for LicenseRecord domain entity and LicenseKey.
"""

import re
from datetime import datetime, timedelta, timezone

import pytest

from core.domain.value_objects import BoundedHistory
from licenses.domain.license import LicenseRecord
from licenses.domain.license_key import LicenseKey, generate_license_key, hash_license_key


class TestLicenseRecordEntity:
    """Tests for LicenseRecord domain entity."""

    def test_create_defaults(self):
        """A freshly issued record has no binding and no failure state."""
        expires_at = datetime.now(timezone.utc) + timedelta(days=30)

        record = LicenseRecord.create(
            identifier="  acme-1 ",
            expires_at=expires_at,
            allowed_software=["editor"],
            owner_email="owner@example.com",
        )

        assert record.identifier == "acme-1"
        assert record.expires_at == expires_at
        assert record.allowed_software.to_list() == ["editor"]
        assert str(record.owner_email) == "owner@example.com"
        assert record.last_activation_ip is None
        assert record.last_activation_at == record.created_at
        assert record.failure_count == 0
        assert len(record.failure_history) == 0
        assert len(record.ip_history) == 0
        assert record.blocked_until is None
        assert record.revision == 0

    def test_create_generates_key_with_prefix(self):
        record = LicenseRecord.create(
            identifier="acme-2",
            expires_at=datetime.now(timezone.utc),
            key_prefix="ZZ",
        )
        assert re.fullmatch(r"ZZ(-[A-Z0-9]{4}){4}", record.license_key.key)

    def test_empty_identifier_rejected(self):
        with pytest.raises(ValueError, match="cannot be empty"):
            LicenseRecord.create(identifier="  ", expires_at=datetime.now(timezone.utc))

    def test_long_identifier_rejected(self):
        with pytest.raises(ValueError, match="too long"):
            LicenseRecord.create(identifier="x" * 256, expires_at=datetime.now(timezone.utc))

    def test_negative_failure_count_rejected(self, make_record):
        with pytest.raises(ValueError, match="Failure count"):
            make_record(failure_count=-1)

    def test_is_blocked(self, make_record, now):
        record = make_record(blocked_until=now + timedelta(minutes=1))
        assert record.is_blocked(now)
        assert not record.is_blocked(now + timedelta(minutes=1))

    def test_not_blocked_without_lockout(self, make_record, now):
        assert not make_record().is_blocked(now)

    def test_is_expired_is_strict(self, make_record, now):
        record = make_record(expires_at=now)
        assert not record.is_expired(now)
        assert record.is_expired(now + timedelta(microseconds=1))

    def test_hours_since_activation(self, make_record, now):
        record = make_record(hours_since_activation=30)
        assert record.hours_since_activation(now) == pytest.approx(30)

    def test_with_changes_is_a_copy(self, make_record):
        record = make_record()
        changed = record.with_changes(failure_count=3, failure_history=BoundedHistory.of(["x"]))

        assert record.failure_count == 0
        assert changed.failure_count == 3
        assert changed.id == record.id

    def test_committed_bumps_revision(self, make_record, now):
        record = make_record()
        committed = record.committed(now)

        assert committed.revision == record.revision + 1
        assert committed.updated_at == now


class TestLicenseKey:
    """Tests for LicenseKey value object."""

    def test_generate_format(self):
        assert re.fullmatch(r"LV(-[A-Z0-9]{4}){4}", generate_license_key("LV"))

    def test_generated_keys_differ(self):
        assert LicenseKey.generate("LV") != LicenseKey.generate("LV")

    def test_verify_key(self):
        raw = "LV-AAAA-BBBB-CCCC-DDDD"
        key = LicenseKey(key=raw, key_hash=hash_license_key(raw))
        assert key.verify_key(raw)
        assert not key.verify_key("LV-AAAA-BBBB-CCCC-DDDE")

    def test_invalid_hash_rejected(self):
        with pytest.raises(ValueError, match="Invalid key hash"):
            LicenseKey(key="LV-AAAA", key_hash="abc")

    def test_str(self):
        assert str(LicenseKey(key="LV-1", key_hash=hash_license_key("LV-1"))) == "LV-1"
