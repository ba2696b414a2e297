"""
Unit tests for request middleware helpers.
"""
import pytest
from django.test import RequestFactory

from core.middleware.client_ip import resolve_client_ip, strip_port
from core.middleware.metrics import normalize_endpoint


@pytest.fixture
def rf():
    return RequestFactory()


class TestResolveClientIP:
    """Tests for resolve_client_ip."""

    def test_remote_addr(self, rf, settings):
        settings.LICENSE_TRUST_FORWARDED_FOR = False
        request = rf.post("/", REMOTE_ADDR="10.1.2.3", HTTP_X_FORWARDED_FOR="8.8.8.8")
        assert resolve_client_ip(request) == "10.1.2.3"

    def test_first_forwarded_entry(self, rf, settings):
        settings.LICENSE_TRUST_FORWARDED_FOR = True
        request = rf.post("/", HTTP_X_FORWARDED_FOR=" 8.8.8.8 , 10.0.0.1")
        assert resolve_client_ip(request) == "8.8.8.8"

    def test_falls_back_without_header(self, rf, settings):
        settings.LICENSE_TRUST_FORWARDED_FOR = True
        request = rf.post("/", REMOTE_ADDR="10.1.2.3")
        assert resolve_client_ip(request) == "10.1.2.3"

    def test_custom_header(self, rf, settings):
        settings.LICENSE_TRUST_FORWARDED_FOR = True
        settings.LICENSE_CLIENT_IP_HEADER = "X-Real-IP"
        request = rf.post("/", HTTP_X_REAL_IP="7.7.7.7", HTTP_X_FORWARDED_FOR="8.8.8.8")
        assert resolve_client_ip(request) == "7.7.7.7"

    def test_ipv6_normalized(self, rf, settings):
        settings.LICENSE_TRUST_FORWARDED_FOR = False
        request = rf.post("/", REMOTE_ADDR="2001:0db8:0:0:0:0:0:0001")
        assert resolve_client_ip(request) == "2001:db8::1"

    def test_non_address_used_verbatim(self, rf, settings):
        settings.LICENSE_TRUST_FORWARDED_FOR = True
        request = rf.post("/", HTTP_X_FORWARDED_FOR="unix-socket")
        assert resolve_client_ip(request) == "unix-socket"

    def test_missing_origin(self, rf, settings):
        settings.LICENSE_TRUST_FORWARDED_FOR = False
        request = rf.post("/", REMOTE_ADDR="")
        assert resolve_client_ip(request) is None

    @pytest.mark.parametrize(
        "forwarded,expected",
        [
            ("1.2.3.4:5678", "1.2.3.4"),
            ("[2001:db8::1]:443", "2001:db8::1"),
            ("[2001:0db8::0001]", "2001:db8::1"),
            ("2001:db8::1", "2001:db8::1"),
            ("::1", "::1"),
        ],
    )
    def test_port_suffix_dropped(self, rf, settings, forwarded, expected):
        settings.LICENSE_TRUST_FORWARDED_FOR = True
        request = rf.post("/", HTTP_X_FORWARDED_FOR=forwarded)
        assert resolve_client_ip(request) == expected

    def test_same_host_on_other_ports(self, rf, settings):
        settings.LICENSE_TRUST_FORWARDED_FOR = True
        first = rf.post("/", HTTP_X_FORWARDED_FOR="1.2.3.4:5678")
        second = rf.post("/", HTTP_X_FORWARDED_FOR="1.2.3.4:40000, 10.0.0.1")
        assert resolve_client_ip(first) == resolve_client_ip(second)


@pytest.mark.parametrize(
    "raw,expected",
    [
        ("10.0.0.1:80", "10.0.0.1"),
        ("[::1]:8080", "::1"),
        ("fe80::1", "fe80::1"),
        ("unix-socket", "unix-socket"),
        ("proxy.local:http", "proxy.local:http"),
    ],
)
def test_strip_port(raw, expected):
    assert strip_port(raw) == expected


@pytest.mark.parametrize(
    "path,expected",
    [
        ("/api/v1/licenses/verify", "/api/v1/licenses/verify"),
        ("/admin/licenses/licenserecord/3fa85f64-5717-4562-b3fc-2c963f66afa6/change/",
         "/admin/licenses/licenserecord/{id}/change/"),
        ("/health/", "/health/"),
    ],
)
def test_normalize_endpoint(path, expected):
    assert normalize_endpoint(path) == expected
