"""
Unit tests for core value objects.
"""
import pytest

from core.domain.value_objects import (
    HISTORY_CAPACITY,
    BoundedHistory,
    Email,
    IPAddress,
    SoftwareEntitlement,
    VerificationDecision,
)


class TestEmail:
    """Tests for Email value object."""

    def test_valid_email(self):
        """Test valid email creation."""
        email = Email("owner@example.com")
        assert str(email) == "owner@example.com"

    def test_invalid_email_no_at(self):
        """Test invalid email without @."""
        with pytest.raises(ValueError, match="Invalid email"):
            Email("invalid-email")

    def test_invalid_email_empty(self):
        """Test invalid empty email."""
        with pytest.raises(ValueError, match="Invalid email"):
            Email("")


class TestIPAddress:
    """Tests for IPAddress value object."""

    def test_ipv4(self):
        assert str(IPAddress("10.0.0.1")) == "10.0.0.1"

    def test_strips_whitespace(self):
        assert IPAddress(" 10.0.0.1 ").value == "10.0.0.1"

    def test_ipv6_is_normalized(self):
        """Equivalent IPv6 spellings normalize to one value."""
        assert IPAddress("2001:0db8:0000:0000:0000:0000:0000:0001") == IPAddress("2001:db8::1")

    def test_invalid_address(self):
        with pytest.raises(ValueError, match="Invalid IP address"):
            IPAddress("not-an-ip")

    def test_empty_address(self):
        with pytest.raises(ValueError, match="cannot be empty"):
            IPAddress("  ")

    @pytest.mark.parametrize("raw", [None, "", "unknown", "999.1.1.1"])
    def test_parse_returns_none_for_garbage(self, raw):
        assert IPAddress.parse(raw) is None

    def test_parse_valid(self):
        assert IPAddress.parse("192.168.1.20") == IPAddress("192.168.1.20")


class TestBoundedHistory:
    """Tests for the BoundedHistory ring buffer."""

    def test_default_capacity(self):
        history = BoundedHistory()
        assert history.capacity == HISTORY_CAPACITY == 50
        assert len(history) == 0
        assert history.last is None

    def test_append_returns_new_buffer(self):
        history = BoundedHistory()
        appended = history.append("a")

        assert len(history) == 0
        assert appended.to_list() == ["a"]
        assert appended.last == "a"

    def test_evicts_oldest_when_full(self):
        history = BoundedHistory(capacity=3)
        for entry in ["a", "b", "c", "d"]:
            history = history.append(entry)

        assert history.to_list() == ["b", "c", "d"]

    def test_never_exceeds_capacity(self):
        history = BoundedHistory()
        for i in range(HISTORY_CAPACITY * 3):
            history = history.append(f"entry-{i}")
            assert len(history) <= HISTORY_CAPACITY

        assert len(history) == HISTORY_CAPACITY
        assert history.to_list()[0] == f"entry-{HISTORY_CAPACITY * 2}"
        assert history.last == f"entry-{HISTORY_CAPACITY * 3 - 1}"

    def test_append_distinct_skips_repeat_of_newest(self):
        history = BoundedHistory().append_distinct("1.1.1.1").append_distinct("1.1.1.1")
        assert history.to_list() == ["1.1.1.1"]

    def test_append_distinct_allows_non_consecutive_repeat(self):
        history = BoundedHistory()
        for ip in ["1.1.1.1", "2.2.2.2", "1.1.1.1"]:
            history = history.append_distinct(ip)

        assert history.to_list() == ["1.1.1.1", "2.2.2.2", "1.1.1.1"]

    def test_of_trims_oversized_input(self):
        history = BoundedHistory.of([str(i) for i in range(60)])
        assert len(history) == 50
        assert history.to_list()[0] == "10"

    def test_of_none(self):
        assert BoundedHistory.of(None).to_list() == []

    def test_invalid_capacity(self):
        with pytest.raises(ValueError, match="capacity"):
            BoundedHistory(capacity=0)

    def test_equality_by_value(self):
        assert BoundedHistory.of(["a", "b"]) == BoundedHistory().append("a").append("b")


class TestSoftwareEntitlement:
    """Tests for SoftwareEntitlement value object."""

    def test_allows_member(self):
        entitlement = SoftwareEntitlement(frozenset({"A", "B"}))
        assert entitlement.allows("A")
        assert "B" in entitlement
        assert not entitlement.allows("C")

    def test_strips_and_drops_blank_names(self):
        entitlement = SoftwareEntitlement(frozenset({" A ", "", "  "}))
        assert entitlement.to_list() == ["A"]
        assert len(entitlement) == 1

    def test_to_list_sorted(self):
        assert SoftwareEntitlement(frozenset({"b", "a"})).to_list() == ["a", "b"]


class TestVerificationDecision:
    """Tests for VerificationDecision enum."""

    def test_values(self):
        assert str(VerificationDecision.ALLOWED) == "allowed"
        assert VerificationDecision.DENIED_IP_MISMATCH.value == "denied_ip_mismatch"

    def test_retry_exhausted_is_not_a_policy_outcome(self):
        assert not VerificationDecision.RETRY_EXHAUSTED.is_policy_outcome
        assert all(
            decision.is_policy_outcome
            for decision in VerificationDecision
            if decision is not VerificationDecision.RETRY_EXHAUSTED
        )
