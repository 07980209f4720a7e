"""
Unit tests for client identification and the RateLimiter.
"""

import pytest
from unittest.mock import MagicMock

from service_gatekeeper.app.ratelimit import (
    BucketRegistry,
    ClientIdentifier,
    RateLimitDecision,
    RateLimiter,
    TokenBucket,
)


class TestClientIdentifier:
    """Test cases for ClientIdentifier."""

    @pytest.fixture
    def identifier(self):
        return ClientIdentifier()

    def test_uses_peer_address_without_header(self, identifier):
        assert identifier.identify({}, "192.0.2.10") == "192.0.2.10"

    def test_first_forwarded_entry_wins(self, identifier):
        headers = {"X-Forwarded-For": "203.0.113.7, 10.0.0.1, 10.0.0.2"}

        assert identifier.identify(headers, "192.0.2.10") == "203.0.113.7"

    def test_forwarded_entry_is_trimmed(self, identifier):
        headers = {"X-Forwarded-For": "  203.0.113.7  ,10.0.0.1"}

        assert identifier.identify(headers, "192.0.2.10") == "203.0.113.7"

    def test_forwarded_value_used_verbatim(self, identifier):
        """Test no address validation happens on the header value."""
        headers = {"X-Forwarded-For": "not-an-ip"}

        assert identifier.identify(headers, "192.0.2.10") == "not-an-ip"

    def test_empty_header_falls_back_to_peer(self, identifier):
        assert identifier.identify({"X-Forwarded-For": " , 10.0.0.1"}, "192.0.2.10") == "192.0.2.10"

    def test_unknown_when_nothing_available(self, identifier):
        assert identifier.identify({}, None) == "unknown"

    def test_custom_header_name(self):
        identifier = ClientIdentifier("X-Real-IP")
        headers = {"X-Forwarded-For": "203.0.113.7", "X-Real-IP": "198.51.100.4"}

        assert identifier.identify(headers, None) == "198.51.100.4"


class TestRateLimiter:
    """Test cases for RateLimiter."""

    @pytest.fixture
    def registry(self):
        return BucketRegistry(lambda: TokenBucket(capacity=3, interval_seconds=60))

    @pytest.fixture
    def rate_limiter(self, registry):
        limiter = RateLimiter(registry)
        limiter.logger = MagicMock()
        return limiter

    def test_allows_until_capacity(self, rate_limiter):
        decisions = [rate_limiter.check({}, "192.0.2.10") for _ in range(4)]

        assert [d.allowed for d in decisions] == [True, True, True, False]
        assert decisions[0] == RateLimitDecision(
            allowed=True, client_key="192.0.2.10", remaining=2, limit=3
        )
        assert decisions[-1].remaining == 0

    def test_keys_are_independent(self, rate_limiter):
        for _ in range(3):
            rate_limiter.check({}, "192.0.2.10")

        assert rate_limiter.check({}, "192.0.2.10").allowed is False
        assert rate_limiter.check({}, "192.0.2.11").allowed is True

    def test_forwarded_header_selects_bucket(self, rate_limiter, registry):
        rate_limiter.check({"X-Forwarded-For": "203.0.113.7"}, "192.0.2.10")

        assert "203.0.113.7" in registry
        assert "192.0.2.10" not in registry

    def test_rejection_is_logged(self, rate_limiter):
        for _ in range(4):
            rate_limiter.check({}, "192.0.2.10")

        rate_limiter.logger.warning.assert_called_once()
        _, kwargs = rate_limiter.logger.warning.call_args
        assert kwargs["client_key"] == "192.0.2.10"
        assert kwargs["limit"] == 3

    def test_admission_is_not_logged(self, rate_limiter):
        rate_limiter.check({}, "192.0.2.10")

        rate_limiter.logger.warning.assert_not_called()
