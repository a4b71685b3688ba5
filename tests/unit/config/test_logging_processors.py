"""Unit tests for the structlog processors."""

from decimal import Decimal

from barter.config.logging import redact_secrets, stringify_decimals


class TestLogProcessors:
    def test_secrets_are_redacted_at_any_depth(self):
        event = {
            "event": "auth.token_issued",
            "access_token": "eyJ...",
            "request": {"headers": {"Authorization": "Bearer eyJ..."}},
        }

        result = redact_secrets(None, "info", event)

        assert result["access_token"] == "[REDACTED]"
        assert result["request"]["headers"]["Authorization"] == "[REDACTED]"
        assert result["event"] == "auth.token_issued"

    def test_decimals_render_as_plain_strings(self):
        event = {
            "event": "trade.proposed",
            "value_ratio": Decimal("1.50"),
            "prices": [Decimal("50"), 3],
        }

        result = stringify_decimals(None, "info", event)

        assert result["value_ratio"] == "1.50"
        assert result["prices"] == ["50", 3]
