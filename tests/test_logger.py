"""Tests for the log processors."""

from vendor_pricing.config import LOG_VALUE_MAX_CHARS
from vendor_pricing.pricing.errors import RowParseError
from vendor_pricing.utils.logger import clip_long_values


def test_long_values_are_clipped():
    event = {"event": "ingest.row_rejected", "reason": "X" * (LOG_VALUE_MAX_CHARS + 25), "line": 3}
    out = clip_long_values(None, "debug", event)
    assert out["reason"] == "X" * LOG_VALUE_MAX_CHARS + "...(+25 chars)"
    assert out["line"] == 3
    assert out["event"] == "ingest.row_rejected"


def test_short_values_untouched():
    event = {"event": "ingest.complete", "tier": "research"}
    assert clip_long_values(None, "info", dict(event)) == event


def test_parse_error_message_shows_a_prefix_of_huge_cells():
    err = RowParseError(2, "size_mg", "9" * 1000 + "x", "a number")
    assert len(str(err)) < 150
    assert err.value == "9" * 1000 + "x"
