"""Tests for sanitization utilities."""

import pytest

from stock_opinion.utils.sanitize import MAX_TICKER_LENGTH, normalize_symbol, sanitize_text


class TestSanitizeText:
    """Tests for sanitize_text function."""

    def test_none_passthrough(self):
        assert sanitize_text(None) is None

    def test_control_chars_removed(self):
        assert sanitize_text("Apple\x00 beats\x1f estimates\x7f") == "Apple beats estimates"

    def test_truncation(self):
        result = sanitize_text("a" * 300, max_length=200)
        assert result == "a" * 200 + "..."

    def test_whitespace_stripped(self):
        assert sanitize_text("  headline  ") == "headline"


class TestNormalizeSymbol:
    """Tests for normalize_symbol function."""

    @pytest.mark.parametrize(
        "raw,expected",
        [
            ("aapl", "AAPL"),
            ("  msft ", "MSFT"),
            ("brk.b", "BRK.B"),
            ("BF-B", "BF-B"),
            ("^gspc", "^GSPC"),
            ("eurusd=x", "EURUSD=X"),
            ("AAPL;DROP", "AAPLDROP"),
        ],
    )
    def test_canonical_form(self, raw, expected):
        assert normalize_symbol(raw) == expected

    @pytest.mark.parametrize("raw", [None, "", "   ", "$$$"])
    def test_empty_rejected(self, raw):
        with pytest.raises(ValueError, match="Invalid ticker symbol"):
            normalize_symbol(raw)

    def test_too_long_rejected(self):
        with pytest.raises(ValueError, match="too long"):
            normalize_symbol("A" * (MAX_TICKER_LENGTH + 1))
