"""Tests for validators module."""

from datetime import datetime, timezone

import pytest

from stock_opinion.utils.validators import BarParams


class TestBarParams:
    """Tests for BarParams class."""

    def test_symbol_normalized(self):
        params = BarParams(
            symbol="aapl",
            start=datetime(2024, 1, 1),
            end=datetime(2024, 7, 1),
        )
        assert params.symbol == "AAPL"
        assert params.interval == "1d"

    def test_invalid_interval(self):
        with pytest.raises(ValueError, match="Invalid interval"):
            BarParams(
                symbol="AAPL",
                start=datetime(2024, 1, 1),
                end=datetime(2024, 7, 1),
                interval="7m",
            )

    def test_start_must_precede_end(self):
        with pytest.raises(ValueError, match="must be before"):
            BarParams(
                symbol="AAPL",
                start=datetime(2024, 7, 1),
                end=datetime(2024, 7, 1),
            )

    def test_immutable(self):
        params = BarParams(symbol="AAPL", start=datetime(2024, 1, 1), end=datetime(2024, 2, 1))
        with pytest.raises(AttributeError):
            params.symbol = "MSFT"


class TestLookback:
    """Tests for BarParams.lookback."""

    NOW = datetime(2024, 7, 15, 14, 30, tzinfo=timezone.utc)

    def test_daily_window_whole_days(self):
        """Daily windows run from midnight `days` ago through tomorrow."""
        params = BarParams.lookback("AAPL", days=180, now=self.NOW)

        kwargs = params.to_yf_kwargs()
        assert kwargs["start"] == "2024-01-17"
        assert kwargs["end"] == "2024-07-16"
        assert kwargs["interval"] == "1d"
        assert kwargs["auto_adjust"] is True
        assert not params.is_intraday

    def test_intraday_window_exact(self):
        """Intraday windows keep exact timestamps."""
        params = BarParams.lookback("AAPL", days=1, interval="5m", now=self.NOW)

        assert params.is_intraday
        assert params.end == self.NOW
        assert params.start == datetime(2024, 7, 14, 14, 30, tzinfo=timezone.utc)
        assert params.to_yf_kwargs()["start"] == params.start

    def test_invalid_symbol(self):
        with pytest.raises(ValueError):
            BarParams.lookback("", days=1, now=self.NOW)
