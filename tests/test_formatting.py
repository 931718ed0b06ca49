"""Tests for display formatting."""

from stock_opinion.analysis.metrics import FinancialMetrics
from stock_opinion.utils.formatting import (
    NOT_AVAILABLE,
    format_metrics_for_display,
    format_money,
    format_percent,
    format_price,
    format_ratio,
    format_signed_percent,
)


class TestFormatMoney:
    """Tests for large currency amounts."""

    def test_suffixes(self):
        assert format_money(2_950_000_000_000) == "$2.95T"
        assert format_money(1_230_000_000) == "$1.23B"
        assert format_money(456_700_000) == "$456.70M"
        assert format_money(980) == "$980.00"

    def test_negative(self):
        assert format_money(-2_500_000_000) == "-$2.50B"

    def test_unavailable(self):
        assert format_money(None) == NOT_AVAILABLE


class TestFormatPercent:
    """Tests for percent formatting."""

    def test_fraction_scaled_once(self):
        """Fractions are multiplied by 100 here and nowhere else."""
        assert format_percent(0.1834) == "18.34%"
        assert format_percent(-0.05) == "-5.00%"

    def test_no_negative_zero(self):
        assert format_signed_percent(-0.001) == "0.00%"
        assert format_signed_percent(0.0) == "0.00%"

    def test_unavailable(self):
        assert format_percent(None) == NOT_AVAILABLE


class TestFormatPriceAndRatio:
    """Tests for price and ratio formatting."""

    def test_price(self):
        assert format_price(110.0) == "$110.00"
        assert format_price(None) == NOT_AVAILABLE

    def test_ratio(self):
        assert format_ratio(12.346) == "12.35"
        assert format_ratio(None) == NOT_AVAILABLE


class TestFormatMetricsForDisplay:
    """Tests for the metric-map projection."""

    def test_projection_by_kind(self):
        metrics = FinancialMetrics(
            market_cap=2_950_000_000_000,
            return_on_equity=0.1834,
            eps=6.44,
            trailing_pe=29.5,
            number_of_analyst_opinions=38,
            financial_currency="USD",
        ).to_dict()

        display = format_metrics_for_display(metrics)

        assert display["market_cap"] == "$2.95T"
        assert display["return_on_equity"] == "18.34%"
        assert display["eps"] == "$6.44"
        assert display["trailing_pe"] == "29.50"
        assert display["number_of_analyst_opinions"] == "38"
        assert display["financial_currency"] == "USD"

    def test_same_keys_and_unavailable(self):
        """Every field is projected; missing ones read N/A."""
        metrics = FinancialMetrics.empty().to_dict()
        display = format_metrics_for_display(metrics)
        assert display.keys() == metrics.keys()
        assert display["free_cash_flow"] == NOT_AVAILABLE
        assert display["beta"] == NOT_AVAILABLE

    def test_input_not_mutated(self):
        """The projection is one-way; the numeric map is left untouched."""
        metrics = FinancialMetrics(gross_margin=0.45).to_dict()
        format_metrics_for_display(metrics)
        assert metrics["gross_margin"] == 0.45
