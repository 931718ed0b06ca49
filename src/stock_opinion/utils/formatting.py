"""Display formatting for the presentation boundary.

One-directional: numbers in, strings out. Nothing produced here is ever
parsed back into the metric map.
"""

from typing import Any

from stock_opinion.utils.normalize import parse_number

NOT_AVAILABLE = "N/A"

# Metric field -> display kind
DISPLAY_KINDS: dict[str, str] = {
    "market_cap": "money",
    "total_cash": "money",
    "total_debt": "money",
    "total_revenue": "money",
    "ebitda": "money",
    "gross_profits": "money",
    "free_cash_flow": "money",
    "operating_cash_flow": "money",
    "dividend_yield": "percent",
    "return_on_equity": "percent",
    "return_on_assets": "percent",
    "operating_margin": "percent",
    "profit_margin": "percent",
    "gross_margin": "percent",
    "ebitda_margin": "percent",
    "revenue_growth": "percent",
    "earnings_growth": "percent",
    "payout_ratio": "percent",
    "eps": "price",
    "forward_eps": "price",
    "dividend_rate": "price",
    "fifty_two_week_high": "price",
    "fifty_two_week_low": "price",
    "revenue_per_share": "price",
    "total_cash_per_share": "price",
    "target_mean_price": "price",
    "target_high_price": "price",
    "target_low_price": "price",
    "target_median_price": "price",
    "number_of_analyst_opinions": "count",
}


def format_money(value: float | None) -> str:
    """Format a large currency amount: $2.95T, $1.23B, $456.70M, $980.00."""
    if value is None:
        return NOT_AVAILABLE
    sign = "-" if value < 0 else ""
    magnitude = abs(value)
    for divisor, suffix in ((1e12, "T"), (1e9, "B"), (1e6, "M")):
        if magnitude >= divisor:
            return f"{sign}${magnitude / divisor:.2f}{suffix}"
    return f"{sign}${magnitude:.2f}"


def format_price(value: float | None) -> str:
    """Format a per-share price as $123.45."""
    if value is None:
        return NOT_AVAILABLE
    return f"${value:.2f}"


def format_percent(fraction: float | None) -> str:
    """Format a fraction as a percent string: 0.1834 -> '18.34%'."""
    if fraction is None:
        return NOT_AVAILABLE
    return format_signed_percent(fraction * 100)


def format_signed_percent(percent: float) -> str:
    """Format an already-scaled percent, keeping the sign but never '-0.00%'."""
    rounded = round(percent, 2)
    if rounded == 0:
        rounded = 0.0
    return f"{rounded:.2f}%"


def format_ratio(value: float | None) -> str:
    """Format a plain multiple (P/E, beta, current ratio) to 2 decimals."""
    if value is None:
        return NOT_AVAILABLE
    return f"{value:.2f}"


def format_metrics_for_display(metrics: dict[str, Any]) -> dict[str, str]:
    """Project a normalized metric map into display strings.

    Args:
        metrics: Field -> float | str | None map (FinancialMetrics.to_dict())

    Returns:
        Field -> display string map with the same keys
    """
    display: dict[str, str] = {}
    for field, raw in metrics.items():
        if isinstance(raw, str):
            display[field] = raw
            continue
        value = parse_number(raw)
        kind = DISPLAY_KINDS.get(field)
        if kind == "money":
            display[field] = format_money(value)
        elif kind == "percent":
            display[field] = format_percent(value)
        elif kind == "price":
            display[field] = format_price(value)
        elif kind == "count":
            display[field] = NOT_AVAILABLE if value is None else str(int(value))
        else:
            display[field] = format_ratio(value)
    return display
