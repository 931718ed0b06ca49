"""Price-target estimation.

When there is no analyst consensus target, a fair price is projected from
next-year EPS and a P/E multiple, falling back through price-to-sales, the
analyst mean and finally the current price. The estimator is total: it
always returns a finite, non-negative number.
"""

import math
from dataclasses import dataclass

from stock_opinion.analysis.metrics import FinancialMetrics
from stock_opinion.utils.normalize import parse_number

DEFAULT_PE_MULTIPLE = 15.0
# Growth is a fraction; -1.0 (-100%) takes projected EPS to zero, never below
GROWTH_FLOOR = -1.0

# Methods, in fallback order
METHOD_ANALYST_MEAN = "analyst_mean"
METHOD_ANALYST_MEDIAN = "analyst_median"
METHOD_PE_MULTIPLE = "pe_multiple"
METHOD_PRICE_TO_SALES = "price_to_sales"
METHOD_CURRENT_PRICE = "current_price"


@dataclass(frozen=True)
class PriceTargetEstimate:
    """A price target and the method that produced it."""

    value: float
    method: str


def _pos(value: float | None) -> float | None:
    """Return value if it is a finite positive number, else None."""
    parsed = parse_number(value)
    if parsed is None or parsed <= 0:
        return None
    return parsed


def _finite_or_zero(value: float) -> float:
    if math.isnan(value) or math.isinf(value) or value < 0:
        return 0.0
    return value


def choose_pe_multiple(forward_pe: float | None, trailing_pe: float | None) -> float:
    """Forward P/E if positive, else trailing P/E if positive, else the default multiple."""
    return _pos(forward_pe) or _pos(trailing_pe) or DEFAULT_PE_MULTIPLE


def _consensus_or_current(
    target_mean: float | None,
    current_price: float | None,
) -> PriceTargetEstimate:
    mean = _pos(target_mean)
    if mean is not None:
        return PriceTargetEstimate(mean, METHOD_ANALYST_MEAN)
    return PriceTargetEstimate(_pos(current_price) or 0.0, METHOD_CURRENT_PRICE)


def estimate(
    eps: float | None = None,
    trailing_pe: float | None = None,
    forward_pe: float | None = None,
    earnings_growth: float | None = None,
    target_mean: float | None = None,
    current_price: float | None = None,
    price_to_sales: float | None = None,
    revenue_per_share: float | None = None,
) -> PriceTargetEstimate:
    """
    Estimate a price target with its method.

    Args:
        eps: Trailing EPS
        trailing_pe: Trailing P/E
        forward_pe: Forward P/E
        earnings_growth: Earnings growth as a fraction (0.10 = 10%)
        target_mean: Analyst mean target, used only as a fallback here
        current_price: Current price, the last-resort fallback
        price_to_sales: Price-to-sales ratio
        revenue_per_share: Revenue per share

    Returns:
        PriceTargetEstimate with a finite, non-negative value
    """
    multiple = choose_pe_multiple(forward_pe, trailing_pe)
    growth = max(parse_number(earnings_growth) or 0.0, GROWTH_FLOOR)
    projected_eps = (parse_number(eps) or 0.0) * (1 + growth)

    if projected_eps <= 0:
        rps = _pos(revenue_per_share)
        ps = _pos(price_to_sales)
        if rps is not None and ps is not None:
            value = _finite_or_zero(rps * ps)
            if value > 0:
                return PriceTargetEstimate(value, METHOD_PRICE_TO_SALES)
        return _consensus_or_current(target_mean, current_price)

    value = _finite_or_zero(projected_eps * multiple)
    if value <= 0:
        return _consensus_or_current(target_mean, current_price)
    return PriceTargetEstimate(value, METHOD_PE_MULTIPLE)


def estimate_price_target(
    eps: float | None = None,
    trailing_pe: float | None = None,
    forward_pe: float | None = None,
    earnings_growth: float | None = None,
    target_mean: float | None = None,
    current_price: float | None = None,
    price_to_sales: float | None = None,
    revenue_per_share: float | None = None,
) -> float:
    """Estimate a price target. Same inputs as :func:`estimate`, value only."""
    return estimate(
        eps=eps,
        trailing_pe=trailing_pe,
        forward_pe=forward_pe,
        earnings_growth=earnings_growth,
        target_mean=target_mean,
        current_price=current_price,
        price_to_sales=price_to_sales,
        revenue_per_share=revenue_per_share,
    ).value


def resolve_price_target(
    metrics: FinancialMetrics,
    current_price: float | None,
) -> PriceTargetEstimate:
    """
    Pick the price target for a symbol.

    Analyst consensus wins (mean, then median); otherwise the estimator runs.
    """
    mean = _pos(metrics.target_mean_price)
    if mean is not None:
        return PriceTargetEstimate(mean, METHOD_ANALYST_MEAN)
    median = _pos(metrics.target_median_price)
    if median is not None:
        return PriceTargetEstimate(median, METHOD_ANALYST_MEDIAN)

    return estimate(
        eps=metrics.eps,
        trailing_pe=metrics.trailing_pe,
        forward_pe=metrics.forward_pe,
        earnings_growth=metrics.earnings_growth,
        target_mean=metrics.target_mean_price,
        current_price=current_price,
        price_to_sales=metrics.price_to_sales,
        revenue_per_share=metrics.revenue_per_share,
    )


def compute_upside(price_target: float, current_price: float | None) -> float:
    """Upside as a fraction of current price; 0 when price is unavailable."""
    price = _pos(current_price)
    if price is None:
        return 0.0
    return (price_target - price) / price
