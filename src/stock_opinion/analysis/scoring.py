"""Fundamental scoring engine.

A fixed battery of threshold rules across valuation, profitability, growth,
financial strength, dividend, risk and upside. Each rule is a step function
(strong / moderate / none) over one metric; points accumulate into a score
out of MAX_SCORE.

Rules whose input is unavailable are not evaluated: they add neither points
nor available points. When enough of the battery was evaluable the score is
rescaled to the full 30-point scale before tiering, so a symbol is not
marked down for data the provider never returned.
"""

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

from stock_opinion.analysis.metrics import FinancialMetrics, Quote
from stock_opinion.utils.formatting import format_money, format_percent, format_ratio
from stock_opinion.utils.normalize import to_number

logger = logging.getLogger(__name__)

MAX_SCORE = 30
# Below this many evaluable points the raw score is tiered as-is
MIN_SCORED_POINTS = 10

# Ordered worst -> best
RECOMMENDATION_TIERS: tuple[str, ...] = ("Sell", "Hold", "Buy", "Strong Buy")
# (minimum tier score, recommendation), checked best first
RECOMMENDATION_THRESHOLDS: tuple[tuple[int, str], ...] = (
    (22, "Strong Buy"),
    (16, "Buy"),
    (10, "Hold"),
)

RISK_LOW = "Low"
RISK_MODERATE = "Moderate"
RISK_HIGH = "High"

SIGNAL_STRENGTH = "strength"
SIGNAL_WEAKNESS = "weakness"


@dataclass(frozen=True)
class ScoringInputs:
    """Everything a rule may read."""

    metrics: FinancialMetrics
    price: float | None = None
    # Upside fraction; None when the price target is just the current price
    upside: float | None = None


@dataclass(frozen=True)
class ScoringRule:
    name: str
    label: str
    category: str
    max_points: int
    extract: Callable[[ScoringInputs], float | None]
    points: Callable[[ScoringInputs, float], int]
    kind: str
    strength: str
    weakness: str


@dataclass(frozen=True)
class RuleOutcome:
    """Result of evaluating one rule."""

    name: str
    label: str
    category: str
    value: float
    display_value: str
    points: int
    max_points: int
    signal: str | None
    statement: str | None

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "label": self.label,
            "category": self.category,
            "value": self.value,
            "display_value": self.display_value,
            "points": self.points,
            "max_points": self.max_points,
            "signal": self.signal,
        }


@dataclass(frozen=True)
class ScoreCard:
    score: int
    max_score: int
    tier_score: int
    recommendation: str
    outcomes: tuple[RuleOutcome, ...] = field(default_factory=tuple)

    @property
    def strengths(self) -> list[str]:
        return [o.statement for o in self.outcomes if o.signal == SIGNAL_STRENGTH and o.statement]

    @property
    def weaknesses(self) -> list[str]:
        return [o.statement for o in self.outcomes if o.signal == SIGNAL_WEAKNESS and o.statement]

    def by_category(self, category: str) -> list[RuleOutcome]:
        return [o for o in self.outcomes if o.category == category]


# ---------------- Step functions ----------------

def _pe_points(_: ScoringInputs, pe: float) -> int:
    if 0 < pe < 15:
        return 2
    if 15 <= pe <= 25:
        return 1
    return 0


def _peg_points(_: ScoringInputs, peg: float) -> int:
    if 0 < peg < 1:
        return 2
    if 1 <= peg <= 2:
        return 1
    return 0


def _above(strong: float, moderate_low: float | None = None) -> Callable[[ScoringInputs, float], int]:
    """value > strong -> 2; moderate_low <= value <= strong -> 1; else 0."""

    def _points(_: ScoringInputs, value: float) -> int:
        if value > strong:
            return 2
        if moderate_low is not None and moderate_low <= value <= strong:
            return 1
        return 0

    return _points


def _single_point_above(threshold: float) -> Callable[[ScoringInputs, float], int]:
    def _points(_: ScoringInputs, value: float) -> int:
        return 1 if value > threshold else 0

    return _points


def _debt_to_equity_points(_: ScoringInputs, de: float) -> int:
    if 0 <= de < 0.5:
        return 2
    if 0.5 <= de <= 1:
        return 1
    return 0


def _fcf_points(_: ScoringInputs, fcf: float) -> int:
    return 2 if fcf > 0 else 0


def _dividend_points(inputs: ScoringInputs, dividend_yield: float) -> int:
    payout = to_number(inputs.metrics.payout_ratio)
    if dividend_yield > 0.02 and 0 < payout < 0.60:
        return 2
    if dividend_yield > 0 and payout > 0:
        return 1
    return 0


def _beta_points(_: ScoringInputs, beta: float) -> int:
    if 0 < beta < 1:
        return 2
    if 1 <= beta <= 1.5:
        return 1
    return 0


def _upside_points(_: ScoringInputs, upside: float) -> int:
    if upside >= 0.20:
        return 2
    if 0 <= upside < 0.20:
        return 1
    return 0


RULES: tuple[ScoringRule, ...] = (
    # Valuation
    ScoringRule(
        "pe_ratio", "P/E ratio", "valuation", 2,
        lambda i: i.metrics.pe_ratio, _pe_points, "ratio",
        "Attractive valuation (P/E {value})",
        "Unattractive valuation (P/E {value})",
    ),
    ScoringRule(
        "peg_ratio", "PEG ratio", "valuation", 2,
        lambda i: i.metrics.peg_ratio, _peg_points, "ratio",
        "Growth priced cheaply (PEG {value})",
        "Growth priced expensively (PEG {value})",
    ),
    # Profitability
    ScoringRule(
        "return_on_equity", "Return on equity", "profitability", 2,
        lambda i: i.metrics.return_on_equity, _above(0.15, 0.10), "percent",
        "High return on equity ({value})",
        "Low return on equity ({value})",
    ),
    ScoringRule(
        "return_on_assets", "Return on assets", "profitability", 2,
        lambda i: i.metrics.return_on_assets, _above(0.10, 0.05), "percent",
        "High return on assets ({value})",
        "Low return on assets ({value})",
    ),
    ScoringRule(
        "operating_margin", "Operating margin", "profitability", 2,
        lambda i: i.metrics.operating_margin, _above(0.20, 0.10), "percent",
        "Strong operating margin ({value})",
        "Thin operating margin ({value})",
    ),
    ScoringRule(
        "profit_margin", "Profit margin", "profitability", 2,
        lambda i: i.metrics.profit_margin, _above(0.15, 0.08), "percent",
        "Strong profit margin ({value})",
        "Thin profit margin ({value})",
    ),
    ScoringRule(
        "gross_margin", "Gross margin", "profitability", 2,
        lambda i: i.metrics.gross_margin, _above(0.40, 0.20), "percent",
        "Strong gross margin ({value})",
        "Thin gross margin ({value})",
    ),
    # Growth
    ScoringRule(
        "earnings_growth", "Earnings growth", "growth", 2,
        lambda i: i.metrics.earnings_growth, _above(0.15, 0.05), "percent",
        "Strong earnings growth ({value})",
        "Weak earnings growth ({value})",
    ),
    ScoringRule(
        "revenue_growth", "Revenue growth", "growth", 2,
        lambda i: i.metrics.revenue_growth, _above(0.10, 0.05), "percent",
        "Strong revenue growth ({value})",
        "Weak revenue growth ({value})",
    ),
    # Financial strength
    ScoringRule(
        "debt_to_equity", "Debt to equity", "financial_strength", 2,
        lambda i: i.metrics.debt_to_equity, _debt_to_equity_points, "ratio",
        "Low leverage (debt/equity {value})",
        "High leverage (debt/equity {value})",
    ),
    ScoringRule(
        "current_ratio", "Current ratio", "financial_strength", 1,
        lambda i: i.metrics.current_ratio, _single_point_above(1.5), "ratio",
        "Comfortable short-term liquidity (current ratio {value})",
        "Tight short-term liquidity (current ratio {value})",
    ),
    ScoringRule(
        "quick_ratio", "Quick ratio", "financial_strength", 1,
        lambda i: i.metrics.quick_ratio, _single_point_above(1.0), "ratio",
        "Liquid assets cover current liabilities (quick ratio {value})",
        "Liquid assets fall short of current liabilities (quick ratio {value})",
    ),
    ScoringRule(
        "free_cash_flow", "Free cash flow", "financial_strength", 2,
        lambda i: i.metrics.free_cash_flow, _fcf_points, "money",
        "Positive free cash flow ({value})",
        "Negative free cash flow ({value})",
    ),
    # Dividend
    ScoringRule(
        "dividend", "Dividend", "dividend", 2,
        lambda i: i.metrics.dividend_yield, _dividend_points, "percent",
        "Attractive, sustainable dividend (yield {value})",
        "Dividend does not support the score (yield {value})",
    ),
    # Risk
    ScoringRule(
        "beta", "Beta", "risk", 2,
        lambda i: i.metrics.beta, _beta_points, "ratio",
        "Lower volatility than the market (beta {value})",
        "Higher volatility than the market (beta {value})",
    ),
    # Upside
    ScoringRule(
        "upside", "Upside to price target", "upside", 2,
        lambda i: i.upside, _upside_points, "percent",
        "Significant upside to price target ({value})",
        "Trading above price target ({value})",
    ),
)


def _format_value(kind: str, value: float) -> str:
    if kind == "percent":
        return format_percent(value)
    if kind == "money":
        return format_money(value)
    return format_ratio(value)


def evaluate_rule(rule: ScoringRule, inputs: ScoringInputs) -> RuleOutcome | None:
    """Evaluate one rule; None when its input is unavailable."""
    value = rule.extract(inputs)
    if value is None:
        return None

    points = rule.points(inputs, value)
    display_value = _format_value(rule.kind, value)

    # One signal per rule: a metric is a strength or a weakness, never both
    signal: str | None = None
    statement: str | None = None
    if points == rule.max_points:
        signal = SIGNAL_STRENGTH
        statement = rule.strength.format(value=display_value)
    elif points == 0:
        signal = SIGNAL_WEAKNESS
        statement = rule.weakness.format(value=display_value)

    return RuleOutcome(
        name=rule.name,
        label=rule.label,
        category=rule.category,
        value=value,
        display_value=display_value,
        points=points,
        max_points=rule.max_points,
        signal=signal,
        statement=statement,
    )


def recommendation_for_score(tier_score: int) -> str:
    """Map a score on the 30-point scale to a recommendation tier."""
    for threshold, recommendation in RECOMMENDATION_THRESHOLDS:
        if tier_score >= threshold:
            return recommendation
    return "Sell"


def tier_rank(recommendation: str) -> int:
    """Position of a recommendation in RECOMMENDATION_TIERS (higher is better)."""
    return RECOMMENDATION_TIERS.index(recommendation)


def compute_tier_score(score: int, max_score: int) -> int:
    """Rescale to MAX_SCORE when enough of the battery was evaluable."""
    if max_score >= MIN_SCORED_POINTS:
        return score * MAX_SCORE // max_score
    return score


def score_metrics(
    metrics: FinancialMetrics,
    quote: Quote | None = None,
    upside: float | None = None,
) -> ScoreCard:
    """
    Score a symbol's fundamentals.

    Args:
        metrics: Normalized fundamentals
        quote: Latest quote (price used for context only)
        upside: Upside fraction vs. price target, or None if not meaningful

    Returns:
        ScoreCard with score, evaluable maximum, tier score, recommendation
        and per-rule outcomes
    """
    inputs = ScoringInputs(
        metrics=metrics,
        price=quote.price if quote is not None else metrics.current_price,
        upside=upside,
    )

    outcomes = tuple(
        outcome
        for outcome in (evaluate_rule(rule, inputs) for rule in RULES)
        if outcome is not None
    )
    score = sum(o.points for o in outcomes)
    max_score = sum(o.max_points for o in outcomes)
    tier_score = compute_tier_score(score, max_score)
    recommendation = recommendation_for_score(tier_score)

    logger.debug(
        f"score_metrics: score={score}/{max_score} tier_score={tier_score} "
        f"recommendation={recommendation}"
    )

    return ScoreCard(
        score=score,
        max_score=max_score,
        tier_score=tier_score,
        recommendation=recommendation,
        outcomes=outcomes,
    )


def assess_risk_level(metrics: FinancialMetrics) -> str:
    """
    Classify risk from beta and leverage, independent of the score.

    Unavailable beta counts as market-average (1.0); unavailable debt/equity as 0.
    """
    beta = to_number(metrics.beta, default=1.0)
    debt_to_equity = to_number(metrics.debt_to_equity)

    if beta < 1 and debt_to_equity < 0.5:
        return RISK_LOW
    if 1 <= beta <= 1.5 or 0.5 <= debt_to_equity <= 1:
        return RISK_MODERATE
    return RISK_HIGH
