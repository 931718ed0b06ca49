"""Narrative summary generation.

Strengths and weaknesses are read straight off the ScoreCard outcomes, so
the narrative always agrees with the numeric score and a metric can never be
listed as both a strength and a weakness.
"""

from dataclasses import dataclass, field

from stock_opinion.analysis.scoring import RuleOutcome, ScoreCard
from stock_opinion.utils.formatting import format_price

# category -> (heading, favorable, mixed, unfavorable)
CATEGORY_NARRATIVES: tuple[tuple[str, str, str, str, str], ...] = (
    (
        "financial_strength",
        "Financial Strength",
        "The company has a strong balance sheet with low debt and healthy cash generation.",
        "The balance sheet is adequate, though some leverage or liquidity measures are only middling.",
        "Debt or liquidity levels are a concern and may limit financial flexibility.",
    ),
    (
        "profitability",
        "Profitability",
        "Impressive margins and returns indicate efficient operations.",
        "Profitability is moderate, leaving room for improvement in operational efficiency.",
        "Weak margins and returns point to operational challenges.",
    ),
    (
        "growth",
        "Growth Prospects",
        "The company demonstrates strong revenue and earnings growth, indicating positive future prospects.",
        "Growth is steady but unspectacular.",
        "Growth metrics suggest challenges in maintaining consistent expansion.",
    ),
    (
        "valuation",
        "Valuation",
        "The stock appears undervalued relative to its earnings and growth.",
        "The stock appears fairly valued relative to its fundamentals.",
        "The stock's valuation seems rich relative to its fundamentals.",
    ),
    (
        "dividend",
        "Dividend",
        "The company offers an attractive and sustainable dividend, appealing to income-focused investors.",
        "The dividend appears sustainable, but may not be a primary factor for investors.",
        "The dividend is not a meaningful part of the return.",
    ),
    (
        "risk",
        "Volatility",
        "Shares have historically moved less than the broader market.",
        "Shares move roughly in line with the broader market.",
        "Shares are notably more volatile than the broader market.",
    ),
)

FAVORABLE_SHARE = 0.75
UNFAVORABLE_SHARE = 0.25


@dataclass(frozen=True)
class Summary:
    strengths: list[str] = field(default_factory=list)
    weaknesses: list[str] = field(default_factory=list)
    narrative: str = ""


def _category_sentence(outcomes: list[RuleOutcome], favorable: str, mixed: str, unfavorable: str) -> str:
    earned = sum(o.points for o in outcomes)
    available = sum(o.max_points for o in outcomes)
    share = earned / available if available else 0.0
    if share >= FAVORABLE_SHARE:
        return favorable
    if share <= UNFAVORABLE_SHARE:
        return unfavorable
    return mixed


def closing_sentence(recommendation: str, risk_level: str, price_target: float, upside: str) -> str:
    """Closing line: recommendation, risk level, price target and upside."""
    return (
        f"Overall: {recommendation} with {risk_level} risk. "
        f"Price target {format_price(price_target)} ({upside} upside)."
    )


def generate_summary(
    scorecard: ScoreCard,
    risk_level: str,
    price_target: float,
    upside: str,
) -> Summary:
    """
    Build strengths, weaknesses and the narrative paragraph.

    Args:
        scorecard: Output of score_metrics
        risk_level: Output of assess_risk_level
        price_target: Price target value
        upside: Formatted upside string (e.g. "10.00%")

    Returns:
        Summary with strengths, weaknesses and narrative text
    """
    parts: list[str] = []
    for category, heading, favorable, mixed, unfavorable in CATEGORY_NARRATIVES:
        outcomes = scorecard.by_category(category)
        if not outcomes:
            continue
        parts.append(f"{heading}: {_category_sentence(outcomes, favorable, mixed, unfavorable)}")

    if not parts:
        parts.append("Fundamental data is unavailable, so the opinion rests on price alone.")

    parts.append(closing_sentence(scorecard.recommendation, risk_level, price_target, upside))

    return Summary(
        strengths=scorecard.strengths,
        weaknesses=scorecard.weaknesses,
        narrative=" ".join(parts),
    )
