"""Analysis engine: metrics + quote -> investment opinion."""

from dataclasses import dataclass, field
from typing import Any

from stock_opinion.analysis.metrics import FinancialMetrics, Quote
from stock_opinion.analysis.price_target import (
    METHOD_CURRENT_PRICE,
    compute_upside,
    resolve_price_target,
)
from stock_opinion.analysis.scoring import assess_risk_level, score_metrics
from stock_opinion.analysis.summary import generate_summary
from stock_opinion.utils.formatting import format_signed_percent


@dataclass(frozen=True)
class AnalysisResult:
    """A single, immutable investment opinion."""

    recommendation: str
    price_target: float
    upside: str
    risk_level: str
    summary: str
    score: int = 0
    max_score: int = 0
    tier_score: int = 0
    price_target_method: str = METHOD_CURRENT_PRICE
    strengths: tuple[str, ...] = field(default_factory=tuple)
    weaknesses: tuple[str, ...] = field(default_factory=tuple)
    rules: tuple[dict[str, Any], ...] = field(default_factory=tuple)

    def to_dict(self) -> dict[str, Any]:
        return {
            "recommendation": self.recommendation,
            "price_target": self.price_target,
            "upside": self.upside,
            "risk_level": self.risk_level,
            "summary": self.summary,
            "score": self.score,
            "max_score": self.max_score,
            "tier_score": self.tier_score,
            "price_target_method": self.price_target_method,
            "strengths": list(self.strengths),
            "weaknesses": list(self.weaknesses),
            "rules": [dict(r) for r in self.rules],
        }


def analyze(metrics: FinancialMetrics, quote: Quote | None = None) -> AnalysisResult:
    """
    Turn normalized metrics and a quote into an AnalysisResult.

    Total over its inputs: every field may be unavailable.
    """
    current_price = quote.price if quote is not None and quote.price else metrics.current_price

    target = resolve_price_target(metrics, current_price)
    price_target = round(target.value, 2)
    upside_fraction = compute_upside(target.value, current_price)
    upside = format_signed_percent(upside_fraction * 100)

    # A target that is just the current price says nothing about upside
    scored_upside = None if target.method == METHOD_CURRENT_PRICE else upside_fraction

    scorecard = score_metrics(metrics, quote, upside=scored_upside)
    risk_level = assess_risk_level(metrics)
    summary = generate_summary(scorecard, risk_level, price_target, upside)

    return AnalysisResult(
        recommendation=scorecard.recommendation,
        price_target=price_target,
        upside=upside,
        risk_level=risk_level,
        summary=summary.narrative,
        score=scorecard.score,
        max_score=scorecard.max_score,
        tier_score=scorecard.tier_score,
        price_target_method=target.method,
        strengths=tuple(summary.strengths),
        weaknesses=tuple(summary.weaknesses),
        rules=tuple(o.to_dict() for o in scorecard.outcomes),
    )
