"""Fundamental analysis: normalization, price targets, scoring, summaries."""

from stock_opinion.analysis.engine import AnalysisResult, analyze
from stock_opinion.analysis.metrics import FinancialMetrics, Quote
from stock_opinion.analysis.price_target import (
    PriceTargetEstimate,
    estimate_price_target,
    resolve_price_target,
)
from stock_opinion.analysis.scoring import (
    MAX_SCORE,
    RECOMMENDATION_TIERS,
    ScoreCard,
    assess_risk_level,
    recommendation_for_score,
    score_metrics,
)
from stock_opinion.analysis.summary import Summary, generate_summary

__all__ = [
    "AnalysisResult",
    "analyze",
    "FinancialMetrics",
    "Quote",
    "PriceTargetEstimate",
    "estimate_price_target",
    "resolve_price_target",
    "MAX_SCORE",
    "RECOMMENDATION_TIERS",
    "ScoreCard",
    "assess_risk_level",
    "recommendation_for_score",
    "score_metrics",
    "Summary",
    "generate_summary",
]
