"""Tests for narrative summary generation."""

from stock_opinion.analysis.metrics import FinancialMetrics
from stock_opinion.analysis.scoring import score_metrics
from stock_opinion.analysis.summary import closing_sentence, generate_summary


class TestClosingSentence:
    def test_format(self):
        sentence = closing_sentence("Buy", "Moderate", 110.0, "10.00%")
        assert sentence == "Overall: Buy with Moderate risk. Price target $110.00 (10.00% upside)."


class TestGenerateSummary:
    """Tests for generate_summary."""

    def test_no_data(self):
        card = score_metrics(FinancialMetrics.empty())
        summary = generate_summary(card, "Moderate", 50.0, "0.00%")

        assert summary.strengths == []
        assert summary.weaknesses == []
        assert summary.narrative.startswith("Fundamental data is unavailable")
        assert summary.narrative.endswith("Price target $50.00 (0.00% upside).")

    def test_category_sentences(self):
        """Each scored category contributes one sentence, matching its score share."""
        metrics = FinancialMetrics(
            return_on_equity=0.25,
            operating_margin=0.30,
            debt_to_equity=3.0,
            current_ratio=0.8,
        )
        summary = generate_summary(score_metrics(metrics), "High", 100.0, "0.00%")

        assert "Profitability: Impressive margins" in summary.narrative
        assert "Financial Strength: Debt or liquidity levels are a concern" in summary.narrative
        assert "Growth Prospects" not in summary.narrative

    def test_mixed_category(self):
        metrics = FinancialMetrics(earnings_growth=0.10, revenue_growth=0.07)
        summary = generate_summary(score_metrics(metrics), "Moderate", 100.0, "0.00%")
        assert "Growth Prospects: Growth is steady but unspectacular." in summary.narrative

    def test_lists_agree_with_scorecard(self, sample_info):
        card = score_metrics(FinancialMetrics.from_info(sample_info), upside=0.1)
        summary = generate_summary(card, "Moderate", 210.0, "10.53%")

        assert summary.strengths == card.strengths
        assert summary.weaknesses == card.weaknesses

    def test_no_contradictory_statements(self):
        """'High X' and 'Low X' never co-occur for one run."""
        metrics = FinancialMetrics(return_on_equity=0.05, return_on_assets=0.2, beta=1.7)
        summary = generate_summary(score_metrics(metrics), "High", 100.0, "0.00%")

        assert "Low return on equity (5.00%)" in summary.weaknesses
        assert "High return on assets (20.00%)" in summary.strengths
        assert not any("return on equity" in s for s in summary.strengths)
        assert not any("return on assets" in w for w in summary.weaknesses)
