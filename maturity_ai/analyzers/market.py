"""
Market Analyst

Competitive density, market share and competitor monitoring.
"""

from typing import Any, Mapping

from .base import AnalyzerBase, AnalyzerResult, Insight, SwotFragment


class MarketAnalyst(AnalyzerBase):
    analyzer_id = "market_analyst"
    name = "Market Analyst"
    role = "Sector, competitor and market trend analysis"
    expertise_areas = ("competitive analysis", "market sizing")
    frameworks = ("Porter's Five Forces",)
    dimensions = ("market_position",)

    def analyze(self, answers: Mapping[str, Any], context: Mapping[str, Any]) -> AnalyzerResult:
        insights = []
        swot = SwotFragment()

        competitors = int(self.number(answers, "competitor_count"))
        share = self.number(answers, "current_market_share")

        if competitors > 10:
            insights.append(Insight(
                type="market_insight",
                dimension="market_position",
                title="Saturated market",
                explanation=(
                    "The business operates in a crowded market and needs clear "
                    "differentiation to win customer attention."
                ),
                severity="high",
            ))
            swot.threats.append(f"{competitors} direct competitors in the area.")

        if share > 5:
            swot.strengths.append(f"Meaningful local market share ({share:g}%).")

        if not self.flag(answers, "conduct_regular_competitor_audit"):
            insights.append(self.missing_capability(
                "competitor monitoring",
                "Without watching competitors the business reacts instead of leading, "
                "and can lose share without noticing.",
                [
                    "Spot market gaps competitors leave open.",
                    "Adjust pricing to market moves.",
                    "Catch new trends before they spread.",
                ],
            ))
        else:
            swot.opportunities.append("Competitor audits can reveal underserved segments.")

        return self.result(
            scores={"market_position": 80.0 if share > 5 else 40.0},
            insights=insights,
            swot=swot,
            summary="Competition calls for a distinct competitive advantage.",
        )
