"""
Risk Manager

Financial, legal and market threats. risk_score is the only dimension
where higher is worse.
"""

from typing import Any, Mapping

from .base import AnalyzerBase, AnalyzerResult, SwotFragment


class RiskManager(AnalyzerBase):
    analyzer_id = "risk_manager"
    name = "Risk Manager"
    role = "Spotting financial, legal and market threats before they land"
    expertise_areas = ("risk management", "insurance", "continuity")
    frameworks = ("risk matrix",)
    dimensions = ("risk_score", "strategy_maturity")

    def analyze(self, answers: Mapping[str, Any], context: Mapping[str, Any]) -> AnalyzerResult:
        insights = []
        swot = SwotFragment()
        insured = self.flag(answers, "has_business_insurance")

        if not insured:
            insights.append(self.missing_capability(
                "liability and commercial insurance",
                "Operating uninsured puts years of work at the mercy of a single "
                "accident or lawsuit.",
                [
                    "Cover the cost of accidents and professional errors.",
                    "Peace of mind to focus on growth.",
                    "More credibility with customers and investors.",
                ],
                dimension="risk_score",
            ))
            swot.threats.append("Uninsured exposure to liability claims.")

        if answers.get("revenue_trend") == "declining":
            swot.threats.append("Revenue is declining.")

        if 0 < self.number(answers, "supplier_count") <= 1:
            swot.weaknesses.append("Dependence on a single supplier.")

        return self.result(
            scores={
                "risk_score": 20.0 if insured else 80.0,
                "strategy_maturity": 60.0 if insured else 40.0,
            },
            insights=insights,
            swot=swot,
            summary="Risk management is a safety valve for business continuity.",
        )
