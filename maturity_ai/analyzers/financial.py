"""
Financial Analyst

Revenue, marketing spend relative to revenue, and financial tooling.
"""

from typing import Any, Mapping

from .base import AnalyzerBase, AnalyzerResult, Alert

# Marketing budget above this share of revenue is not sustainable
UNSUSTAINABLE_BUDGET_RATIO = 0.50


class FinancialAnalyst(AnalyzerBase):
    analyzer_id = "financial_analyst"
    name = "Financial Analyst"
    role = "Revenue, costs, marketing budget and business model health"
    expertise_areas = ("revenue analysis", "cost control", "budgeting")
    frameworks = ("unit economics",)
    dimensions = ("financial_health",)

    def analyze(self, answers: Mapping[str, Any], context: Mapping[str, Any]) -> AnalyzerResult:
        insights = []
        alerts = []

        revenue = self.number(answers, "annual_revenue")
        budget = self.number(answers, "marketing_budget")
        ratio = budget / revenue if revenue > 0 else None

        if ratio is not None and ratio > UNSUSTAINABLE_BUDGET_RATIO:
            alerts.append(Alert(
                id="ALERT_CRIT_002",
                severity="critical",
                title="Unsustainable marketing budget",
                message=(
                    f"Marketing spend is {ratio:.0%} of annual revenue; "
                    f"above 50% the model cannot sustain itself."
                ),
                recommendation="Cut spend immediately or restructure customer acquisition channels.",
            ))

        uses_accounting = self.flag(answers, "use_accounting_software")
        if not uses_accounting:
            insights.append(self.missing_capability(
                "cloud accounting software",
                "Manual bookkeeping increases errors and hides the real-time cash position.",
                [
                    "Accurate tracking of income and expenses.",
                    "Automatic tax and financial reports.",
                    "Clear profit margins per product or service.",
                ],
            ))

        score = 50.0
        if revenue > 100000:
            score += 20
        elif revenue > 50000:
            score += 10

        if ratio is not None:
            if ratio < 0.20:
                score += 20
            elif ratio > 0.40:
                score -= 10

        if uses_accounting:
            score += 10

        return self.result(
            scores={"financial_health": score},
            insights=insights,
            alerts=alerts,
            summary="Profit margins need close monitoring.",
        )
