"""Data Scientist: data collection and analytical maturity."""

from typing import Any, Mapping

from .base import AnalyzerBase, AnalyzerResult


class DataScientist(AnalyzerBase):
    analyzer_id = "data_scientist"
    name = "Data Scientist"
    role = "Numbers, correlations, forecasting and anomaly spotting"
    expertise_areas = ("analytics", "customer data")
    frameworks = ("RFM segmentation",)
    dimensions = ("data_maturity",)

    def analyze(self, answers: Mapping[str, Any], context: Mapping[str, Any]) -> AnalyzerResult:
        insights = []
        uses_crm = self.flag(answers, "uses_crm_system")

        if not uses_crm:
            insights.append(self.missing_capability(
                "a CRM system",
                "Customer data kept in memory or loose spreadsheets makes purchase "
                "patterns and lifetime value impossible to analyze.",
                [
                    "All customer data in one organized place.",
                    "Segment customers for precise targeting.",
                    "Forecast sales from historical data.",
                ],
            ))

        return self.result(
            scores={"data_maturity": 85.0 if uses_crm else 20.0},
            insights=insights,
            summary="Customer data needs a central system to collect and analyze it.",
        )
