"""Consumer Psychologist: customer motivation, journey and retention."""

from typing import Any, Mapping

from .base import AnalyzerBase, AnalyzerResult, Insight


class ConsumerPsychologist(AnalyzerBase):
    analyzer_id = "consumer_psychologist"
    name = "Consumer Psychologist"
    role = "Customer behaviour, buying journey and motivation"
    expertise_areas = ("customer behaviour", "retention")
    frameworks = ("Jobs to be Done", "customer journey mapping")
    dimensions = ("customer_centricity",)

    def analyze(self, answers: Mapping[str, Any], context: Mapping[str, Any]) -> AnalyzerResult:
        insights = []
        understands = self.flag(answers, "understand_customer_pain_points")

        if not understands:
            insights.append(Insight(
                type="customer_insight",
                dimension="customer_centricity",
                title="Gap in understanding customer motivation",
                explanation=(
                    "Selling product features instead of solving customer problems "
                    "sharply lowers conversion rates."
                ),
                severity="high",
            ))

        churn_reasons = answers.get("churn_reasons") or []
        if "unknown" in churn_reasons:
            insights.append(Insight(
                type="customer_insight",
                dimension="customer_centricity",
                title="Unknown churn causes",
                explanation="Customers are leaving for reasons the business cannot name; run exit surveys.",
                severity="warning",
            ))

        if not self.flag(answers, "has_customer_journey_map"):
            insights.append(self.missing_capability(
                "customer journey maps",
                "Without a journey map the friction points customers hit are guessed, not measured.",
                [
                    "Find the moments where customers decide to buy or leave.",
                    "Improve the experience at every touchpoint.",
                    "Raise retention and lower churn.",
                ],
            ))

        return self.result(
            scores={"customer_centricity": 80.0 if understands else 30.0},
            insights=insights,
            summary="Focusing on customer pain points is the key to more sales.",
        )
