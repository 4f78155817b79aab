"""
Digital Marketing Expert

Digital channels, social presence and paid advertising.
"""

from typing import Any, Mapping

from .base import AnalyzerBase, AnalyzerResult, Insight


class DigitalMarketingExpert(AnalyzerBase):
    analyzer_id = "digital_marketing_expert"
    name = "Digital Marketing Expert"
    role = "Digital channels, social presence and paid advertising"
    expertise_areas = ("paid media", "social media", "conversion tracking")
    frameworks = ("AARRR funnel",)
    dimensions = ("digital_maturity",)

    def analyze(self, answers: Mapping[str, Any], context: Mapping[str, Any]) -> AnalyzerResult:
        insights = []
        runs_ads = self.flag(answers, "run_paid_ads")
        engagement = self.number(answers, "social_engagement_rate")

        if not runs_ads:
            insights.append(Insight(
                type="digital_opportunity",
                dimension="digital_maturity",
                title="Start paid advertising",
                explanation=(
                    "Organic reach alone is very limited; start with small campaigns "
                    "to test the target audience."
                ),
                severity="medium",
            ))

        if not self.flag(answers, "use_tracking_pixel"):
            insights.append(self.missing_capability(
                "a conversion tracking pixel",
                "Without tracking, ad spend goes into a black box with no visible return.",
                [
                    "Retarget interested visitors.",
                    "Optimize campaigns on real data instead of guesses.",
                    "Lower customer acquisition cost.",
                ],
            ))

        score = 0.0
        if self.flag(answers, "has_website"):
            score += 30
        if runs_ads:
            score += 30
        if engagement > 2:
            score += 40

        return self.result(
            scores={"digital_maturity": score},
            insights=insights,
            summary="Digital presence needs tracking tools to maximize return.",
        )
