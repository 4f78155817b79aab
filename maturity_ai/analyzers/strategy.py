"""
Chief Strategist

Overall direction: the stated goal, the main bottleneck, the digital
storefront, and the initial SWOT picture.
"""

from typing import Any, Mapping

from .base import AnalyzerBase, AnalyzerResult, Insight, SwotFragment

# Free-text keywords that hint at a SWOT entry
EXPANSION_KEYWORDS = ("expand", "expansion", "new market", "new product", "franchise")
COMPETITION_KEYWORDS = ("competitor", "competition", "price war", "pricing")


class ChiefStrategist(AnalyzerBase):
    analyzer_id = "chief_strategist"
    name = "Chief Strategist"
    role = "Overall vision, growth direction and SWOT analysis"
    expertise_areas = ("strategy", "growth planning", "competitive positioning")
    frameworks = ("SWOT", "OKR")
    dimensions = ("strategy_maturity",)

    def analyze(self, answers: Mapping[str, Any], context: Mapping[str, Any]) -> AnalyzerResult:
        insights = []
        goal = self.text(answers, "primary_goal")
        challenge = self.text(answers, "main_challenge")
        has_website = self.flag(answers, "has_website")
        years = self.number(answers, "years_in_business")

        if goal:
            insights.append(Insight(
                type="strategic_goal_analysis",
                dimension="strategy_maturity",
                title="Goal for the year",
                explanation=(
                    f"Reaching '{goal}' needs resources aligned behind it; "
                    f"break it down into monthly, measurable steps."
                ),
                severity="info",
            ))

        if challenge:
            insights.append(Insight(
                type="bottleneck_identification",
                dimension="strategy_maturity",
                title="Main bottleneck",
                explanation=(
                    f"'{challenge}' is the biggest obstacle right now; "
                    f"the next 30 days should target it first."
                ),
                severity="high",
            ))

        if not has_website:
            insights.append(self.missing_capability(
                "a professional website",
                "The website is the company's digital storefront and the hub of modern marketing.",
                [
                    "Reach new customers around the clock.",
                    "Build a trusted identity independent of social platforms.",
                    "Use analytics to understand visitor behaviour.",
                ],
            ))

        score = 20.0
        if goal:
            score += 25
        if years > 3:
            score += 20
        if has_website:
            score += 20
        if self.flag(answers, "tracks_kpis"):
            score += 15

        return self.result(
            scores={"strategy_maturity": score},
            insights=insights,
            swot=self._swot(answers, goal, challenge, has_website, years),
            summary="Build a strategic roadmap for digital transformation.",
        )

    def _swot(self, answers, goal: str, challenge: str, has_website: bool, years: float) -> SwotFragment:
        swot = SwotFragment()
        free_text = " ".join(
            str(v) for v in answers.values() if isinstance(v, str)
        ).lower()

        if years > 3:
            swot.strengths.append("Established operating base and market experience.")
        if has_website:
            swot.strengths.append("Existing digital presence to build on.")

        if challenge:
            swot.weaknesses.append(f"Main operational challenge: {challenge}")
        if self.number(answers, "marketing_budget") < 1000:
            swot.weaknesses.append("Limited financial resources allocated to marketing.")

        if any(k in free_text for k in EXPANSION_KEYWORDS):
            swot.opportunities.append("Room to expand into new markets or products.")
        swot.opportunities.append("Automation to lower operating costs.")

        if any(k in free_text for k in COMPETITION_KEYWORDS):
            swot.threats.append("Rising competition and a possible price war.")

        return swot
