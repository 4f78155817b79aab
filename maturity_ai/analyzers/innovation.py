"""Innovation Scout: new opportunities, AI adoption and future trends."""

from typing import Any, Mapping

from .base import AnalyzerBase, AnalyzerResult, SwotFragment


class InnovationScout(AnalyzerBase):
    analyzer_id = "innovation_scout"
    name = "Innovation Scout"
    role = "New opportunities, AI tooling and future trends"
    expertise_areas = ("innovation", "automation", "emerging technology")
    frameworks = ("technology adoption lifecycle",)
    dimensions = ("innovation_readiness",)

    def analyze(self, answers: Mapping[str, Any], context: Mapping[str, Any]) -> AnalyzerResult:
        insights = []
        swot = SwotFragment()
        uses_ai = self.flag(answers, "uses_ai_tools_currently")

        if uses_ai:
            swot.strengths.append("Team already works with AI tools.")
        else:
            insights.append(self.missing_capability(
                "AI tools",
                "Falling behind on AI leaves operating costs well above those of "
                "more innovative competitors.",
                [
                    "Automate repetitive tasks and free the team for creative work.",
                    "Better content and customer communication.",
                    "Insights from data that manual review misses.",
                ],
            ))
            swot.opportunities.append("Adopt AI tools to automate routine work.")

        for plan in answers.get("growth_plans") or []:
            if plan == "online_sales":
                swot.opportunities.append("Open an online sales channel.")
            elif plan == "new_products":
                swot.opportunities.append("Extend the product line.")

        return self.result(
            scores={"innovation_readiness": 90.0 if uses_ai else 25.0},
            insights=insights,
            swot=swot,
            summary="Innovation and AI drive the next wave of market leaders.",
        )
