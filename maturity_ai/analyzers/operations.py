"""Operations Expert: process discipline and scalability."""

from typing import Any, Mapping

from .base import AnalyzerBase, AnalyzerResult, Insight


class OperationsExpert(AnalyzerBase):
    analyzer_id = "operations_expert"
    name = "Operations Expert"
    role = "Operational efficiency, resources and execution"
    expertise_areas = ("process design", "execution")
    frameworks = ("SOP", "Lean")
    dimensions = ("operations_efficiency", "strategy_maturity")

    def analyze(self, answers: Mapping[str, Any], context: Mapping[str, Any]) -> AnalyzerResult:
        insights = []
        has_processes = self.flag(answers, "has_documented_processes")

        if not has_processes:
            insights.append(self.missing_capability(
                "documented standard operating procedures",
                "Without documented procedures the work depends on people instead of "
                "systems, which makes scaling risky.",
                [
                    "Consistent quality regardless of who does the work.",
                    "Faster onboarding for new staff.",
                    "Less time and material wasted on improvisation.",
                ],
                dimension="operations_efficiency",
            ))

        if answers.get("inventory_tracking") == "none":
            insights.append(Insight(
                type="operations_insight",
                dimension="operations_efficiency",
                title="Inventory is not tracked",
                explanation="Untracked stock hides shrinkage and ties up cash in slow-moving items.",
                severity="warning",
            ))

        return self.result(
            scores={
                "operations_efficiency": 85.0 if has_processes else 45.0,
                "strategy_maturity": 70.0 if has_processes else 50.0,
            },
            insights=insights,
            summary="Systems and procedures turn a small shop into a scalable business.",
        )
