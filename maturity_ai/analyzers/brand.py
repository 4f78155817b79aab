"""Brand Strategist: identity, message and voice."""

from typing import Any, Mapping

from .base import AnalyzerBase, AnalyzerResult, Insight

SIMPLE_MESSAGE_LENGTH = 150


class BrandStrategist(AnalyzerBase):
    analyzer_id = "brand_strategist"
    name = "Brand Strategist"
    role = "Brand identity, message and voice"
    expertise_areas = ("brand identity", "messaging")
    frameworks = ("brand pyramid",)
    dimensions = ("brand_equity", "digital_maturity")

    def analyze(self, answers: Mapping[str, Any], context: Mapping[str, Any]) -> AnalyzerResult:
        insights = []

        message = self.text(answers, "brand_message")
        if message:
            simple = len(message) < SIMPLE_MESSAGE_LENGTH
            insights.append(Insight(
                type="brand_messaging_analysis",
                dimension="brand_equity",
                title="Marketing message",
                explanation=(
                    "The message is short and clear; clarity is what attracts customers."
                    if simple else
                    "The message is long; simplify it until a ten-year-old could repeat it."
                ),
                severity="success" if simple else "warning",
            ))

        has_identity = self.flag(answers, "has_visual_identity_guide")
        if not has_identity:
            insights.append(self.missing_capability(
                "a visual identity guide",
                "Without an identity guide the brand looks different everywhere and "
                "is hard to tell apart from competitors.",
                [
                    "Consistent look across offline and online channels.",
                    "Faster trust with the target audience.",
                    "Easier work for designers and content creators.",
                ],
            ))

        return self.result(
            scores={
                "brand_equity": 75.0 if has_identity else 30.0,
                "digital_maturity": 50.0 if has_identity else 20.0,
            },
            insights=insights,
            summary="A strong visual identity is the first step to a memorable brand.",
        )
