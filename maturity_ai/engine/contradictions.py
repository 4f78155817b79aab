"""
Contradiction Detector

Cross-checks raw answers for statements that cannot both be true. Each
rule is a pure predicate over the answer map; every rule is evaluated and
every match becomes an alert.
"""

from dataclasses import dataclass
from typing import Any, Callable, List, Mapping, Optional, Tuple
import logging

from ..analyzers.base import Alert

logger = logging.getLogger(__name__)

SOURCE = "contradiction_detector"


def _choice(answers: Mapping[str, Any], key: str) -> Optional[str]:
    value = answers.get(key)
    return str(value).strip().lower() if value is not None else None


def _number(answers: Mapping[str, Any], key: str) -> Optional[float]:
    value = answers.get(key)
    if value is None or isinstance(value, bool):
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def _high_revenue_declining(answers) -> bool:
    return _choice(answers, "revenue_level") == "high" and _choice(answers, "revenue_trend") == "declining"


def _website_attributes_without_website(answers) -> bool:
    return _choice(answers, "has_website") == "no" and (
        _choice(answers, "mobile_responsive") == "yes" or _choice(answers, "has_ssl") == "yes"
    )


def _satisfied_but_churning(answers) -> bool:
    satisfaction = _number(answers, "customer_satisfaction")
    churn = _number(answers, "churn_rate")
    return satisfaction is not None and churn is not None and satisfaction > 7 and churn > 30


def _ads_without_budget(answers) -> bool:
    budget = _number(answers, "marketing_budget")
    return _choice(answers, "run_paid_ads") == "yes" and budget is not None and budget == 0


def _dominant_share_in_crowded_market(answers) -> bool:
    share = _number(answers, "current_market_share")
    return share is not None and share > 50 and _choice(answers, "competition_level") == "very_high"


@dataclass(frozen=True)
class ContradictionRule:
    rule_id: str
    severity: str
    title: str
    message: str
    recommendation: str
    predicate: Callable[[Mapping[str, Any]], bool]

    def evaluate(self, answers: Mapping[str, Any]) -> Optional[Alert]:
        if not self.predicate(answers):
            return None
        return Alert(
            id=self.rule_id,
            severity=self.severity,
            title=self.title,
            message=self.message,
            recommendation=self.recommendation,
            source=SOURCE,
        )


CONTRADICTION_RULES: Tuple[ContradictionRule, ...] = (
    ContradictionRule(
        rule_id="CONTRA_001",
        severity="warning",
        title="Revenue level conflicts with revenue trend",
        message="Revenue is reported as high while also declining.",
        recommendation="Confirm recent revenue figures and identify when the decline started.",
        predicate=_high_revenue_declining,
    ),
    ContradictionRule(
        rule_id="CONTRA_002",
        severity="warning",
        title="Website details without a website",
        message="No website was reported, yet website features (mobile layout or HTTPS) were claimed.",
        recommendation="Clarify whether the business has a website and update the answers.",
        predicate=_website_attributes_without_website,
    ),
    ContradictionRule(
        rule_id="CONTRA_003",
        severity="high",
        title="High satisfaction with high churn",
        message="Customers are rated very satisfied, but more than 30% leave each year.",
        recommendation="Measure satisfaction directly with customers who left.",
        predicate=_satisfied_but_churning,
    ),
    ContradictionRule(
        rule_id="CONTRA_004",
        severity="high",
        title="Paid advertising with no marketing budget",
        message="Paid ads are running but the marketing budget is zero.",
        recommendation="Record the real advertising spend so return on ad spend can be tracked.",
        predicate=_ads_without_budget,
    ),
    ContradictionRule(
        rule_id="CONTRA_005",
        severity="info",
        title="Dominant share in a very competitive market",
        message="Market share above 50% was reported alongside very high competition.",
        recommendation="Check how the market is defined when estimating share.",
        predicate=_dominant_share_in_crowded_market,
    ),
)


class ContradictionDetector:
    """
    Example:
        detector = ContradictionDetector()
        alerts = detector.detect_contradictions({"revenue_level": "high", "revenue_trend": "declining"})
        alerts[0].id  # "CONTRA_001"
    """

    def __init__(self, rules: Tuple[ContradictionRule, ...] = CONTRADICTION_RULES):
        self.rules = rules

    def detect_contradictions(self, answers: Mapping[str, Any]) -> List[Alert]:
        alerts = []
        for rule in self.rules:
            alert = rule.evaluate(answers)
            if alert is not None:
                alerts.append(alert)

        if alerts:
            logger.info(f"Detected {len(alerts)} contradictions: {', '.join(a.id for a in alerts)}")
        return alerts


def detect_contradictions(answers: Mapping[str, Any]) -> List[Alert]:
    return ContradictionDetector().detect_contradictions(answers)
