"""
Pattern Flags

Quick reads on the raw answers, reported beside the scores:

- red flags: warning signs, each with a severity
- green flags: strengths worth building on
- anomalies: figures that look implausible and should be checked

Flags only fire on answered values; a missing answer never raises one.
"""

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Mapping, Optional, Tuple
import logging

from .contradictions import _choice, _number

logger = logging.getLogger(__name__)

EXCESSIVE_BUDGET_RATIO = 0.40
HIGH_REVENUE_PER_EMPLOYEE = 2_000_000
LOW_REVENUE_PER_EMPLOYEE = 20_000


def _revenue_per_employee(answers: Mapping[str, Any]) -> Optional[float]:
    revenue = _number(answers, "annual_revenue")
    employees = _number(answers, "employee_count")
    if revenue is None or employees is None or revenue <= 0 or employees <= 0:
        return None
    return revenue / employees


def _budget_ratio(answers: Mapping[str, Any]) -> Optional[float]:
    revenue = _number(answers, "annual_revenue")
    budget = _number(answers, "marketing_budget")
    if revenue is None or budget is None or revenue <= 0:
        return None
    return budget / revenue


def _above(key: str, threshold: float) -> Callable[[Mapping[str, Any]], bool]:
    def check(answers):
        value = _number(answers, key)
        return value is not None and value > threshold
    return check


def _is(key: str, expected: str) -> Callable[[Mapping[str, Any]], bool]:
    return lambda answers: _choice(answers, key) == expected


@dataclass(frozen=True)
class PatternRule:
    flag: str
    message: str
    predicate: Callable[[Mapping[str, Any]], bool]
    # severity for red flags, action for anomalies
    level: Optional[str] = None

    def matches(self, answers: Mapping[str, Any]) -> bool:
        return self.predicate(answers)


RED_FLAG_RULES: Tuple[PatternRule, ...] = (
    PatternRule("declining_revenue", "Revenue is declining", _is("revenue_trend", "declining"), "critical"),
    PatternRule("high_churn", "Customer churn is high", _above("churn_rate", 30), "high"),
    PatternRule(
        "excessive_budget",
        "Marketing spend is excessive for the revenue",
        lambda answers: (_budget_ratio(answers) or 0) > EXCESSIVE_BUDGET_RATIO,
        "high",
    ),
    PatternRule("no_website", "No website", _is("has_website", "no"), "high"),
)

GREEN_FLAG_RULES: Tuple[PatternRule, ...] = (
    PatternRule("high_satisfaction", "Excellent customer satisfaction", _above("customer_satisfaction", 8)),
    PatternRule("growing_revenue", "Revenue is growing", _is("revenue_trend", "growing")),
    PatternRule(
        "data_driven",
        "Decisions are backed by data",
        lambda answers: _choice(answers, "tracks_kpis") == "yes" and _choice(answers, "uses_crm_system") == "yes",
    ),
)

def _high_revenue_per_employee(answers) -> bool:
    per_employee = _revenue_per_employee(answers)
    return per_employee is not None and per_employee > HIGH_REVENUE_PER_EMPLOYEE


def _low_revenue_per_employee(answers) -> bool:
    per_employee = _revenue_per_employee(answers)
    return per_employee is not None and per_employee < LOW_REVENUE_PER_EMPLOYEE


ANOMALY_RULES: Tuple[PatternRule, ...] = (
    PatternRule(
        "high_revenue_per_employee",
        "Revenue per employee is unusually high",
        _high_revenue_per_employee,
        "verify_data",
    ),
    PatternRule(
        "low_revenue_per_employee",
        "Revenue per employee is unusually low",
        _low_revenue_per_employee,
        "investigate",
    ),
)


@dataclass
class PatternReport:
    red_flags: List[Dict[str, str]] = field(default_factory=list)
    green_flags: List[Dict[str, str]] = field(default_factory=list)
    anomalies: List[Dict[str, str]] = field(default_factory=list)

    def flag_names(self) -> List[str]:
        return [f["flag"] for f in self.red_flags + self.green_flags] + [a["type"] for a in self.anomalies]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "red_flags": list(self.red_flags),
            "green_flags": list(self.green_flags),
            "anomalies": list(self.anomalies),
        }


class PatternDetector:
    """
    Example:
        report = PatternDetector().detect({"revenue_trend": "growing", "customer_satisfaction": 9})
        [f["flag"] for f in report.green_flags]  # ["high_satisfaction", "growing_revenue"]
    """

    def __init__(
        self,
        red_rules: Tuple[PatternRule, ...] = RED_FLAG_RULES,
        green_rules: Tuple[PatternRule, ...] = GREEN_FLAG_RULES,
        anomaly_rules: Tuple[PatternRule, ...] = ANOMALY_RULES
    ):
        self.red_rules = red_rules
        self.green_rules = green_rules
        self.anomaly_rules = anomaly_rules

    def detect(self, answers: Mapping[str, Any]) -> PatternReport:
        report = PatternReport(
            red_flags=[
                {"flag": r.flag, "message": r.message, "severity": r.level}
                for r in self.red_rules if r.matches(answers)
            ],
            green_flags=[
                {"flag": r.flag, "message": r.message, "impact": "positive"}
                for r in self.green_rules if r.matches(answers)
            ],
            anomalies=[
                {"type": r.flag, "message": r.message, "action": r.level}
                for r in self.anomaly_rules if r.matches(answers)
            ],
        )
        names = report.flag_names()
        if names:
            logger.debug(f"Pattern flags: {', '.join(names)}")
        return report


def detect_patterns(answers: Mapping[str, Any]) -> PatternReport:
    return PatternDetector().detect(answers)
