"""
Threshold Alerts

Alerts raised from answer and score thresholds once the panel has been
scored, in four levels:

- critical: problems that threaten the business
- high: problems that need attention this quarter
- warning: areas to watch
- opportunity: strengths that are not being used

Critical, high and warning alerts join the panel alerts; opportunities are
reported separately. Within each group alerts are ordered by urgency.
"""

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Mapping, Optional, Tuple
import logging

from ..analyzers.base import Alert
from .contradictions import _choice, _number

logger = logging.getLogger(__name__)

SOURCE = "alert_engine"

# Sectors where customers expect to find the business online
DIGITAL_SECTORS = frozenset({"retail", "fnb", "fitness", "education"})

NO_DIGITAL_PRESENCE_SCORE = 20
UNTRACKED_BUDGET = 10000
HIGH_CHURN_RATE = 30
BUDGET_RATIO_HIGH = 0.30
# The financial analyst raises its own critical alert above this ratio
BUDGET_RATIO_CRITICAL = 0.50


@dataclass(frozen=True)
class AlertInputs:
    answers: Mapping[str, Any]
    dimension_scores: Mapping[str, float] = field(default_factory=dict)
    composite_score: float = 0.0
    sector: Optional[str] = None

    @property
    def scored(self) -> bool:
        return bool(self.dimension_scores)


def _budget_ratio(inputs: AlertInputs) -> Optional[float]:
    revenue = _number(inputs.answers, "annual_revenue")
    budget = _number(inputs.answers, "marketing_budget")
    if not revenue or budget is None or revenue <= 0:
        return None
    return budget / revenue


# ---------------------------------------------------------------------------
# Predicates
# ---------------------------------------------------------------------------

def _revenue_declining(inputs: AlertInputs) -> bool:
    return _choice(inputs.answers, "revenue_trend") == "declining"


def _absent_online_in_digital_sector(inputs: AlertInputs) -> bool:
    digital = inputs.dimension_scores.get("digital_maturity")
    return (
        inputs.sector in DIGITAL_SECTORS
        and _choice(inputs.answers, "has_website") == "no"
        and digital is not None
        and digital <= NO_DIGITAL_PRESENCE_SCORE
    )


def _untracked_marketing_spend(inputs: AlertInputs) -> bool:
    budget = _number(inputs.answers, "marketing_budget")
    return (
        budget is not None
        and budget > UNTRACKED_BUDGET
        and _choice(inputs.answers, "tracks_kpis") == "no"
        and _choice(inputs.answers, "use_tracking_pixel") != "yes"
    )


def _critical_overall_position(inputs: AlertInputs) -> bool:
    risk = inputs.dimension_scores.get("risk_score")
    return inputs.scored and inputs.composite_score < 20 and risk is not None and risk > 70


def _customers_leaving(inputs: AlertInputs) -> bool:
    churn = _number(inputs.answers, "churn_rate")
    return churn is not None and churn > HIGH_CHURN_RATE


def _heavy_marketing_spend(inputs: AlertInputs) -> bool:
    ratio = _budget_ratio(inputs)
    return ratio is not None and BUDGET_RATIO_HIGH < ratio <= BUDGET_RATIO_CRITICAL


def _below_sector_average(inputs: AlertInputs) -> bool:
    return inputs.scored and inputs.composite_score < 40


def _no_kpi_tracking(inputs: AlertInputs) -> bool:
    return _choice(inputs.answers, "tracks_kpis") == "no"


def _satisfaction_without_referrals(inputs: AlertInputs) -> bool:
    satisfaction = _number(inputs.answers, "customer_satisfaction")
    return satisfaction is not None and satisfaction > 7


def _unused_digital_channels(inputs: AlertInputs) -> bool:
    platforms = _number(inputs.answers, "active_platforms_count")
    unused = [
        _choice(inputs.answers, "run_paid_ads") == "no",
        platforms is not None and platforms < 3,
        _choice(inputs.answers, "has_website") == "no",
    ]
    return sum(unused) >= 2


def _growth_outpacing_digital(inputs: AlertInputs) -> bool:
    digital = inputs.dimension_scores.get("digital_maturity")
    return _choice(inputs.answers, "revenue_trend") == "growing" and digital is not None and digital < 40


@dataclass(frozen=True)
class ThresholdRule:
    rule_id: str
    severity: str
    urgency: int
    title: str
    message: str
    recommendation: str
    predicate: Callable[[AlertInputs], bool]

    def evaluate(self, inputs: AlertInputs) -> Optional[Alert]:
        if not self.predicate(inputs):
            return None
        return Alert(
            id=self.rule_id,
            severity=self.severity,
            title=self.title,
            message=self.message,
            recommendation=self.recommendation,
            source=SOURCE,
        )


THRESHOLD_RULES: Tuple[ThresholdRule, ...] = (
    # Critical
    ThresholdRule(
        rule_id="ALERT_CRIT_001",
        severity="critical",
        urgency=90,
        title="Revenue is declining",
        message="Revenue has been falling; left alone this threatens the business.",
        recommendation="Review every revenue source now and put an emergency cash plan in place.",
        predicate=_revenue_declining,
    ),
    ThresholdRule(
        rule_id="ALERT_CRIT_003",
        severity="critical",
        urgency=95,
        title="No digital presence in a digital-first sector",
        message="Customers in this sector look for businesses online; without a presence they go elsewhere.",
        recommendation="Launch a website and social profiles within two weeks.",
        predicate=_absent_online_in_digital_sector,
    ),
    ThresholdRule(
        rule_id="ALERT_CRIT_004",
        severity="critical",
        urgency=92,
        title="Large marketing spend with no measurement",
        message="Marketing money is spent without KPIs or tracking, so its return is unknown.",
        recommendation="Install analytics and tracking and connect every channel to one report.",
        predicate=_untracked_marketing_spend,
    ),
    ThresholdRule(
        rule_id="ALERT_CRIT_005",
        severity="critical",
        urgency=98,
        title="Critical overall position with high risk",
        message="A very low overall score combined with high risk needs immediate intervention.",
        recommendation="Activate an emergency plan and restructure marketing efforts.",
        predicate=_critical_overall_position,
    ),
    # High
    ThresholdRule(
        rule_id="ALERT_HIGH_001",
        severity="high",
        urgency=75,
        title="Customer retention is worryingly low",
        message="More than 30% of customers leave each year; replacing them costs more than keeping them.",
        recommendation="Start a loyalty programme and improve the after-sale experience.",
        predicate=_customers_leaving,
    ),
    ThresholdRule(
        rule_id="ALERT_HIGH_002",
        severity="high",
        urgency=70,
        title="Marketing spend above 30% of revenue",
        message="The marketing budget is a heavy share of revenue and hard to sustain.",
        recommendation="Rebalance the budget toward the channels with the best return.",
        predicate=_heavy_marketing_spend,
    ),
    # Warning
    ThresholdRule(
        rule_id="ALERT_WARN_001",
        severity="warning",
        urgency=50,
        title="Below the sector average",
        message="The overall score puts the business in the lower tier of its sector.",
        recommendation="Set a staged improvement plan to reach the sector average within six months.",
        predicate=_below_sector_average,
    ),
    ThresholdRule(
        rule_id="ALERT_WARN_002",
        severity="warning",
        urgency=52,
        title="Limited measurement",
        message="Without regular KPI tracking decisions are not based on data.",
        recommendation="Build a KPI dashboard and review it weekly.",
        predicate=_no_kpi_tracking,
    ),
)

OPPORTUNITY_RULES: Tuple[ThresholdRule, ...] = (
    ThresholdRule(
        rule_id="OPP_001",
        severity="opportunity",
        urgency=65,
        title="Turn customer satisfaction into referrals",
        message="Customers are very satisfied; that goodwill can bring organic growth.",
        recommendation="Launch a rewarded referral programme for current customers.",
        predicate=_satisfaction_without_referrals,
    ),
    ThresholdRule(
        rule_id="OPP_002",
        severity="opportunity",
        urgency=60,
        title="Unused digital channels",
        message="Several digital channels are not used yet and could reach new customers.",
        recommendation="Test the new channels with a small budget and measure results within 30 days.",
        predicate=_unused_digital_channels,
    ),
    ThresholdRule(
        rule_id="OPP_003",
        severity="opportunity",
        urgency=58,
        title="Growing demand with weak digital reach",
        message="Revenue is growing while digital maturity is low; better reach would compound the growth.",
        recommendation="Invest in digital channels to match the demand the business already sees.",
        predicate=_growth_outpacing_digital,
    ),
)


@dataclass
class AlertReport:
    alerts: List[Alert] = field(default_factory=list)
    opportunities: List[Alert] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "alerts": [a.to_dict() for a in self.alerts],
            "opportunities": [a.to_dict() for a in self.opportunities],
        }


class ThresholdAlertEngine:
    """
    Example:
        engine = ThresholdAlertEngine()
        report = engine.check({"revenue_trend": "declining"}, {"risk_score": 80}, 32.0, "retail")
        report.alerts[0].id  # "ALERT_CRIT_001"
    """

    def __init__(
        self,
        rules: Tuple[ThresholdRule, ...] = THRESHOLD_RULES,
        opportunity_rules: Tuple[ThresholdRule, ...] = OPPORTUNITY_RULES
    ):
        self.rules = rules
        self.opportunity_rules = opportunity_rules

    def check(
        self,
        answers: Mapping[str, Any],
        dimension_scores: Mapping[str, float],
        composite_score: float,
        sector: Optional[str] = None
    ) -> AlertReport:
        inputs = AlertInputs(answers, dimension_scores, composite_score, sector)
        report = AlertReport(
            alerts=self._evaluate(self.rules, inputs),
            opportunities=self._evaluate(self.opportunity_rules, inputs),
        )
        if report.alerts or report.opportunities:
            logger.info(
                f"Threshold alerts: {', '.join(a.id for a in report.alerts) or 'none'}; "
                f"opportunities: {', '.join(a.id for a in report.opportunities) or 'none'}"
            )
        return report

    @staticmethod
    def _evaluate(rules: Tuple[ThresholdRule, ...], inputs: AlertInputs) -> List[Alert]:
        fired = [(rule.urgency, rule.evaluate(inputs)) for rule in rules]
        fired = [(urgency, alert) for urgency, alert in fired if alert is not None]
        fired.sort(key=lambda item: -item[0])
        return [alert for _, alert in fired]


def check_thresholds(
    answers: Mapping[str, Any],
    dimension_scores: Mapping[str, float],
    composite_score: float,
    sector: Optional[str] = None
) -> AlertReport:
    return ThresholdAlertEngine().check(answers, dimension_scores, composite_score, sector)
