"""
Unit tests for the threshold alert engine.
"""

import pytest

from maturity_ai.engine.alerts import (
    OPPORTUNITY_RULES,
    THRESHOLD_RULES,
    ThresholdAlertEngine,
    check_thresholds,
)

SCORED = {"digital_maturity": 60, "risk_score": 30}


def ids(alerts):
    return [a.id for a in alerts]


def check(answers, scores=None, composite=70.0, sector="retail"):
    return check_thresholds(answers, SCORED if scores is None else scores, composite, sector)


class TestThresholdRules:

    @pytest.mark.parametrize("answers, scores, composite, expected", [
        ({"revenue_trend": "declining"}, None, 70.0, ["ALERT_CRIT_001"]),
        ({"has_website": "no"}, {"digital_maturity": 20, "risk_score": 30}, 70.0, ["ALERT_CRIT_003"]),
        ({"marketing_budget": 20000, "tracks_kpis": "no"}, None, 70.0, ["ALERT_CRIT_004", "ALERT_WARN_002"]),
        ({}, {"risk_score": 80}, 15.0, ["ALERT_CRIT_005", "ALERT_WARN_001"]),
        ({"churn_rate": 35}, None, 70.0, ["ALERT_HIGH_001"]),
        ({"annual_revenue": 100000, "marketing_budget": 40000}, None, 70.0, ["ALERT_HIGH_002"]),
        ({}, None, 35.0, ["ALERT_WARN_001"]),
        ({"tracks_kpis": "no"}, None, 70.0, ["ALERT_WARN_002"]),
    ])
    def test_each_rule_fires(self, answers, scores, composite, expected):
        assert ids(check(answers, scores, composite).alerts) == expected

    @pytest.mark.parametrize("answers, scores, composite, sector, rule_id", [
        ({"has_website": "no"}, {"digital_maturity": 20}, 70.0, "professional_services", "ALERT_CRIT_003"),
        ({"has_website": "no"}, {"digital_maturity": 40}, 70.0, "retail", "ALERT_CRIT_003"),
        ({"marketing_budget": 20000, "tracks_kpis": "no", "use_tracking_pixel": "yes"}, None, 70.0, "retail",
         "ALERT_CRIT_004"),
        ({"marketing_budget": 5000, "tracks_kpis": "no"}, None, 70.0, "retail", "ALERT_CRIT_004"),
        ({}, {"digital_maturity": 10}, 15.0, "retail", "ALERT_CRIT_005"),
        ({"churn_rate": 30}, None, 70.0, "retail", "ALERT_HIGH_001"),
        ({"annual_revenue": 100000, "marketing_budget": 60000}, None, 70.0, "retail", "ALERT_HIGH_002"),
        ({"annual_revenue": 0, "marketing_budget": 60000}, None, 70.0, "retail", "ALERT_HIGH_002"),
        ({}, {}, 0.0, "retail", "ALERT_WARN_001"),
    ])
    def test_rule_holds_back(self, answers, scores, composite, sector, rule_id):
        report = check(answers, scores, composite, sector)
        assert rule_id not in ids(report.alerts)

    def test_unanswered_raises_nothing(self):
        report = check({})
        assert report.alerts == []
        assert report.opportunities == []

    def test_ordered_by_urgency(self):
        report = check(
            {"revenue_trend": "declining", "churn_rate": 40, "tracks_kpis": "no"},
            {"risk_score": 80},
            15.0,
        )
        assert ids(report.alerts) == [
            "ALERT_CRIT_005",
            "ALERT_CRIT_001",
            "ALERT_HIGH_001",
            "ALERT_WARN_002",
            "ALERT_WARN_001",
        ]

    def test_alerts_carry_source_and_severity(self):
        alert = check({"churn_rate": 50}).alerts[0]
        assert alert.source == "alert_engine"
        assert alert.severity == "high"
        assert alert.recommendation

    def test_rule_tables_are_enumerable(self):
        assert {r.severity for r in THRESHOLD_RULES} == {"critical", "high", "warning"}
        assert {r.severity for r in OPPORTUNITY_RULES} == {"opportunity"}
        assert len({r.rule_id for r in THRESHOLD_RULES + OPPORTUNITY_RULES}) == 11


class TestOpportunities:

    @pytest.mark.parametrize("answers, scores, expected", [
        ({"customer_satisfaction": 8}, None, ["OPP_001"]),
        ({"customer_satisfaction": 7}, None, []),
        ({"run_paid_ads": "no", "active_platforms_count": 1}, None, ["OPP_002"]),
        ({"run_paid_ads": "no"}, None, []),
        ({"revenue_trend": "growing"}, {"digital_maturity": 30}, ["OPP_003"]),
        ({"revenue_trend": "growing"}, {"digital_maturity": 60}, []),
    ])
    def test_each_opportunity(self, answers, scores, expected):
        assert ids(check(answers, scores).opportunities) == expected

    def test_opportunities_kept_out_of_alerts(self):
        report = check({"customer_satisfaction": 9, "run_paid_ads": "no", "has_website": "no"})
        assert ids(report.opportunities) == ["OPP_001", "OPP_002"]
        assert all(a.severity != "opportunity" for a in report.alerts)

    def test_custom_rule_subset(self):
        engine = ThresholdAlertEngine(rules=THRESHOLD_RULES[:1], opportunity_rules=())
        report = engine.check({"churn_rate": 50, "customer_satisfaction": 9}, SCORED, 70.0)
        assert report.alerts == []
        assert report.opportunities == []

    def test_to_dict(self):
        data = check({"revenue_trend": "declining", "customer_satisfaction": 9}).to_dict()
        assert [a["id"] for a in data["alerts"]] == ["ALERT_CRIT_001"]
        assert [o["id"] for o in data["opportunities"]] == ["OPP_001"]
