"""
Unit tests for the pattern flags.
"""

import pytest

from maturity_ai.engine.flags import RED_FLAG_RULES, PatternDetector, detect_patterns


def names(flags, key="flag"):
    return [f[key] for f in flags]


class TestRedFlags:

    @pytest.mark.parametrize("answers, flag, severity", [
        ({"revenue_trend": "declining"}, "declining_revenue", "critical"),
        ({"churn_rate": 31}, "high_churn", "high"),
        ({"annual_revenue": 100000, "marketing_budget": 45000}, "excessive_budget", "high"),
        ({"has_website": "no"}, "no_website", "high"),
    ])
    def test_each_flag(self, answers, flag, severity):
        report = detect_patterns(answers)
        assert report.red_flags == [{"flag": flag, "message": report.red_flags[0]["message"], "severity": severity}]

    @pytest.mark.parametrize("answers", [
        {"revenue_trend": "stable"},
        {"churn_rate": 30},
        {"annual_revenue": 100000, "marketing_budget": 40000},
        {"marketing_budget": 40000},
        {"has_website": "yes"},
    ])
    def test_below_threshold(self, answers):
        assert detect_patterns(answers).red_flags == []


class TestGreenFlags:

    def test_all_green(self):
        report = detect_patterns({
            "customer_satisfaction": 9,
            "revenue_trend": "growing",
            "tracks_kpis": "yes",
            "uses_crm_system": "yes",
        })
        assert names(report.green_flags) == ["high_satisfaction", "growing_revenue", "data_driven"]
        assert {f["impact"] for f in report.green_flags} == {"positive"}
        assert report.red_flags == []

    def test_data_driven_needs_both(self):
        report = detect_patterns({"tracks_kpis": "yes", "uses_crm_system": "no"})
        assert report.green_flags == []

    def test_satisfaction_of_eight_is_not_a_flag(self):
        assert detect_patterns({"customer_satisfaction": 8}).green_flags == []


class TestAnomalies:

    @pytest.mark.parametrize("answers, anomaly, action", [
        ({"annual_revenue": 5_000_000, "employee_count": 2}, "high_revenue_per_employee", "verify_data"),
        ({"annual_revenue": 30_000, "employee_count": 3}, "low_revenue_per_employee", "investigate"),
    ])
    def test_revenue_per_employee(self, answers, anomaly, action):
        report = detect_patterns(answers)
        assert names(report.anomalies, "type") == [anomaly]
        assert report.anomalies[0]["action"] == action

    @pytest.mark.parametrize("answers", [
        {"annual_revenue": 500_000, "employee_count": 5},
        {"annual_revenue": 500_000, "employee_count": 0},
        {"annual_revenue": 0, "employee_count": 5},
        {"annual_revenue": 500_000},
    ])
    def test_plausible_or_missing(self, answers):
        assert detect_patterns(answers).anomalies == []


class TestReport:

    def test_empty_answers(self):
        assert detect_patterns({}).to_dict() == {"red_flags": [], "green_flags": [], "anomalies": []}

    def test_flag_names(self):
        report = detect_patterns({"revenue_trend": "growing", "has_website": "no",
                                  "annual_revenue": 10_000, "employee_count": 4})
        assert report.flag_names() == ["no_website", "growing_revenue", "low_revenue_per_employee"]

    def test_custom_rule_subset(self):
        detector = PatternDetector(red_rules=RED_FLAG_RULES[:1], green_rules=(), anomaly_rules=())
        report = detector.detect({"has_website": "no", "revenue_trend": "declining"})
        assert names(report.red_flags) == ["declining_revenue"]
