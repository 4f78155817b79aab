"""
Unit tests for the adaptive question flow.
"""

import pytest

from config.settings import PipelineSettings
from maturity_ai.assessment.flow_rules import FlowRule, equals, greater_than
from maturity_ai.assessment.question_flow import QuestionFlowEngine


@pytest.fixture
def engine(catalog):
    return QuestionFlowEngine(catalog, PipelineSettings())


class TestFirstQuestion:

    def test_lowest_display_order(self, engine):
        assert engine.next_question({}, None, "retail").id == "Q_BAS_001"

    def test_first_unanswered_without_pointer(self, engine):
        assert engine.next_question({"Q_BAS_001": 3}, None, "retail").id == "Q_BAS_002"


class TestBranchRules:

    def test_no_website_jumps_to_social(self, engine):
        question = engine.next_question({"Q_DIG_001": "no"}, "Q_DIG_001", "retail")
        assert question.id == "Q_SOC_001"

    def test_website_continues_in_order(self, engine):
        question = engine.next_question({"Q_DIG_001": "yes"}, "Q_DIG_001", "retail")
        assert question.id == "Q_DIG_002"

    def test_answered_target_falls_through(self, engine):
        answers = {"Q_DIG_001": "no", "Q_SOC_001": 2}
        question = engine.next_question(answers, "Q_DIG_001", "retail")
        # Website questions stay skipped, so ordering resumes after the target
        assert question.id == "Q_SOC_002"


class TestDeepDiveRules:

    def test_declining_revenue(self, engine):
        question = engine.next_question({"Q_FIN_002": "declining"}, "Q_FIN_002", "retail")
        assert question.id == "Q_FIN_DD_001"

    def test_stable_revenue_skips_follow_up(self, engine):
        question = engine.next_question({"Q_FIN_002": "stable"}, "Q_FIN_002", "retail")
        assert question.id == "Q_FIN_003"

    def test_flow_resumes_after_follow_up(self, engine):
        answers = {"Q_FIN_002": "declining", "Q_FIN_DD_001": "6_months"}
        question = engine.next_question(answers, "Q_FIN_DD_001", "retail")
        assert question.id == "Q_FIN_003"

    def test_high_churn(self, engine):
        assert engine.next_question({"Q_CUS_003": 25}, "Q_CUS_003", "retail").id == "Q_CUS_DD_001"
        assert engine.next_question({"Q_CUS_003": 15}, "Q_CUS_003", "retail").id == "Q_CUS_004"

    def test_malformed_value_does_not_trigger(self, engine):
        question = engine.next_question({"Q_CUS_003": "lots"}, "Q_CUS_003", "retail")
        assert question.id == "Q_CUS_004"

    def test_excluded_target_falls_through(self, catalog):
        rules = (FlowRule("DD_TEST", "Q_OPS_001", equals("no"), "Q_INV_001"),)
        engine = QuestionFlowEngine(catalog, PipelineSettings(), deep_dive_rules=rules)
        question = engine.next_question({"Q_OPS_001": "no"}, "Q_OPS_001", "professional_services")
        assert question.id == "Q_RSK_001"

    def test_unknown_target_falls_through(self, catalog):
        rules = (FlowRule("DD_TEST", "Q_CUS_003", greater_than(0), "Q_MISSING"),)
        engine = QuestionFlowEngine(catalog, PipelineSettings(), deep_dive_rules=rules)
        assert engine.next_question({"Q_CUS_003": 50}, "Q_CUS_003", "retail").id == "Q_CUS_004"


class TestSectorExclusion:

    def test_professional_services_skip_inventory(self, engine):
        question = engine.next_question({"Q_OPS_001": "yes"}, "Q_OPS_001", "professional_services")
        assert question.id == "Q_RSK_001"

    def test_retail_keeps_inventory(self, engine):
        question = engine.next_question({"Q_OPS_001": "yes"}, "Q_OPS_001", "retail")
        assert question.id == "Q_INV_001"

    def test_totals_exclude_follow_ups_and_excluded_categories(self, engine, catalog):
        retail = engine.total_questions("retail")
        services = engine.total_questions("professional_services")
        assert retail == len(catalog.get_active_questions("retail"))
        assert services == retail - 2


class TestSkipRules:

    def test_website_block_never_comes_back(self, engine):
        answers = {
            q.id: "no" if q.options else 1
            for q in engine.sequence("retail")
            if q.category != "website"
        }
        assert engine.next_question(answers, None, "retail") is None
        assert engine.next_question(answers, "Q_GRW_001", "retail") is None
        assert not any(q.category == "website" for q in engine.sequence("retail", answers))

    def test_website_block_kept_when_site_exists(self, engine):
        answers = {"Q_DIG_001": "yes"}
        assert engine.total_questions("retail", answers) == engine.total_questions("retail")

    def test_no_social_presence(self, engine):
        question = engine.next_question({"Q_SOC_001": 0}, "Q_SOC_001", "retail")
        assert question.id == "Q_MKT_001"

    def test_young_business_skips_history_questions(self, engine):
        answers = {"Q_BAS_001": 0.5, "Q_BAS_002": 2, "Q_BAS_003": "Survive", "Q_BAS_004": "Cash"}
        assert engine.next_question(answers, "Q_BAS_004", "retail").id == "Q_FIN_003"
        skipped = {q.id for q in engine.sequence("retail")} - {q.id for q in engine.sequence("retail", answers)}
        assert skipped == {"Q_FIN_001", "Q_FIN_002", "Q_CUS_003"}

    def test_unanswered_gate_skips_nothing(self, engine):
        assert engine.sequence("retail", {"Q_BAS_001": None}) == engine.sequence("retail")

    def test_totals_follow_answers(self, engine):
        base = engine.total_questions("retail")
        assert engine.total_questions("retail", {"Q_DIG_001": "no"}) == base - 3
        # An answer given before the skip applied still counts
        assert engine.total_questions("retail", {"Q_DIG_001": "no", "Q_DIG_002": "yes"}) == base - 2

    def test_triggered_follow_up_counts(self, engine):
        base = engine.total_questions("retail")
        assert engine.total_questions("retail", {"Q_FIN_002": "declining"}) == base + 1
        assert engine.total_questions("retail", {"Q_FIN_002": "stable"}) == base

    def test_pending_follow_up_returned_without_pointer(self, engine):
        answers = {"Q_FIN_002": "declining", "Q_GRW_001": ["new_products"]}
        assert engine.next_question(answers, None, "retail").id == "Q_FIN_DD_001"
        assert engine.next_question(answers, "Q_GRW_001", "retail").id == "Q_FIN_DD_001"


class TestCompletion:

    def test_none_when_everything_answered(self, engine):
        answers = {q.id: "x" for q in engine.sequence("retail")}
        last = engine.sequence("retail")[-1].id
        assert engine.next_question(answers, last, "retail") is None
        assert engine.next_question(answers, None, "retail") is None

    def test_never_returns_answered_question(self, engine):
        sequence = engine.sequence("retail")
        answers = {}
        last = None
        for _ in range(len(sequence) + 5):
            question = engine.next_question(answers, last, "retail")
            if question is None:
                break
            assert question.id not in answers
            answers[question.id] = "no" if question.options else 1
            last = question.id
        assert engine.next_question(answers, last, "retail") is None
