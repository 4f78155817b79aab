"""
Integration tests for the assessment service on in-memory SQLite.
"""

import pytest

from maturity_ai.assessment.session import SessionStatus, compute_progress
from maturity_ai.database import db, AnswerRecord, AnalysisResultRecord
from maturity_ai.exceptions import (
    AssessmentError,
    InvalidAnswer,
    InvalidSessionState,
    QuestionNotFound,
    SessionNotFound,
)


@pytest.fixture
def session_id(service):
    return service.start_session(company_id="company-1", user_id="user-1", sector="retail")


class TestSessionLifecycle:

    def test_create_is_draft(self, service):
        session_id = service.create_session(company_id="c", sector="fnb")
        session = service.get_session(session_id)
        assert session.status is SessionStatus.DRAFT
        assert session.sector == "fnb"
        assert session.questions_total == service.flow.total_questions("fnb")

    def test_begin_points_at_first_question(self, service):
        session_id = service.create_session(sector="retail")
        session = service.begin_session(session_id)
        assert session.status is SessionStatus.IN_PROGRESS
        assert service.get_session(session_id).current_question_id == "Q_BAS_001"

    def test_start_session(self, service, session_id):
        assert service.get_session(session_id).status is SessionStatus.IN_PROGRESS
        assert service.next_question(session_id).id == "Q_BAS_001"

    def test_unknown_sector_and_type(self, service):
        with pytest.raises(AssessmentError):
            service.create_session(sector="space_mining")
        with pytest.raises(AssessmentError):
            service.create_session(sector="retail", session_type="marathon")

    def test_unknown_session(self, service):
        with pytest.raises(SessionNotFound):
            service.next_question("missing")

    def test_abandon(self, service, session_id):
        service.abandon_session(session_id)
        assert service.get_session(session_id).status is SessionStatus.ABANDONED
        with pytest.raises(InvalidSessionState):
            service.submit_answer(session_id, "Q_BAS_001", 4)

    def test_begin_twice_rejected(self, service, session_id):
        with pytest.raises(InvalidSessionState):
            service.begin_session(session_id)

    def test_update_context(self, service, session_id):
        session = service.update_context(session_id, goals=["grow online"])
        assert session.context_data["goals"] == ["grow online"]
        assert service.get_session(session_id).context_data["goals"] == ["grow online"]
        with pytest.raises(AssessmentError):
            service.update_context(session_id, sector="education")


class TestAnswers:

    def test_submit_advances_pointer(self, service, session_id):
        service.submit_answer(session_id, "Q_BAS_001", 6)
        assert service.next_question(session_id).id == "Q_BAS_002"

    def test_resubmission_keeps_one_answer(self, service, session_id):
        service.submit_answer(session_id, "Q_FIN_001", 100000)
        service.submit_answer(session_id, "Q_FIN_001", 150000)

        rows = AnswerRecord.query.filter_by(session_id=session_id, question_id="Q_FIN_001").all()
        assert len(rows) == 1
        assert rows[0].answer_value == 150000
        assert rows[0].answer_normalized == {"number": 150000.0}

    def test_progress(self, service, session_id):
        total = service.flow.total_questions("retail")
        service.submit_answer(session_id, "Q_BAS_001", 6)
        service.submit_answer(session_id, "Q_BAS_002", 4)
        progress = service.get_progress(session_id)
        assert progress["questions_answered"] == 2
        assert progress["questions_total"] == total
        assert progress["progress_percentage"] == compute_progress(2, total)

    def test_branch_through_service(self, service, session_id):
        service.submit_answer(session_id, "Q_DIG_001", "no")
        assert service.next_question(session_id).id == "Q_SOC_001"

    def test_deep_dive_through_service(self, service, session_id):
        service.submit_answer(session_id, "Q_FIN_002", "declining")
        assert service.next_question(session_id).id == "Q_FIN_DD_001"
        service.submit_answer(session_id, "Q_FIN_DD_001", "3_months")
        assert service.next_question(session_id).id == "Q_FIN_003"

    def test_invalid_answer_leaves_nothing(self, service, session_id):
        with pytest.raises(InvalidAnswer):
            service.submit_answer(session_id, "Q_DIG_001", "perhaps")
        assert AnswerRecord.query.filter_by(session_id=session_id).count() == 0

    def test_unknown_question(self, service, session_id):
        with pytest.raises(QuestionNotFound):
            service.submit_answer(session_id, "Q_NOPE", "yes")

    def test_submit_on_draft_rejected(self, service):
        session_id = service.create_session(sector="retail")
        with pytest.raises(InvalidSessionState):
            service.submit_answer(session_id, "Q_BAS_001", 3)
        assert AnswerRecord.query.filter_by(session_id=session_id).count() == 0

    def test_skip(self, service, session_id):
        record = service.skip_question(session_id, "Q_BAS_001", reason="prefer not to say")
        assert record.is_skipped
        assert record.skip_reason == "prefer not to say"
        assert service.next_question(session_id).id == "Q_BAS_002"
        assert service.get_progress(session_id)["questions_answered"] == 1

    def test_basic_info_copied_to_context(self, service, session_id):
        service.submit_answer(session_id, "Q_BAS_003", "Open a second branch")
        assert service.get_session(session_id).context_data["primary_goal"] == "Open a second branch"

    def test_next_question_none_when_done(self, service, session_id):
        for question in service.flow.sequence("retail"):
            service.skip_question(session_id, question.id)
        assert service.next_question(session_id) is None
        assert service.get_progress(session_id)["progress_percentage"] == 100.0


def lowest_answer(question):
    """'no' where offered, else the first option or the smallest allowed number."""
    values = question.option_values()
    if question.question_type == "multiple_choice":
        return values[:1]
    if values:
        return "no" if "no" in values else values[0]
    if question.question_type == "text":
        return "n/a"
    return question.validation_rules.get("min", 0)


def walk(service, session_id, overrides=None):
    """Answer whatever the service asks until it has nothing left; returns the asked ids."""
    overrides = overrides or {}
    asked = []
    question = service.next_question(session_id)
    while question is not None:
        assert question.id not in asked
        asked.append(question.id)
        service.submit_answer(session_id, question.id, overrides.get(question.id, lowest_answer(question)))
        question = service.next_question(session_id)
    return asked


class TestFullWalk:

    def test_branch_skip_holds_to_the_end(self, service, session_id):
        asked = walk(service, session_id, {"Q_BAS_001": 5, "Q_SOC_001": 2})

        assert asked.index("Q_SOC_001") == asked.index("Q_DIG_001") + 1
        assert not {"Q_DIG_002", "Q_DIG_003", "Q_DIG_004"} & set(asked)
        assert asked[-1] == "Q_GRW_001"

        progress = service.get_progress(session_id)
        assert progress["questions_answered"] == progress["questions_total"] == len(asked)
        assert progress["progress_percentage"] == 100.0

        result = service.complete_session(session_id)
        assert "CONTRA_002" not in {a.id for a in result.alerts}

    def test_minimal_answers_skip_social_and_history(self, service, session_id):
        asked = walk(service, session_id)

        assert "Q_SOC_001" in asked
        assert not {"Q_SOC_002", "Q_SOC_003"} & set(asked)
        assert not {"Q_FIN_001", "Q_FIN_002", "Q_CUS_003"} & set(asked)
        assert service.get_progress(session_id)["progress_percentage"] == 100.0

    def test_follow_ups_count_toward_progress(self, service, session_id):
        asked = walk(service, session_id, {"Q_BAS_001": 5, "Q_FIN_002": "declining", "Q_CUS_003": 45})

        assert asked.index("Q_FIN_DD_001") == asked.index("Q_FIN_002") + 1
        assert asked.index("Q_CUS_DD_001") == asked.index("Q_CUS_003") + 1
        progress = service.get_progress(session_id)
        assert progress["questions_answered"] == progress["questions_total"] == len(asked)

    def test_progress_not_complete_while_follow_up_pending(self, service, session_id):
        service.submit_answer(session_id, "Q_FIN_002", "declining")
        progress = service.get_progress(session_id)
        assert progress["questions_total"] == service.flow.total_questions("retail") + 1
        assert progress["questions_answered"] == 1


class TestCompletion:

    def _answer(self, service, session_id, answers):
        for question_id, value in answers.items():
            service.submit_answer(session_id, question_id, value)

    def test_complete_stores_result(self, service, session_id):
        self._answer(service, session_id, {
            "Q_FIN_001": 10000,
            "Q_FIN_002": "declining",
            "Q_FIN_003": "high",
            "Q_FIN_004": 8000,
            "Q_DIG_001": "yes",
            "Q_RSK_001": "yes",
        })

        result = service.complete_session(session_id)

        session = service.get_session(session_id)
        assert session.status is SessionStatus.COMPLETED
        assert session.progress_percentage == 100.0
        assert len(result.analyzers_run) == 10
        assert result.failed_analyzers == []

        alert_ids = {a.id for a in result.alerts}
        assert {"ALERT_CRIT_002", "CONTRA_001"} <= alert_ids

        stored = service.latest_result(session_id)
        assert stored["composite_score"] == result.composite_score
        assert stored["maturity_level"] == result.maturity_level
        assert len(stored["alerts"]) == len(result.alerts)
        assert stored["flags"] == result.flags.to_dict()
        assert "declining_revenue" in {f["flag"] for f in stored["flags"]["red_flags"]}
        assert stored["opportunities"] == [o.to_dict() for o in result.opportunities]

    def test_every_alert_has_critical_execution_recommendation(self, service, session_id):
        self._answer(service, session_id, {
            "Q_FIN_001": 10000,
            "Q_FIN_004": 8000,
            "Q_SOC_003": "yes",
            "Q_CUS_002": 9,
            "Q_CUS_003": 45,
        })
        result = service.complete_session(session_id)

        execution = {(r.title, r.priority) for r in result.recommendations.execution}
        assert result.alerts
        for alert in result.alerts:
            assert (f"Resolve: {alert.title}", "critical") in execution

    def test_complete_draft_raises_and_stores_nothing(self, service):
        session_id = service.create_session(sector="retail")
        with pytest.raises(InvalidSessionState):
            service.complete_session(session_id)
        assert AnalysisResultRecord.query.filter_by(session_id=session_id).count() == 0
        assert service.get_session(session_id).status is SessionStatus.DRAFT

    def test_complete_twice_raises(self, service, session_id):
        service.complete_session(session_id)
        with pytest.raises(InvalidSessionState):
            service.complete_session(session_id)
        assert len(service.result_history(session_id)) == 1

    def test_failed_result_write_rolls_back_status(self, service, session_id, monkeypatch):
        def boom(*args, **kwargs):
            raise RuntimeError("disk full")

        monkeypatch.setattr(service.results, "append", boom)
        with pytest.raises(RuntimeError):
            service.complete_session(session_id)

        assert service.get_session(session_id).status is SessionStatus.IN_PROGRESS
        assert AnalysisResultRecord.query.filter_by(session_id=session_id).count() == 0


class TestCompareAndSet:

    def test_stale_write_loses(self, service, session_id):
        stale = service.get_session(session_id)
        service.abandon_session(session_id)

        stale.advance("Q_BAS_002", 1, 10)
        assert service.sessions.compare_and_set(stale, SessionStatus.IN_PROGRESS) is False
        assert service.get_session(session_id).status is SessionStatus.ABANDONED

    def test_save_writes_unconditionally(self, service, session_id):
        session = service.get_session(session_id)
        session.context_data["note"] = "call back on Monday"
        session.advance("Q_BAS_003", 2, 10)

        service.sessions.save(session)
        db.session.commit()

        stored = service.get_session(session_id)
        assert stored.current_question_id == "Q_BAS_003"
        assert stored.questions_answered == 2
        assert stored.progress_percentage == compute_progress(2, 10)
        assert stored.context_data["note"] == "call back on Monday"

    def test_save_unknown_session(self, service, session_id):
        session = service.get_session(session_id)
        session.id = "missing"
        with pytest.raises(SessionNotFound):
            service.sessions.save(session)
