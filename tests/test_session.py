"""
Unit tests for the session state machine.
"""

import pytest

from maturity_ai.assessment.session import (
    AssessmentSession,
    SessionStatus,
    TRANSITIONS,
    compute_progress,
)
from maturity_ai.exceptions import InvalidSessionState


def make_session(**kwargs):
    return AssessmentSession(id="sess-1", **kwargs)


class TestTransitions:

    def test_start_moves_to_in_progress(self):
        session = make_session()
        session.start()
        assert session.status is SessionStatus.IN_PROGRESS
        assert session.started_at is not None

    def test_complete_stamps_and_forces_full_progress(self):
        session = make_session()
        session.start()
        session.advance("Q_FIN_001", 3, 10)
        session.complete()
        assert session.status is SessionStatus.COMPLETED
        assert session.completed_at is not None
        assert session.progress_percentage == 100.0
        assert session.current_question_id is None

    def test_abandon_from_draft(self):
        session = make_session()
        session.abandon()
        assert session.status is SessionStatus.ABANDONED

    def test_abandon_from_in_progress(self):
        session = make_session()
        session.start()
        session.abandon()
        assert session.status is SessionStatus.ABANDONED

    def test_complete_from_draft_raises(self):
        session = make_session()
        with pytest.raises(InvalidSessionState) as exc:
            session.complete()
        assert exc.value.session_id == "sess-1"
        assert exc.value.status == "draft"
        assert set(exc.value.allowed) == {"in_progress", "abandoned"}
        assert session.status is SessionStatus.DRAFT

    @pytest.mark.parametrize("terminal", [SessionStatus.COMPLETED, SessionStatus.ABANDONED])
    def test_terminal_states_have_no_exits(self, terminal):
        assert terminal.is_terminal
        session = make_session(status=terminal)
        for action in (session.start, session.complete, session.abandon):
            with pytest.raises(InvalidSessionState):
                action()
        assert session.status is terminal

    def test_transition_table_covers_every_status(self):
        assert set(TRANSITIONS) == set(SessionStatus)

    def test_advance_requires_in_progress(self):
        session = make_session()
        with pytest.raises(InvalidSessionState):
            session.advance("Q_BAS_001", 0, 10)


class TestProgress:

    def test_formula(self):
        assert compute_progress(1, 3) == 33.33
        assert compute_progress(2, 3) == 66.67

    def test_zero_total(self):
        assert compute_progress(5, 0) == 0.0

    def test_clamped_to_100(self):
        assert compute_progress(12, 10) == 100.0

    def test_advance_recomputes(self):
        session = make_session()
        session.start()
        session.advance("Q_BAS_002", 1, 8)
        assert session.current_question_id == "Q_BAS_002"
        assert session.questions_answered == 1
        assert session.questions_total == 8
        assert session.progress_percentage == 12.5


class TestSerialization:

    def test_to_dict(self):
        session = make_session(context_data={"sector": "retail"})
        data = session.to_dict()
        assert data["status"] == "draft"
        assert data["context_data"] == {"sector": "retail"}
        assert data["started_at"] is None
        assert session.sector == "retail"
