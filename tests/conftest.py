"""
Shared fixtures: a Flask app on in-memory SQLite and the service bound to it.
"""

import pytest

from config.settings import PipelineSettings, TestingConfig
from maturity_ai.analyzers.base import AnalyzerBase, AnalyzerResult
from maturity_ai.assessment.questions import get_default_catalog
from maturity_ai.database import db
from web.app import create_app, get_assessment_service


@pytest.fixture
def app():
    app = create_app(TestingConfig)
    with app.app_context():
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def service(app):
    return get_assessment_service(app)


@pytest.fixture
def catalog():
    return get_default_catalog()


@pytest.fixture
def settings():
    return PipelineSettings(analyzer_parallel=False)


class StubAnalyzer(AnalyzerBase):
    """Analyzer returning fixed scores, or raising when told to."""

    def __init__(self, analyzer_id, scores=None, fail=False, insights=None, alerts=None):
        self.analyzer_id = analyzer_id
        self.name = analyzer_id.replace("_", " ").title()
        self._scores = scores or {}
        self._fail = fail
        self._insights = insights or []
        self._alerts = alerts or []

    def analyze(self, answers, context):
        if self._fail:
            raise RuntimeError(f"{self.analyzer_id} exploded")
        return AnalyzerResult(
            analyzer_id=self.analyzer_id,
            scores=dict(self._scores),
            insights=list(self._insights),
            alerts=list(self._alerts),
        )


@pytest.fixture
def stub_analyzer():
    return StubAnalyzer
