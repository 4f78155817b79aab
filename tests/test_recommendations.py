"""
Unit tests for the recommendation synthesizer.
"""

from types import SimpleNamespace

from config.settings import PipelineSettings
from maturity_ai.analyzers.base import Alert, Insight, MISSING_CAPABILITY
from maturity_ai.engine.recommendations import RecommendationSynthesizer, generate_recommendations


def capability(service, analyzer_id="data_scientist"):
    return Insight(
        type=MISSING_CAPABILITY,
        title=f"Missing: {service}",
        explanation="why",
        service=service,
        importance=f"{service} matters",
        expected_benefits=["faster"],
        analyzer_id=analyzer_id,
    )


def alert(alert_id, title, source="financial_analyst"):
    return Alert(id=alert_id, severity="critical", title=title, message="m",
                 recommendation=f"fix {title}", source=source)


class TestTiers:

    def test_capability_becomes_strategic(self):
        recs = RecommendationSynthesizer().synthesize([capability("a CRM system")], [], {})
        assert len(recs.strategic) == 1
        rec = recs.strategic[0]
        assert rec.title == "Establish a CRM system"
        assert rec.rationale == "a CRM system matters"
        assert rec.priority == "high"
        assert rec.source == "data_scientist"
        assert rec.benefits == ["faster"]

    def test_alert_becomes_critical_execution(self):
        recs = RecommendationSynthesizer().synthesize(
            [], [alert("ALERT_CRIT_002", "Unsustainable marketing budget")], {}
        )
        rec = recs.execution[0]
        assert rec.title == "Resolve: Unsustainable marketing budget"
        assert rec.action == "fix Unsustainable marketing budget"
        assert rec.priority == "critical"

    def test_every_alert_kept(self):
        alerts = [alert("A", "same"), alert("A", "same"), alert("CONTRA_001", "c", "contradiction_detector")]
        recs = RecommendationSynthesizer().synthesize([], alerts, {})
        assert len(recs.execution) == 3
        assert [r.order for r in recs.execution] == [1, 2, 3]

    def test_tactical_from_insights(self):
        insights = [
            Insight(type="customer_insight", title="Gap", explanation="e", severity="high", analyzer_id="c"),
            Insight(type="brand", title="Long message", explanation="e", severity="warning", analyzer_id="b"),
            Insight(type="digital_opportunity", title="Ads", explanation="e", severity="medium"),
        ]
        recs = RecommendationSynthesizer().synthesize(insights, [], {})
        assert [r.title for r in recs.tactical] == ["Address: Gap", "Address: Long message"]
        assert recs.strategic == []

    def test_tactical_from_weak_dimensions(self):
        recs = RecommendationSynthesizer(PipelineSettings(tactical_score_threshold=40)).synthesize([], [], {
            "strategy_maturity": 40,
            "digital_maturity": 20,
            "operations_efficiency": 45,
            "risk_score": 80,
            "data_maturity": 5,
        })
        assert [r.title for r in recs.tactical] == ["Improve digital maturity", "Improve risk score"]
        assert all(r.source == "scoring_normalizer" for r in recs.tactical)

    def test_opportunity_becomes_low_tactical(self):
        insight = Insight(type="customer_insight", title="Gap", explanation="e", severity="high", analyzer_id="c")
        opportunity = Alert(id="OPP_001", severity="opportunity", title="Referrals", message="m",
                            recommendation="ask for referrals", source="alert_engine")
        recs = RecommendationSynthesizer(PipelineSettings(tactical_score_threshold=40)).synthesize(
            [insight], [], {"digital_maturity": 20}, [opportunity]
        )
        assert [r.title for r in recs.tactical] == [
            "Address: Gap",
            "Pursue: Referrals",
            "Improve digital maturity",
        ]
        pursue = recs.tactical[1]
        assert pursue.priority == "low"
        assert pursue.action == "ask for referrals"
        assert pursue.source == "alert_engine"
        assert recs.execution == []


class TestOrdering:

    def test_prioritized(self):
        recs = RecommendationSynthesizer().synthesize(
            [capability("x"), Insight(type="i", title="t", explanation="e", severity="high")],
            [alert("A", "a")],
            {},
        )
        assert [r.tier for r in recs.prioritized()] == ["strategic", "tactical", "execution"]
        assert len(recs) == 3

    def test_generate_from_analysis_object(self):
        analysis = SimpleNamespace(
            insights=[capability("AI tools", "innovation_scout")],
            alerts=[alert("A", "a")],
            dimension_scores={},
        )
        data = generate_recommendations(analysis).to_dict()
        assert set(data) == {"strategic", "tactical", "execution"}
        assert data["strategic"][0]["title"] == "Establish AI tools"
        assert data["execution"][0]["priority"] == "critical"
