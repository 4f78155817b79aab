"""
Inference Aggregator

Runs every registered analyzer over the full answer set and merges their
results:

- Dimension scores: last writer wins, in registration order
- Insights: concatenated, tagged with analyzer id and name
- Alerts: concatenated (no dedup), tagged with their source analyzer
- SWOT: concatenated per category

Analyzers run sequentially or on a thread pool; either way all results are
joined before merging, so the merge order never depends on timing. A
failing analyzer is logged and contributes nothing.
"""

from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field, replace
from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple
import logging

from config.settings import PipelineSettings
from ..analyzers import AnalyzerBase, AnalyzerResult, Alert, Insight, SwotFragment, default_panel
from ..exceptions import AnalyzerFailure

logger = logging.getLogger(__name__)


@dataclass
class InferenceOutcome:
    """Merged output of the analyzer panel."""
    dimension_scores: Dict[str, float] = field(default_factory=dict)
    insights: List[Insight] = field(default_factory=list)
    alerts: List[Alert] = field(default_factory=list)
    swot: SwotFragment = field(default_factory=SwotFragment)
    summaries: Dict[str, str] = field(default_factory=dict)
    analyzers_run: List[str] = field(default_factory=list)
    failed_analyzers: List[str] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.analyzers_run

    def to_dict(self) -> Dict[str, Any]:
        return {
            "dimension_scores": dict(self.dimension_scores),
            "insights": [i.to_dict() for i in self.insights],
            "alerts": [a.to_dict() for a in self.alerts],
            "swot": self.swot.to_dict(),
            "summaries": dict(self.summaries),
            "analyzers_run": list(self.analyzers_run),
            "failed_analyzers": list(self.failed_analyzers),
        }


class InferenceAggregator:
    """
    Example:
        aggregator = InferenceAggregator()
        outcome = aggregator.run_inference({"has_website": "no"}, {"sector": "retail"})
        outcome.dimension_scores["strategy_maturity"]
    """

    def __init__(
        self,
        analyzers: Optional[Sequence[AnalyzerBase]] = None,
        settings: Optional[PipelineSettings] = None
    ):
        self.analyzers = list(analyzers) if analyzers is not None else default_panel()
        self.settings = settings or PipelineSettings()

        ids = [a.analyzer_id for a in self.analyzers]
        if len(ids) != len(set(ids)):
            raise ValueError(f"Duplicate analyzer ids in panel: {ids}")

    def run_inference(self, answers: Mapping[str, Any], context: Mapping[str, Any]) -> InferenceOutcome:
        """Run the whole panel and merge the results in registration order."""
        # Read-only views; analyzers share nothing mutable
        answers_view = MappingProxyType(dict(answers))
        context_view = MappingProxyType(dict(context))

        if self.settings.analyzer_parallel and len(self.analyzers) > 1:
            collected = self._run_parallel(answers_view, context_view)
        else:
            collected = [
                self._capture(analyzer, answers_view, context_view)
                for analyzer in self.analyzers
            ]

        outcome = self._merge(collected)
        logger.info(
            f"Inference complete: {len(outcome.analyzers_run)} analyzers ran, "
            f"{len(outcome.failed_analyzers)} failed, "
            f"{len(outcome.dimension_scores)} dimensions scored"
        )
        return outcome

    def _run_one(self, analyzer: AnalyzerBase, answers: Mapping, context: Mapping) -> AnalyzerResult:
        try:
            result = analyzer.analyze(answers, context)
        except Exception as e:
            raise AnalyzerFailure(
                f"Analyzer {analyzer.analyzer_id} failed: {e}",
                analyzer_id=analyzer.analyzer_id,
                cause=e,
            ) from e

        if not isinstance(result, AnalyzerResult):
            raise AnalyzerFailure(
                f"Analyzer {analyzer.analyzer_id} returned {type(result).__name__}",
                analyzer_id=analyzer.analyzer_id,
            )
        return result

    def _capture(
        self,
        analyzer: AnalyzerBase,
        answers: Mapping,
        context: Mapping
    ) -> Tuple[AnalyzerBase, Optional[AnalyzerResult]]:
        try:
            return analyzer, self._run_one(analyzer, answers, context)
        except AnalyzerFailure as failure:
            self._log_failure(failure)
            return analyzer, None

    def _run_parallel(
        self,
        answers: Mapping,
        context: Mapping
    ) -> List[Tuple[AnalyzerBase, Optional[AnalyzerResult]]]:
        workers = max(1, min(self.settings.analyzer_max_workers, len(self.analyzers)))
        with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="analyzer") as executor:
            futures = [
                executor.submit(self._run_one, analyzer, answers, context)
                for analyzer in self.analyzers
            ]

            collected = []
            for analyzer, future in zip(self.analyzers, futures):
                try:
                    collected.append((analyzer, future.result()))
                except AnalyzerFailure as failure:
                    self._log_failure(failure)
                    collected.append((analyzer, None))
        return collected

    @staticmethod
    def _log_failure(failure: AnalyzerFailure) -> None:
        # Called from inside the except block, so the traceback is attached
        logger.exception(f"{failure} - contribution dropped")

    def _merge(self, collected: List[Tuple[AnalyzerBase, Optional[AnalyzerResult]]]) -> InferenceOutcome:
        outcome = InferenceOutcome()

        for analyzer, result in collected:
            if result is None:
                outcome.failed_analyzers.append(analyzer.analyzer_id)
                continue

            outcome.analyzers_run.append(analyzer.analyzer_id)

            for dimension, score in result.scores.items():
                previous = outcome.dimension_scores.get(dimension)
                if previous is not None and previous != score:
                    logger.debug(
                        f"{analyzer.analyzer_id} overrides {dimension}: {previous} -> {score}"
                    )
                outcome.dimension_scores[dimension] = score

            outcome.insights.extend(
                replace(insight, analyzer_id=analyzer.analyzer_id, analyzer_name=analyzer.name)
                for insight in result.insights
            )
            outcome.alerts.extend(
                replace(alert, source=analyzer.analyzer_id) for alert in result.alerts
            )
            if result.swot is not None:
                outcome.swot.extend(result.swot)
            if result.summary:
                outcome.summaries[analyzer.analyzer_id] = result.summary

        if outcome.is_empty:
            logger.warning("Every analyzer failed; returning an empty inference outcome")

        return outcome


def run_inference(
    answers: Mapping[str, Any],
    context: Mapping[str, Any],
    settings: Optional[PipelineSettings] = None
) -> InferenceOutcome:
    """Run the default panel once."""
    return InferenceAggregator(settings=settings).run_inference(answers, context)
