"""
Adaptive Question Flow

Picks the next question for a session from the answers given so far:

1. First question: lowest display order applicable question
2. Branch rules: jump when an answer makes a block irrelevant
3. Deep-dive rules: pull in a follow-up when an answer signals a problem
4. Sector exclusion and skip rules: categories that never apply to the
   sector, and questions an earlier answer made irrelevant, are left out
5. Default: next unanswered question after the last answered one
6. Nothing left: None (the session is ready to complete)

The engine is pure: it reads the catalog and the answer map handed to it
and never touches storage or session state.
"""

from typing import Any, List, Mapping, Optional, Tuple
import logging

from config.settings import PipelineSettings
from .flow_rules import BRANCH_RULES, DEEP_DIVE_RULES, SKIP_RULES, FlowRule, SkipRule, matching_rules
from .questions import Question, QuestionCatalog, get_default_catalog

logger = logging.getLogger(__name__)


class QuestionFlowEngine:
    """
    Example:
        engine = QuestionFlowEngine()
        q = engine.next_question({"Q_DIG_001": "no"}, "Q_DIG_001", "retail")
        q.id  # "Q_SOC_001"
    """

    def __init__(
        self,
        catalog: Optional[QuestionCatalog] = None,
        settings: Optional[PipelineSettings] = None,
        branch_rules: Tuple[FlowRule, ...] = BRANCH_RULES,
        deep_dive_rules: Tuple[FlowRule, ...] = DEEP_DIVE_RULES,
        skip_rules: Tuple[SkipRule, ...] = SKIP_RULES
    ):
        self.catalog = catalog or get_default_catalog()
        self.settings = settings or PipelineSettings()
        self.branch_rules = branch_rules
        self.deep_dive_rules = deep_dive_rules
        self.skip_rules = skip_rules

    def is_skipped(self, question: Question, answers: Mapping[str, Any]) -> bool:
        """True while a skip rule keeps the question out of the flow."""
        return any(rule.skips(question, answers) for rule in self.skip_rules)

    def is_askable(self, question: Question, answers: Mapping[str, Any], sector: Optional[str]) -> bool:
        """Active, unanswered, applicable to the sector, not excluded and not skipped."""
        if not question.is_active or question.id in answers:
            return False
        if sector and not question.applies_to(sector):
            return False
        if question.category in self.settings.excluded_categories(sector):
            return False
        return not self.is_skipped(question, answers)

    def sequence(self, sector: Optional[str], answers: Optional[Mapping[str, Any]] = None) -> List[Question]:
        """
        Default ordered sequence for a sector (no follow-ups).

        Answered questions always stay in; unanswered ones drop out while a
        skip rule holds for the answers given.
        """
        answers = answers or {}
        excluded = self.settings.excluded_categories(sector)
        return [
            q for q in self.catalog.get_active_questions(sector)
            if q.category not in excluded
            and (q.id in answers or not self.is_skipped(q, answers))
        ]

    def triggered_follow_ups(self, answers: Mapping[str, Any], sector: Optional[str]) -> List[Question]:
        """Follow-ups pulled in by deep-dive rules, answered or still pending."""
        found = []
        seen = set()
        for rule in self.deep_dive_rules:
            if not rule.matches(rule.question_id, answers.get(rule.question_id)):
                continue
            target = self.catalog.get_question_by_id(rule.target_question_id)
            if target is None or target.id in seen:
                continue
            if target.id in answers or self.is_askable(target, answers, sector):
                seen.add(target.id)
                found.append(target)
        return found

    def tracked_questions(self, sector: Optional[str], answers: Optional[Mapping[str, Any]] = None) -> List[Question]:
        """Questions that count toward progress: the sequence plus triggered follow-ups."""
        answers = answers or {}
        return self.sequence(sector, answers) + self.triggered_follow_ups(answers, sector)

    def total_questions(self, sector: Optional[str], answers: Optional[Mapping[str, Any]] = None) -> int:
        return len(self.tracked_questions(sector, answers))

    def next_question(
        self,
        answers: Mapping[str, Any],
        last_question_id: Optional[str],
        sector: Optional[str]
    ) -> Optional[Question]:
        """
        Determine the next question to ask.

        Args:
            answers: question_id -> answer value for every answered or skipped question
            last_question_id: most recently answered question, if any
            sector: session sector

        Returns:
            Next Question, or None when no applicable question is left
        """
        last = self.catalog.get_question_by_id(last_question_id) if last_question_id else None

        if last is not None and last_question_id in answers:
            value = answers.get(last_question_id)

            target = self._apply_rules(self.branch_rules, last_question_id, value, answers, sector)
            if target is not None:
                logger.info(f"Branch from {last_question_id} to {target.id}")
                return target

            target = self._apply_rules(self.deep_dive_rules, last_question_id, value, answers, sector)
            if target is not None:
                logger.info(f"Deep dive from {last_question_id} to {target.id}")
                return target

        # A follow-up triggered earlier but never reached comes first
        for question in self.triggered_follow_ups(answers, sector):
            if question.id not in answers:
                return question

        sequence = self.sequence(sector, answers)
        if last is not None and last_question_id in answers:
            for question in sequence:
                if question.display_order > last.display_order and question.id not in answers:
                    return question
            return None

        # No usable pointer: first unanswered question in display order
        for question in sequence:
            if question.id not in answers:
                return question
        return None

    def _apply_rules(
        self,
        rules: Tuple[FlowRule, ...],
        question_id: str,
        value: Any,
        answers: Mapping[str, Any],
        sector: Optional[str]
    ) -> Optional[Question]:
        for rule in matching_rules(rules, question_id, value):
            target = self.catalog.get_question_by_id(rule.target_question_id)
            if target is None:
                logger.warning(f"Rule {rule.rule_id} targets unknown question {rule.target_question_id}")
                continue
            if self.is_askable(target, answers, sector):
                return target
        return None
