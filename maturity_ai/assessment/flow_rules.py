"""
Question flow rule tables

Branch rules skip ahead (or back) in the questionnaire when an answer makes
a block of questions irrelevant. Deep-dive rules pull a follow-up question
into the flow when an answer signals a problem worth probing.

Both tables are immutable and evaluated in order; the first matching rule
whose target is still askable wins.

Skip rules keep a group of questions out of the flow for as long as an
earlier answer makes them irrelevant, so a question jumped over by a
branch never comes back later.
"""

from dataclasses import dataclass
from typing import Any, Callable, List, Mapping, Tuple


Predicate = Callable[[Any], bool]
AnswerCondition = Callable[[Mapping[str, Any]], bool]


@dataclass(frozen=True)
class FlowRule:
    """(question answered, predicate on its value) -> target question"""
    rule_id: str
    question_id: str
    predicate: Predicate
    target_question_id: str
    description: str = ""

    def matches(self, question_id: str, value: Any) -> bool:
        if question_id != self.question_id or value is None:
            return False
        try:
            return bool(self.predicate(value))
        except (TypeError, ValueError):
            # Malformed values never trigger a rule
            return False


def equals(expected: Any) -> Predicate:
    return lambda value: value == expected


def one_of(*expected: Any) -> Predicate:
    allowed = frozenset(expected)
    return lambda value: value in allowed


def greater_than(threshold: float) -> Predicate:
    return lambda value: float(value) > threshold


def less_than(threshold: float) -> Predicate:
    return lambda value: float(value) < threshold


BRANCH_RULES: Tuple[FlowRule, ...] = (
    FlowRule(
        rule_id="BRANCH_NO_WEBSITE",
        question_id="Q_DIG_001",
        predicate=equals("no"),
        target_question_id="Q_SOC_001",
        description="No website: skip website questions and go to social media",
    ),
)

DEEP_DIVE_RULES: Tuple[FlowRule, ...] = (
    FlowRule(
        rule_id="DD_REVENUE_DECLINE",
        question_id="Q_FIN_002",
        predicate=equals("declining"),
        target_question_id="Q_FIN_DD_001",
        description="Declining revenue: ask how long the decline has lasted",
    ),
    FlowRule(
        rule_id="DD_HIGH_CHURN",
        question_id="Q_CUS_003",
        predicate=greater_than(20),
        target_question_id="Q_CUS_DD_001",
        description="Churn above 20%: ask why customers leave",
    ),
)


def matching_rules(rules: Tuple[FlowRule, ...], question_id: str, value: Any) -> List[FlowRule]:
    """Rules in table order that match the answered question."""
    return [rule for rule in rules if rule.matches(question_id, value)]


@dataclass(frozen=True)
class SkipRule:
    """Questions selected by `applies` stay out of the flow while `condition` holds."""
    rule_id: str
    applies: Callable[[Any], bool]
    condition: AnswerCondition
    description: str = ""

    def skips(self, question: Any, answers: Mapping[str, Any]) -> bool:
        return bool(self.applies(question)) and bool(self.condition(answers))


def in_category(*categories: str) -> Callable[[Any], bool]:
    wanted = frozenset(categories)
    return lambda question: question.category in wanted


def needs_history(question: Any) -> bool:
    return question.requires_history


def answered(question_id: str, predicate: Predicate) -> AnswerCondition:
    """Condition on a stored answer; unanswered and skipped questions never match."""
    def condition(answers: Mapping[str, Any]) -> bool:
        value = answers.get(question_id)
        if value is None:
            return False
        try:
            return bool(predicate(value))
        except (TypeError, ValueError):
            return False
    return condition


SKIP_RULES: Tuple[SkipRule, ...] = (
    SkipRule(
        rule_id="SKIP_NO_WEBSITE",
        applies=in_category("website"),
        condition=answered("Q_DIG_001", equals("no")),
        description="No website: website questions do not apply",
    ),
    SkipRule(
        rule_id="SKIP_NO_SOCIAL",
        applies=in_category("social_media"),
        condition=answered("Q_SOC_001", less_than(1)),
        description="No active social platforms: social media questions do not apply",
    ),
    SkipRule(
        rule_id="SKIP_NO_HISTORY",
        applies=needs_history,
        condition=answered("Q_BAS_001", less_than(1)),
        description="Under a year in business: questions about past performance do not apply",
    ),
)
