from __future__ import annotations

"""
Decide whether a question is shown, hidden, or disabled from its parent's answer.

Design intent:
- One rule per question, one level of dependency (parent -> child).
- Stateless and idempotent; callers re-invoke on every parent answer change.
- A missing parent answer counts as "condition not met".
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Mapping, Sequence

from riskengine.internal_core.answers import answer_keys, is_empty_answer
from riskengine.internal_core.contracts import (
    ConditionalRule,
    DisplayMode,
    EngineContractError,
    QuestionDefinition,
    VisibilityState,
    coerce_records,
)


logger = logging.getLogger(__name__)

REQUIRED_ANSWERS_MESSAGE = "Please answer all required questions before proceeding."

# State applied when the rule's comparison does not hold.
_INVERSE_STATE: dict[DisplayMode, VisibilityState] = {
    "show": "hide",
    "hide": "show",
    "disable": "show",
}


@dataclass(frozen=True)
class PageValidation:
    is_valid: bool
    error_message: str | None
    missing_question_ids: list[str] = field(default_factory=list)


def evaluate(rule: ConditionalRule | Mapping[str, Any] | None, answers: Mapping[str, Any]) -> VisibilityState:
    if not isinstance(answers, Mapping):
        raise EngineContractError("answers must be a mapping of question_id -> value")
    if rule is None:
        return "show"
    resolved = coerce_records([rule], ConditionalRule, name="rule")[0]

    if condition_met(resolved, answers):
        return resolved.display_mode
    return _INVERSE_STATE[resolved.display_mode]


def condition_met(rule: ConditionalRule, answers: Mapping[str, Any]) -> bool:
    parent_keys = answer_keys(answers.get(rule.parent_question_id))
    return rule.required_value.strip() in parent_keys


def index_rules(
    rules: Sequence[ConditionalRule] | Sequence[Mapping[str, Any]] | None,
) -> dict[str, ConditionalRule]:
    indexed: dict[str, ConditionalRule] = {}
    for rule in coerce_records(rules, ConditionalRule, name="rules"):
        if rule.question_id in indexed:
            logger.warning("Ignoring extra conditional rule for question %s", rule.question_id)
            continue
        indexed[rule.question_id] = rule
    return indexed


def evaluate_all(
    questions: Sequence[QuestionDefinition] | Sequence[str],
    rules: Sequence[ConditionalRule] | Sequence[Mapping[str, Any]] | Mapping[str, ConditionalRule] | None,
    answers: Mapping[str, Any],
) -> dict[str, VisibilityState]:
    rule_index = rules if isinstance(rules, Mapping) else index_rules(rules)
    states: dict[str, VisibilityState] = {}
    for question in questions:
        question_id = question if isinstance(question, str) else question.id
        states[question_id] = evaluate(rule_index.get(question_id), answers)
    return states


def parse_conditional_reference(
    reference: str,
    question_id: str,
    *,
    display_mode: DisplayMode = "disable",
) -> ConditionalRule | None:
    """Build a rule from the compact "parentId:requiredValue" form; None if malformed."""
    parent_id, sep, required_value = str(reference or "").partition(":")
    parent_id = parent_id.strip()
    required_value = required_value.strip()
    if not sep or not parent_id or not required_value or parent_id == question_id:
        return None
    return ConditionalRule(
        question_id=question_id,
        parent_question_id=parent_id,
        required_value=required_value,
        display_mode=display_mode,
    )


def validate_page(
    questions: Sequence[QuestionDefinition] | Sequence[Mapping[str, Any]],
    answers: Mapping[str, Any],
    rules: Sequence[ConditionalRule] | Sequence[Mapping[str, Any]] | Mapping[str, ConditionalRule] | None = None,
) -> PageValidation:
    """Required questions that are currently shown must be answered; hidden/disabled ones are skipped."""
    records = coerce_records(questions, QuestionDefinition, name="questions")
    states = evaluate_all(records, rules, answers)

    missing = [
        question.id
        for question in records
        if question.required
        and states[question.id] == "show"
        and is_empty_answer(answers.get(question.id))
    ]
    if missing:
        return PageValidation(is_valid=False, error_message=REQUIRED_ANSWERS_MESSAGE, missing_question_ids=missing)
    return PageValidation(is_valid=True, error_message=None)
