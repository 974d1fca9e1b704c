from __future__ import annotations

"""
Reduce a questionnaire answer set to a total risk score.

Design intent:
- Sum per-answer weights; unweighted or unknown answers contribute 0.
- Never report a negative total, but keep the raw sum for audit.
- Return a display breakdown in answer order with only positive contributions.
"""

import logging
from dataclasses import dataclass
from typing import Any, Mapping, Sequence

from riskengine.internal_core.answers import answer_keys, is_present
from riskengine.internal_core.contracts import (
    Answer,
    QuestionDefinition,
    WeightEntry,
    coerce_answers,
    coerce_records,
)

from .weights import WeightTable


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ContributingFactor:
    question_id: str
    question: str
    answer: str
    points: int


@dataclass(frozen=True)
class ScoreResult:
    total: int
    contributing_factors: list[ContributingFactor]
    raw_total: int


def compute_score(
    answers: Mapping[str, Any] | Sequence[Answer] | Sequence[Mapping[str, Any]],
    weights: WeightTable | Sequence[WeightEntry] | Sequence[Mapping[str, Any]],
    questions: Sequence[QuestionDefinition] | Sequence[Mapping[str, Any]] | None = None,
) -> ScoreResult:
    answer_records = coerce_answers(answers)
    table = weights if isinstance(weights, WeightTable) else WeightTable.from_entries(weights)
    question_index = {
        item.id: item for item in coerce_records(questions, QuestionDefinition, name="questions")
    }

    raw_total = 0
    factors: list[ContributingFactor] = []
    for answer in answer_records:
        question = question_index.get(answer.question_id)
        for option_keys, points in _answer_contributions(table, answer):
            raw_total += points
            if points <= 0:
                continue
            factors.append(
                ContributingFactor(
                    question_id=answer.question_id,
                    question=question.text if question is not None else answer.question_id,
                    answer=", ".join(_option_label(question, key) for key in option_keys),
                    points=points,
                )
            )

    total = max(0, raw_total)
    if total != raw_total:
        logger.warning("Clamped negative risk score %s to 0", raw_total)
    logger.debug("Computed risk score %s from %s answers", total, len(answer_records))
    return ScoreResult(total=total, contributing_factors=factors, raw_total=raw_total)


def _answer_contributions(table: WeightTable, answer: Answer) -> list[tuple[list[str], int]]:
    keys = answer_keys(answer.value)
    if not keys:
        return []

    if not isinstance(answer.value, list):
        return [(keys, table.lookup(answer.question_id, answer.value))]

    contributions = [
        ([key], table.lookup(answer.question_id, key))
        for key in keys
        if table.has_option(answer.question_id, key)
    ]
    if contributions:
        return contributions

    default = table.default_scores.get(answer.question_id)
    if default is not None and is_present(answer.value):
        return [(keys, default)]
    return []


def _option_label(question: QuestionDefinition | None, key: str) -> str:
    if question is None:
        return key
    return question.option_label(key) or key
