from __future__ import annotations

"""
Read-only weight lookup built from admin-curated WeightEntry rows.

Design intent:
- One integer contribution per (question_id, option_value) pair.
- Option-less questions may declare a default contribution applied when the answer is present.
- Unknown pairs are inert (0 points), never an error.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Mapping, Sequence

from riskengine.internal_core.answers import answer_key, is_present
from riskengine.internal_core.contracts import WeightEntry, coerce_records


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class WeightTable:
    option_scores: Mapping[tuple[str, str], int] = field(default_factory=dict)
    default_scores: Mapping[str, int] = field(default_factory=dict)

    @classmethod
    def from_entries(cls, entries: Sequence[WeightEntry] | Sequence[Mapping[str, Any]]) -> "WeightTable":
        option_scores: dict[tuple[str, str], int] = {}
        default_scores: dict[str, int] = {}

        for entry in coerce_records(entries, WeightEntry, name="weights"):
            if entry.option_value is None:
                if entry.question_id in default_scores:
                    logger.warning("Ignoring duplicate default weight for question %s", entry.question_id)
                    continue
                default_scores[entry.question_id] = entry.score
                continue

            key = (entry.question_id, answer_key(entry.option_value))
            if key in option_scores:
                logger.warning("Ignoring duplicate weight for %s=%s", key[0], key[1])
                continue
            option_scores[key] = entry.score

        return cls(option_scores=option_scores, default_scores=default_scores)

    def has_option(self, question_id: str, value: Any) -> bool:
        return (question_id, answer_key(value)) in self.option_scores

    def lookup(self, question_id: str, value: Any) -> int:
        key = (question_id, answer_key(value))
        if key in self.option_scores:
            return self.option_scores[key]
        default = self.default_scores.get(question_id)
        if default is not None and is_present(value):
            return default
        return 0

    def __len__(self) -> int:
        return len(self.option_scores) + len(self.default_scores)
