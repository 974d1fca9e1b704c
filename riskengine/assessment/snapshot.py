from __future__ import annotations

"""
Build the immutable configuration snapshot one evaluation runs against.

Design intent:
- Validate raw storage rows once, up front, into frozen records.
- Replace any long-lived advice cache with an explicit caller-owned snapshot.
- Give legacy advice rows (no risk_level column) a tier label from their score range.
"""

import logging
from typing import Any, Mapping, Optional, Sequence

from riskengine.internal_core.config import DEFAULT_PARTITION, DefaultPartition
from riskengine.internal_core.contracts import (
    AdviceRecord,
    ConditionalRule,
    EngineSnapshot,
    QuestionDefinition,
    WeightEntry,
    coerce_records,
)
from riskengine.risk.tiers import known_tier_ranges


logger = logging.getLogger(__name__)

Rows = Optional[Sequence[Any]]


def build_engine_snapshot(
    *,
    questions: Rows = None,
    weights: Rows = None,
    tier_ranges: Rows = None,
    advice_records: Rows = None,
    conditional_rules: Rows = None,
    partition: DefaultPartition = DEFAULT_PARTITION,
) -> EngineSnapshot:
    advice = [
        _with_inferred_label(record, partition)
        for record in coerce_records(advice_records, AdviceRecord, name="advice_records")
    ]
    return EngineSnapshot(
        questions=tuple(coerce_records(questions, QuestionDefinition, name="questions")),
        weights=tuple(coerce_records(weights, WeightEntry, name="weights")),
        tier_ranges=tuple(known_tier_ranges(tier_ranges)),
        advice_records=tuple(advice),
        conditional_rules=tuple(coerce_records(conditional_rules, ConditionalRule, name="conditional_rules")),
    )


def snapshot_from_payload(payload: Mapping[str, Any], *, partition: DefaultPartition = DEFAULT_PARTITION) -> EngineSnapshot:
    """Snapshot from a JSON-style document keyed by the EngineSnapshot field names."""
    return build_engine_snapshot(
        questions=payload.get("questions"),
        weights=payload.get("weights"),
        tier_ranges=payload.get("tier_ranges"),
        advice_records=payload.get("advice_records"),
        conditional_rules=payload.get("conditional_rules"),
        partition=partition,
    )


def _with_inferred_label(record: AdviceRecord, partition: DefaultPartition) -> AdviceRecord:
    if record.risk_level and record.risk_level.strip():
        return record
    inferred = partition.tier_for(record.min_score)
    logger.info(
        "Advice row %s has no risk_level; inferred %s from min_score %s",
        record.id or "<unsaved>",
        inferred,
        record.min_score,
    )
    return record.model_copy(update={"risk_level": inferred})
