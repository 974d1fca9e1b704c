from __future__ import annotations

"""
Classify a risk score into Low / Moderate / High.

Design intent:
- Prefer admin-configured inclusive ranges, walked in fixed tier order.
- Fall back to the built-in partition when configuration has gaps, and say so.
- Same score and configuration always yield the same tier.
"""

import logging
from dataclasses import dataclass
from typing import Any, Literal, Mapping, Sequence

from riskengine.internal_core.config import DEFAULT_PARTITION, DefaultPartition
from riskengine.internal_core.contracts import AdviceRecord, EngineContractError, TierRange, coerce_records

from .labels import RISK_TIER_ORDER, RiskTier, canonicalize_tier_label


logger = logging.getLogger(__name__)


TierSource = Literal["configured", "default_partition"]


@dataclass(frozen=True)
class TierClassification:
    tier: RiskTier
    source: TierSource
    matched_range: TierRange | None = None


def classify(
    score: float,
    tier_ranges: Sequence[TierRange] | Sequence[Mapping[str, Any]],
    partition: DefaultPartition = DEFAULT_PARTITION,
) -> RiskTier:
    return classify_detailed(score, tier_ranges, partition=partition).tier


def classify_detailed(
    score: float,
    tier_ranges: Sequence[TierRange] | Sequence[Mapping[str, Any]],
    partition: DefaultPartition = DEFAULT_PARTITION,
) -> TierClassification:
    if isinstance(score, bool) or not isinstance(score, (int, float)):
        raise EngineContractError(f"score must be a number, got {type(score).__name__}")

    ranges = known_tier_ranges(tier_ranges)
    for tier in RISK_TIER_ORDER:
        for item in ranges:
            if item.tier == tier and item.contains(score):
                return TierClassification(tier=tier, source="configured", matched_range=item)

    tier = partition.tier_for(score)
    logger.warning(
        "Score %s is outside all %s configured tier ranges; using default partition -> %s",
        score,
        len(ranges),
        tier,
    )
    return TierClassification(tier=tier, source="default_partition")


def known_tier_ranges(
    rows: Sequence[TierRange] | Sequence[Mapping[str, Any]] | None,
) -> list[TierRange]:
    """Validate tier ranges, skipping rows whose label names no known tier."""
    if rows is None:
        return []
    if isinstance(rows, (str, bytes)) or isinstance(rows, Mapping) or not isinstance(rows, Sequence):
        raise EngineContractError("tier_ranges must be a sequence of TierRange records")
    kept: list[Any] = []
    for index, row in enumerate(rows):
        if isinstance(row, Mapping) and canonicalize_tier_label(row.get("tier")) is None:
            logger.warning("Skipping tier_ranges[%s]: unknown tier label %r", index, row.get("tier"))
            continue
        kept.append(row)
    return coerce_records(kept, TierRange, name="tier_ranges")


def tier_ranges_from_advice(
    records: Sequence[AdviceRecord] | Sequence[Mapping[str, Any]],
) -> list[TierRange]:
    """Tier ranges implied by advice rows whose label names a known tier."""
    ranges: list[TierRange] = []
    for record in coerce_records(records, AdviceRecord, name="records"):
        tier = canonicalize_tier_label(record.risk_level)
        if tier is None:
            continue
        ranges.append(TierRange(tier=tier, min_score=record.min_score, max_score=record.max_score))
    return ranges
