from __future__ import annotations

"""
Resolve a risk tier (and score) to caregiver-facing advice text.

Design intent:
- Walk a strictly ordered chain of matching strategies; stop at the first hit.
- Always return usable text, ending with a generic doctor-referral message.
- Report which strategy fired so inconsistent admin data is easy to debug.
"""

import logging
from dataclasses import dataclass
from typing import Any, Callable, Literal, Mapping, Optional, Sequence

from riskengine.internal_core.config import DEFAULT_FALLBACK_ADVICE, DEFAULT_PARTITION, DefaultPartition
from riskengine.internal_core.contracts import AdviceRecord, EngineContractError, coerce_records

from .labels import canonicalize_tier_label


logger = logging.getLogger(__name__)


MatchStrategy = Literal[
    "canonical_exact",
    "case_insensitive",
    "stored_label",
    "score_range",
    "manual_partition",
    "fallback",
]

STRATEGY_ORDER: tuple[MatchStrategy, ...] = (
    "canonical_exact",
    "case_insensitive",
    "stored_label",
    "score_range",
    "manual_partition",
    "fallback",
)


@dataclass(frozen=True)
class AdviceResolution:
    advice: str
    match_strategy: MatchStrategy
    matched_record: AdviceRecord | None
    attempted: tuple[MatchStrategy, ...]


def resolve_advice(
    tier: Optional[str],
    score: Optional[float],
    stored_tier_label: Optional[str],
    records: Sequence[AdviceRecord] | Sequence[Mapping[str, Any]],
    *,
    partition: DefaultPartition = DEFAULT_PARTITION,
    fallback_advice: str = DEFAULT_FALLBACK_ADVICE,
) -> AdviceResolution:
    if score is not None and (isinstance(score, bool) or not isinstance(score, (int, float))):
        raise EngineContractError(f"score must be a number or None, got {type(score).__name__}")

    usable = [
        record
        for record in coerce_records(records, AdviceRecord, name="records")
        if record.advice.strip()
    ]
    tier_text = str(tier).strip() if tier is not None else ""
    canonical = canonicalize_tier_label(tier_text)
    tier_name = canonical or tier_text
    stored_text = str(stored_tier_label).strip() if stored_tier_label is not None else ""

    chain: list[tuple[MatchStrategy, bool, Callable[[AdviceRecord], bool]]] = [
        (
            "canonical_exact",
            canonical is not None,
            lambda record: canonicalize_tier_label(record.risk_level) == canonical,
        ),
        (
            "case_insensitive",
            bool(tier_name),
            lambda record: _label(record).casefold() == tier_name.casefold(),
        ),
        (
            "stored_label",
            bool(stored_text) and stored_text != tier_text,
            lambda record: _label(record) == stored_text,
        ),
        (
            "score_range",
            score is not None,
            lambda record: record.contains(score),  # type: ignore[arg-type]
        ),
        (
            "manual_partition",
            score is not None,
            lambda record: record.risk_level == partition.tier_for(score),  # type: ignore[arg-type]
        ),
    ]

    attempted: list[MatchStrategy] = []
    for strategy, applicable, predicate in chain:
        if not applicable:
            continue
        attempted.append(strategy)
        match = _first(usable, predicate)
        if match is not None:
            logger.debug(
                "Advice resolved by %s (tier=%s, score=%s, record label=%s)",
                strategy,
                tier_text,
                score,
                match.risk_level,
            )
            return AdviceResolution(
                advice=match.advice,
                match_strategy=strategy,
                matched_record=match,
                attempted=tuple(attempted),
            )

    attempted.append("fallback")
    logger.warning(
        "No advice record matched tier=%r score=%r stored_label=%r among %s records; using generic advice",
        tier_text,
        score,
        stored_tier_label,
        len(usable),
    )
    return AdviceResolution(
        advice=fallback_advice.strip() or DEFAULT_FALLBACK_ADVICE,
        match_strategy="fallback",
        matched_record=None,
        attempted=tuple(attempted),
    )


def _label(record: AdviceRecord) -> str:
    return (record.risk_level or "").strip()


def _first(
    records: Sequence[AdviceRecord],
    predicate: Callable[[AdviceRecord], bool],
) -> AdviceRecord | None:
    for record in records:
        if predicate(record):
            return record
    return None
