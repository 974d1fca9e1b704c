from __future__ import annotations

"""
End-to-end questionnaire assessment: score -> tier -> advice.

Design intent:
- Sequence the pure components against one immutable snapshot.
- Share a single default partition between tier and advice fallbacks.
- Return an audit trail that distinguishes configured matches from fallbacks.
"""

import logging
from dataclasses import dataclass
from typing import Any, Literal, Mapping, Optional, Sequence

from riskengine.internal_core.audit import build_audit_event
from riskengine.internal_core.config import EngineConfig, load_config
from riskengine.internal_core.contracts import Answer, AuditEvent, EngineContractError, EngineSnapshot
from riskengine.risk.advice import AdviceResolution, MatchStrategy, resolve_advice
from riskengine.risk.labels import RiskTier, canonicalize_tier_label
from riskengine.risk.tiers import TierClassification, classify_detailed, tier_ranges_from_advice
from riskengine.scoring.calculator import ScoreResult, compute_score
from riskengine.scoring.weights import WeightTable


logger = logging.getLogger(__name__)


TierOrigin = Literal["configured", "default_partition", "stored_label", "unresolved"]


@dataclass(frozen=True)
class AssessmentResult:
    score: ScoreResult | None
    total_score: Optional[float]
    tier: Optional[RiskTier]
    tier_source: TierOrigin
    advice: str
    match_strategy: MatchStrategy
    audit_events: list[AuditEvent]


def assess_questionnaire(
    answers: Mapping[str, Any] | Sequence[Answer] | Sequence[Mapping[str, Any]],
    snapshot: EngineSnapshot,
    *,
    stored_tier_label: Optional[str] = None,
    config: EngineConfig | None = None,
) -> AssessmentResult:
    _require_snapshot(snapshot)
    cfg = config or load_config()

    score = compute_score(answers, WeightTable.from_entries(snapshot.weights), snapshot.questions)
    events = [
        build_audit_event(
            "SCORE_COMPUTED",
            "score_computed",
            f"total={score.total} raw_total={score.raw_total} factors={len(score.contributing_factors)}",
            max_chars=cfg.RISKENGINE_AUDIT_DETAIL_MAX_CHARS,
        )
    ]

    classification = classify_detailed(score.total, _tier_ranges(snapshot), partition=cfg.partition)
    events.append(_classification_event(classification, score.total, cfg))

    resolution = resolve_advice(
        classification.tier,
        score.total,
        stored_tier_label,
        snapshot.advice_records,
        partition=cfg.partition,
        fallback_advice=cfg.RISKENGINE_FALLBACK_ADVICE,
    )
    events.append(_resolution_event(resolution, cfg))
    logger.debug(
        "Assessment complete: score=%s tier=%s (%s) advice via %s",
        score.total,
        classification.tier,
        classification.source,
        resolution.match_strategy,
    )

    return AssessmentResult(
        score=score,
        total_score=score.total,
        tier=classification.tier,
        tier_source=classification.source,
        advice=resolution.advice,
        match_strategy=resolution.match_strategy,
        audit_events=events,
    )


def resolve_stored_assessment(
    total_score: Optional[float],
    stored_tier_label: Optional[str],
    snapshot: EngineSnapshot,
    *,
    config: EngineConfig | None = None,
) -> AssessmentResult:
    """Tier and advice for an already persisted questionnaire (no re-scoring)."""
    _require_snapshot(snapshot)
    cfg = config or load_config()
    events: list[AuditEvent] = []

    stored_tier = canonicalize_tier_label(stored_tier_label)
    tier: Optional[RiskTier]
    tier_source: TierOrigin
    if stored_tier is not None:
        tier = stored_tier
        tier_source = "stored_label"
        events.append(
            build_audit_event(
                "TIER_FROM_STORED_LABEL",
                "stored_label",
                f"label={stored_tier_label!r} -> {tier}",
                max_chars=cfg.RISKENGINE_AUDIT_DETAIL_MAX_CHARS,
            )
        )
    elif total_score is not None:
        classification = classify_detailed(total_score, _tier_ranges(snapshot), partition=cfg.partition)
        tier = classification.tier
        tier_source = classification.source
        events.append(_classification_event(classification, total_score, cfg))
    else:
        # Historical row with no score and an unrecognized label: advice still falls back.
        tier = None
        tier_source = "unresolved"
        logger.warning("Stored assessment has no score and unrecognized label %r", stored_tier_label)
        events.append(
            build_audit_event(
                "TIER_FALLBACK",
                "unresolved",
                f"score=None label={stored_tier_label!r} -> no tier",
                max_chars=cfg.RISKENGINE_AUDIT_DETAIL_MAX_CHARS,
            )
        )

    resolution = resolve_advice(
        tier,
        total_score,
        stored_tier_label,
        snapshot.advice_records,
        partition=cfg.partition,
        fallback_advice=cfg.RISKENGINE_FALLBACK_ADVICE,
    )
    events.append(_resolution_event(resolution, cfg))

    return AssessmentResult(
        score=None,
        total_score=total_score,
        tier=tier,
        tier_source=tier_source,
        advice=resolution.advice,
        match_strategy=resolution.match_strategy,
        audit_events=events,
    )


def _require_snapshot(snapshot: Any) -> None:
    if not isinstance(snapshot, EngineSnapshot):
        raise EngineContractError(f"snapshot must be an EngineSnapshot, got {type(snapshot).__name__}")


def _tier_ranges(snapshot: EngineSnapshot):
    if snapshot.tier_ranges:
        return snapshot.tier_ranges
    return tier_ranges_from_advice(snapshot.advice_records)


def _classification_event(classification: TierClassification, score: float, cfg: EngineConfig) -> AuditEvent:
    if classification.source == "default_partition":
        return build_audit_event(
            "TIER_FALLBACK",
            "default_partition",
            f"score={score} outside configured ranges -> {classification.tier}",
            max_chars=cfg.RISKENGINE_AUDIT_DETAIL_MAX_CHARS,
        )
    matched = classification.matched_range
    detail = f"score={score} -> {classification.tier}"
    if matched is not None:
        detail += f" [{matched.min_score}, {matched.max_score}]"
    return build_audit_event(
        "TIER_CLASSIFIED",
        "configured",
        detail,
        max_chars=cfg.RISKENGINE_AUDIT_DETAIL_MAX_CHARS,
    )


def _resolution_event(resolution: AdviceResolution, cfg: EngineConfig) -> AuditEvent:
    attempted = ",".join(resolution.attempted)
    if resolution.match_strategy == "fallback":
        return build_audit_event(
            "ADVICE_FALLBACK",
            "fallback",
            f"attempted={attempted}",
            max_chars=cfg.RISKENGINE_AUDIT_DETAIL_MAX_CHARS,
        )
    record = resolution.matched_record
    label = record.risk_level if record is not None else None
    return build_audit_event(
        "ADVICE_RESOLVED",
        resolution.match_strategy,
        f"attempted={attempted} record_label={label!r}",
        max_chars=cfg.RISKENGINE_AUDIT_DETAIL_MAX_CHARS,
    )
