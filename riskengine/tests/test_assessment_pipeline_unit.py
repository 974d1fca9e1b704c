import pytest

from riskengine.assessment.pipeline import assess_questionnaire, resolve_stored_assessment
from riskengine.assessment.snapshot import build_engine_snapshot, snapshot_from_payload
from riskengine.internal_core.config import DEFAULT_FALLBACK_ADVICE, load_config
from riskengine.internal_core.contracts import EngineContractError


def _snapshot(**overrides):
    rows = {
        "questions": [
            {"id": "familyGlaucoma", "text": "Family History of Glaucoma"},
            {"id": "ocularSteroid", "text": "Ophthalmic Topical Steroids"},
            {"id": "iopBaseline", "text": "IOP Baseline"},
        ],
        "weights": [
            {"question_id": "familyGlaucoma", "option_value": "yes", "score": 2},
            {"question_id": "ocularSteroid", "option_value": "yes", "score": 2},
            {"question_id": "iopBaseline", "option_value": "22_and_above", "score": 2},
        ],
        "advice_records": [
            {"risk_level": "Low", "min_score": 0, "max_score": 2, "advice": "Regular eye exams."},
            {"risk_level": "moderate", "min_score": 3, "max_score": 5, "advice": "More frequent exams."},
            {"risk_level": "High risk", "min_score": 6, "max_score": 100, "advice": "See a specialist."},
        ],
    }
    rows.update(overrides)
    return build_engine_snapshot(**rows)


def test_assess_questionnaire_scores_classifies_and_resolves() -> None:
    result = assess_questionnaire(
        {"familyGlaucoma": "yes", "ocularSteroid": "yes", "iopBaseline": "22_and_above"},
        _snapshot(),
    )
    assert result.total_score == 6
    assert result.tier == "High"
    assert result.tier_source == "configured"
    assert result.advice == "See a specialist."
    assert result.match_strategy == "canonical_exact"
    assert [event.type for event in result.audit_events] == [
        "SCORE_COMPUTED",
        "TIER_CLASSIFIED",
        "ADVICE_RESOLVED",
    ]
    assert [factor.question for factor in result.score.contributing_factors] == [
        "Family History of Glaucoma",
        "Ophthalmic Topical Steroids",
        "IOP Baseline",
    ]


def test_assess_questionnaire_prefers_explicit_tier_ranges() -> None:
    snapshot = _snapshot(
        tier_ranges=[
            {"tier": "Low", "min_score": 0, "max_score": 1},
            {"tier": "Moderate", "min_score": 2, "max_score": 3},
            {"tier": "High", "min_score": 4, "max_score": 99},
        ]
    )
    result = assess_questionnaire({"familyGlaucoma": "yes"}, snapshot)
    assert result.tier == "Moderate"
    assert result.advice == "More frequent exams."


def test_assess_questionnaire_reports_fallbacks_in_audit_trail() -> None:
    snapshot = _snapshot(advice_records=[])
    result = assess_questionnaire({"familyGlaucoma": "yes"}, snapshot)
    assert result.tier == "Low"
    assert result.tier_source == "default_partition"
    assert result.match_strategy == "fallback"
    assert result.advice == DEFAULT_FALLBACK_ADVICE
    assert [event.type for event in result.audit_events] == [
        "SCORE_COMPUTED",
        "TIER_FALLBACK",
        "ADVICE_FALLBACK",
    ]


def test_assess_questionnaire_rejects_raw_snapshot() -> None:
    with pytest.raises(EngineContractError):
        assess_questionnaire({"familyGlaucoma": "yes"}, {"weights": []})  # type: ignore[arg-type]


def test_resolve_stored_assessment_uses_stored_label() -> None:
    result = resolve_stored_assessment(1, "HIGH", _snapshot())
    assert result.tier == "High"
    assert result.tier_source == "stored_label"
    assert result.advice == "See a specialist."
    assert result.score is None
    assert result.audit_events[0].type == "TIER_FROM_STORED_LABEL"


def test_resolve_stored_assessment_classifies_score_without_label() -> None:
    result = resolve_stored_assessment(4, None, _snapshot())
    assert result.tier == "Moderate"
    assert result.tier_source == "configured"
    assert result.advice == "More frequent exams."


def test_resolve_stored_assessment_without_score_or_known_label_falls_back() -> None:
    result = resolve_stored_assessment(None, "Unknown", build_engine_snapshot(advice_records=[]))
    assert result.advice == DEFAULT_FALLBACK_ADVICE
    assert result.tier is None
    assert result.tier_source == "unresolved"
    assert result.match_strategy == "fallback"
    assert [event.type for event in result.audit_events] == ["TIER_FALLBACK", "ADVICE_FALLBACK"]


def test_legacy_advice_rows_get_inferred_labels() -> None:
    snapshot = build_engine_snapshot(
        advice_records=[
            {"min_score": 0, "max_score": 2, "advice": "low"},
            {"risk_level": "", "min_score": 3, "max_score": 5, "advice": "moderate"},
            {"risk_level": "High", "min_score": 6, "max_score": 100, "advice": "high"},
        ]
    )
    assert [record.risk_level for record in snapshot.advice_records] == ["Low", "Moderate", "High"]


def test_snapshot_from_payload_validates_rows() -> None:
    snapshot = snapshot_from_payload(
        {
            "weights": [{"question_id": "Q1", "option_value": "yes", "score": 2}],
            "conditional_rules": [
                {"question_id": "Q2", "parent_question_id": "Q1", "required_value": "yes", "display_mode": "show"}
            ],
        }
    )
    assert len(snapshot.weights) == 1
    assert snapshot.conditional_rules[0].display_mode == "show"
    with pytest.raises(EngineContractError):
        snapshot_from_payload({"weights": [{"question_id": "Q1", "score": "two"}]})


def test_snapshot_is_immutable() -> None:
    snapshot = _snapshot()
    with pytest.raises(Exception):
        snapshot.weights = ()  # type: ignore[misc]


def test_environment_configuration_drives_fallbacks(monkeypatch) -> None:
    monkeypatch.setenv("RISKENGINE_FALLBACK_LOW_MAX", "0")
    monkeypatch.setenv("RISKENGINE_FALLBACK_MODERATE_MAX", "1")
    monkeypatch.setenv("RISKENGINE_FALLBACK_ADVICE", "Talk to your eye doctor.")
    snapshot = _snapshot(advice_records=[])

    result = assess_questionnaire({"familyGlaucoma": "yes"}, snapshot)
    assert result.tier == "High"
    assert result.advice == "Talk to your eye doctor."

    config = load_config()
    assert config.partition.tier_for(1) == "Moderate"


def test_load_config_defaults_and_invalid_values(monkeypatch) -> None:
    monkeypatch.delenv("RISKENGINE_FALLBACK_LOW_MAX", raising=False)
    monkeypatch.delenv("RISKENGINE_FALLBACK_ADVICE", raising=False)
    monkeypatch.setenv("RISKENGINE_FALLBACK_MODERATE_MAX", "not-a-number")
    monkeypatch.setenv("RISKENGINE_AUDIT_DETAIL_MAX_CHARS", "3")

    config = load_config()
    assert config.RISKENGINE_FALLBACK_LOW_MAX == 2
    assert config.RISKENGINE_FALLBACK_MODERATE_MAX == 5
    assert config.RISKENGINE_FALLBACK_ADVICE == DEFAULT_FALLBACK_ADVICE
    assert config.RISKENGINE_AUDIT_DETAIL_MAX_CHARS == 16


def test_load_config_clamps_inverted_thresholds(monkeypatch) -> None:
    monkeypatch.setenv("RISKENGINE_FALLBACK_LOW_MAX", "9")
    monkeypatch.setenv("RISKENGINE_FALLBACK_MODERATE_MAX", "4")
    config = load_config()
    assert config.RISKENGINE_FALLBACK_LOW_MAX == 4
    assert config.partition.tier_for(5) == "High"
