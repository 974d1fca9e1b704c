import logging

import pytest

from riskengine.internal_core.contracts import Answer, EngineContractError, QuestionDefinition, WeightEntry
from riskengine.scoring.calculator import ContributingFactor, compute_score
from riskengine.scoring.weights import WeightTable


def _weights() -> list[WeightEntry]:
    return [
        WeightEntry(question_id="Q1", option_value="yes", score=2),
        WeightEntry(question_id="Q2", option_value="yes", score=2),
    ]


def test_compute_score_sums_matching_weights_and_lists_positive_factors() -> None:
    result = compute_score({"Q1": "yes", "Q2": "no"}, _weights())
    assert result.total == 2
    assert result.contributing_factors == [
        ContributingFactor(question_id="Q1", question="Q1", answer="yes", points=2)
    ]


def test_compute_score_unknown_questions_are_inert() -> None:
    result = compute_score({"unknown": "yes", "Q1": "maybe"}, _weights())
    assert result.total == 0
    assert result.contributing_factors == []


def test_compute_score_clamps_negative_total_but_keeps_raw_total() -> None:
    weights = [
        WeightEntry(question_id="Q1", option_value="yes", score=1),
        WeightEntry(question_id="Q2", option_value="yes", score=-5),
    ]
    result = compute_score({"Q1": "yes", "Q2": "yes"}, weights)
    assert result.total == 0
    assert result.raw_total == -4
    assert [factor.question_id for factor in result.contributing_factors] == ["Q1"]


def test_compute_score_preserves_answer_order_and_uses_labels() -> None:
    questions = [
        QuestionDefinition(
            id="race",
            text="Race",
            options=[{"value": "black", "label": "Black / African descent"}],
        ),
        QuestionDefinition(id="familyGlaucoma", text="Family History of Glaucoma"),
    ]
    weights = [
        WeightEntry(question_id="race", option_value="black", score=2),
        WeightEntry(question_id="familyGlaucoma", option_value="yes", score=2),
    ]
    answers = [
        Answer(question_id="familyGlaucoma", value="yes"),
        Answer(question_id="race", value="black"),
    ]
    result = compute_score(answers, weights, questions)
    assert result.total == 4
    assert [(f.question, f.answer) for f in result.contributing_factors] == [
        ("Family History of Glaucoma", "yes"),
        ("Race", "Black / African descent"),
    ]


def test_compute_score_skips_empty_answers() -> None:
    weights = [WeightEntry(question_id="Q1", option_value=None, score=3)]
    result = compute_score({"Q1": ""}, weights)
    assert result.total == 0


def test_default_weight_applies_only_to_present_answers() -> None:
    weights = [WeightEntry(question_id="diabetes", option_value=None, score=3)]
    assert compute_score({"diabetes": True}, weights).total == 3
    assert compute_score({"diabetes": "yes"}, weights).total == 3
    assert compute_score({"diabetes": False}, weights).total == 0
    assert compute_score({"diabetes": "no"}, weights).total == 0


def test_multi_select_answers_contribute_per_selected_option() -> None:
    weights = [
        WeightEntry(question_id="steroids", option_value="ocular", score=2),
        WeightEntry(question_id="steroids", option_value="systemic", score=1),
    ]
    result = compute_score({"steroids": ["ocular", "systemic", "none"]}, weights)
    assert result.total == 3
    assert [f.answer for f in result.contributing_factors] == ["ocular", "systemic"]


def test_boolean_and_numeric_answers_normalize_for_lookup() -> None:
    weights = [
        WeightEntry(question_id="smoker", option_value="true", score=1),
        WeightEntry(question_id="iop", option_value="22", score=2),
    ]
    assert compute_score({"smoker": True, "iop": 22.0}, weights).total == 3


def test_weight_table_first_duplicate_wins(caplog) -> None:
    entries = [
        WeightEntry(question_id="Q1", option_value="yes", score=2),
        WeightEntry(question_id="Q1", option_value="yes", score=9),
    ]
    with caplog.at_level(logging.WARNING):
        table = WeightTable.from_entries(entries)
    assert table.lookup("Q1", "yes") == 2
    assert "duplicate" in caplog.text.lower()


def test_weight_table_accepts_storage_rows() -> None:
    table = WeightTable.from_entries(
        [{"id": "cfg-1", "question_id": "Q1", "option_value": "yes", "score": 2, "created_at": "2024-01-01"}]
    )
    assert table.lookup("Q1", "yes") == 2
    assert table.lookup("Q1", "no") == 0


def test_compute_score_rejects_structurally_invalid_weights() -> None:
    with pytest.raises(EngineContractError):
        compute_score({"Q1": "yes"}, "not-a-weight-list")
    with pytest.raises(EngineContractError):
        compute_score({"Q1": "yes"}, [{"question_id": "Q1", "option_value": "yes"}])


def test_compute_score_rejects_structurally_invalid_answers() -> None:
    with pytest.raises(EngineContractError):
        compute_score(42, _weights())
    with pytest.raises(EngineContractError):
        compute_score([("Q1", "yes")], _weights())


def test_compute_score_is_deterministic_and_never_negative() -> None:
    weights = [
        WeightEntry(question_id=f"Q{i}", option_value="yes", score=score)
        for i, score in enumerate([3, -2, 0, 5, -7])
    ]
    answers = {f"Q{i}": "yes" for i in range(5)}
    first = compute_score(answers, weights)
    second = compute_score(answers, weights)
    assert first == second
    assert first.total >= 0
