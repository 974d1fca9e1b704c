from __future__ import annotations

from typing import Any, List, Literal, Mapping, Optional, Sequence, Type, TypeVar, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError, ValidationInfo, field_validator, model_validator

from riskengine.risk.labels import RiskTier, canonicalize_tier_label


class EngineContractError(ValueError):
    """Caller handed the engine structurally invalid input (programmer error)."""


QuestionType = Literal["single_select", "multi_select", "numeric", "free_text", "boolean"]

DisplayMode = Literal["show", "hide", "disable"]

VisibilityState = Literal["show", "hide", "disable"]

ScalarAnswer = Union[bool, int, float, str]

AnswerValue = Union[ScalarAnswer, List[ScalarAnswer], None]


class _Record(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)


class QuestionOption(_Record):
    value: str
    label: str


class QuestionDefinition(_Record):
    id: str = Field(min_length=1)
    text: str
    type: QuestionType = "single_select"
    options: List[QuestionOption] = Field(default_factory=list)
    required: bool = False
    page: Optional[int] = None

    def option_label(self, value: str) -> Optional[str]:
        for option in self.options:
            if option.value == value:
                return option.label
        return None


class WeightEntry(_Record):
    question_id: str = Field(min_length=1)
    option_value: Optional[str] = None
    score: int
    id: Optional[str] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None


class Answer(_Record):
    question_id: str = Field(min_length=1)
    value: AnswerValue = None


class TierRange(_Record):
    tier: RiskTier
    min_score: float
    max_score: float

    @field_validator("tier", mode="before")
    @classmethod
    def _canonical_tier(cls, value: Any) -> Any:
        canonical = canonicalize_tier_label(value)
        return canonical if canonical is not None else value

    def contains(self, score: float) -> bool:
        return self.min_score <= score <= self.max_score


_ADVICE_NULL_DEFAULTS: dict[str, Any] = {"min_score": 0, "max_score": 100, "advice": ""}


class AdviceRecord(_Record):
    risk_level: Optional[str] = None
    min_score: float = 0
    max_score: float = 100
    advice: str = ""
    updated_at: Optional[str] = None
    id: Optional[str] = None
    created_at: Optional[str] = None

    # Legacy rows store NULL in these columns; treat them as unset.
    @field_validator("min_score", "max_score", "advice", mode="before")
    @classmethod
    def _null_to_default(cls, value: Any, info: ValidationInfo) -> Any:
        if value is None:
            return _ADVICE_NULL_DEFAULTS[info.field_name]
        return value

    def contains(self, score: float) -> bool:
        return self.min_score <= score <= self.max_score


class ConditionalRule(_Record):
    question_id: str = Field(min_length=1)
    parent_question_id: str = Field(min_length=1)
    required_value: str
    display_mode: DisplayMode = "show"

    @model_validator(mode="after")
    def _validate_parent(self) -> "ConditionalRule":
        if self.parent_question_id == self.question_id:
            raise ValueError("ConditionalRule.parent_question_id must differ from question_id")
        return self


class EngineSnapshot(_Record):
    questions: tuple[QuestionDefinition, ...] = ()
    weights: tuple[WeightEntry, ...] = ()
    tier_ranges: tuple[TierRange, ...] = ()
    advice_records: tuple[AdviceRecord, ...] = ()
    conditional_rules: tuple[ConditionalRule, ...] = ()


AuditEventType = Literal[
    "SCORE_COMPUTED",
    "TIER_CLASSIFIED",
    "TIER_FALLBACK",
    "TIER_FROM_STORED_LABEL",
    "ADVICE_RESOLVED",
    "ADVICE_FALLBACK",
]


class AuditEvent(_Record):
    ts_iso: str
    type: AuditEventType
    code: str
    detail: str


RecordT = TypeVar("RecordT", bound=BaseModel)


def coerce_records(items: Any, model: Type[RecordT], *, name: str) -> list[RecordT]:
    """Validate a sequence of model instances or plain dicts into `model` records."""
    if items is None:
        return []
    if isinstance(items, (str, bytes)) or isinstance(items, Mapping) or not isinstance(items, Sequence):
        raise EngineContractError(f"{name} must be a sequence of {model.__name__} records")
    records: list[RecordT] = []
    for index, item in enumerate(items):
        if isinstance(item, model):
            records.append(item)
            continue
        if not isinstance(item, Mapping):
            raise EngineContractError(
                f"{name}[{index}] must be a {model.__name__} or mapping, got {type(item).__name__}"
            )
        try:
            records.append(model.model_validate(dict(item)))
        except ValidationError as exc:
            raise EngineContractError(f"{name}[{index}] is not a valid {model.__name__}: {exc}") from exc
    return records


def coerce_answers(answers: Any) -> list[Answer]:
    """Accept an AnswerMap ({question_id: value}) or a sequence of Answer records."""
    if isinstance(answers, Mapping):
        records: list[Answer] = []
        for question_id, value in answers.items():
            try:
                records.append(Answer(question_id=question_id, value=value))
            except ValidationError as exc:
                raise EngineContractError(f"answers[{question_id!r}] is not a valid Answer: {exc}") from exc
        return records
    return coerce_records(answers, Answer, name="answers")
