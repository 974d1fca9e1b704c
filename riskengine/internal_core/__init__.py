from .audit import build_audit_event
from .config import DEFAULT_PARTITION, DefaultPartition, EngineConfig, load_config
from .contracts import (
    AdviceRecord,
    Answer,
    AuditEvent,
    ConditionalRule,
    EngineContractError,
    EngineSnapshot,
    QuestionDefinition,
    QuestionOption,
    TierRange,
    WeightEntry,
)

__all__ = [
    "AdviceRecord",
    "Answer",
    "AuditEvent",
    "ConditionalRule",
    "DEFAULT_PARTITION",
    "DefaultPartition",
    "EngineConfig",
    "EngineContractError",
    "EngineSnapshot",
    "QuestionDefinition",
    "QuestionOption",
    "TierRange",
    "WeightEntry",
    "build_audit_event",
    "load_config",
]
