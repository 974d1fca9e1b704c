from __future__ import annotations

import os
from dataclasses import dataclass

from riskengine.risk.labels import RiskTier


DEFAULT_FALLBACK_ADVICE = "Recommendations will be provided by your doctor based on this assessment."


def _getenv_str(name: str, default: str) -> str:
    value = os.getenv(name)
    return default if value is None or value.strip() == "" else value


def _getenv_int(name: str, default: int, *, min_value: int | None = None) -> int:
    value = os.getenv(name)
    if value is None or value.strip() == "":
        return default
    try:
        parsed = int(value)
    except ValueError:
        return default
    if min_value is not None and parsed < min_value:
        return min_value
    return parsed


@dataclass(frozen=True)
class DefaultPartition:
    """Built-in score thresholds used when configured tier ranges do not apply.

    score <= low_max -> Low, score <= moderate_max -> Moderate, otherwise High.
    """

    low_max: float = 2
    moderate_max: float = 5

    def tier_for(self, score: float) -> RiskTier:
        if score <= self.low_max:
            return "Low"
        if score <= self.moderate_max:
            return "Moderate"
        return "High"


DEFAULT_PARTITION = DefaultPartition()


@dataclass(frozen=True)
class EngineConfig:
    RISKENGINE_FALLBACK_LOW_MAX: int
    RISKENGINE_FALLBACK_MODERATE_MAX: int
    RISKENGINE_FALLBACK_ADVICE: str
    RISKENGINE_AUDIT_DETAIL_MAX_CHARS: int

    @property
    def partition(self) -> DefaultPartition:
        return DefaultPartition(
            low_max=self.RISKENGINE_FALLBACK_LOW_MAX,
            moderate_max=self.RISKENGINE_FALLBACK_MODERATE_MAX,
        )


def load_config() -> EngineConfig:
    low_max = _getenv_int("RISKENGINE_FALLBACK_LOW_MAX", int(DEFAULT_PARTITION.low_max))
    moderate_max = _getenv_int("RISKENGINE_FALLBACK_MODERATE_MAX", int(DEFAULT_PARTITION.moderate_max))
    if low_max > moderate_max:
        low_max = moderate_max

    return EngineConfig(
        RISKENGINE_FALLBACK_LOW_MAX=low_max,
        RISKENGINE_FALLBACK_MODERATE_MAX=moderate_max,
        RISKENGINE_FALLBACK_ADVICE=_getenv_str("RISKENGINE_FALLBACK_ADVICE", DEFAULT_FALLBACK_ADVICE),
        RISKENGINE_AUDIT_DETAIL_MAX_CHARS=_getenv_int("RISKENGINE_AUDIT_DETAIL_MAX_CHARS", 200, min_value=16),
    )
