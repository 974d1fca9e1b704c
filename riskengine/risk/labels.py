from __future__ import annotations

"""
Canonical risk tier names and stored-label normalization.

Design intent:
- Keep the tier vocabulary in one place (Low < Moderate < High).
- Express fuzzy label matching as an ordered list of rules, not ad hoc checks.
- Tolerate casing/spacing drift in admin-entered labels ("moderate", "Medium", "high risk").
"""

from dataclasses import dataclass
from typing import Literal, Sequence


RiskTier = Literal["Low", "Moderate", "High"]

RISK_TIER_ORDER: tuple[RiskTier, ...] = ("Low", "Moderate", "High")


@dataclass(frozen=True)
class TierLabelRule:
    """Maps a label to `tier` when it contains any of `fragments` (case-insensitive)."""

    fragments: tuple[str, ...]
    tier: RiskTier

    def matches(self, label: str) -> bool:
        lowered = label.lower()
        return any(fragment in lowered for fragment in self.fragments)


# Order matters: the first matching rule wins.
TIER_LABEL_RULES: tuple[TierLabelRule, ...] = (
    TierLabelRule(fragments=("low",), tier="Low"),
    TierLabelRule(fragments=("mod", "med"), tier="Moderate"),
    TierLabelRule(fragments=("high",), tier="High"),
)


def canonicalize_tier_label(
    label: object,
    rules: Sequence[TierLabelRule] = TIER_LABEL_RULES,
) -> RiskTier | None:
    if label is None:
        return None
    text = str(label).strip()
    if not text:
        return None
    for rule in rules:
        if rule.matches(text):
            return rule.tier
    return None
