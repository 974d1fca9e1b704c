from __future__ import annotations

"""
Answer value normalization shared by weight lookups and conditional rules.

Storage keeps option values as text ("yes", "22_and_above", "true"), while
answers arrive as str/bool/number or a list of those for multi-select.
"""

from typing import Any


_NEGATIVE_TOKENS = {"", "false", "no", "n", "0", "off", "none", "null"}


def answer_key(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value).strip()


def answer_keys(value: Any) -> list[str]:
    """Normalized keys for one answer; multi-select lists yield one key per selection."""
    if value is None:
        return []
    if isinstance(value, (list, tuple)):
        keys: list[str] = []
        for item in value:
            if item is None:
                continue
            key = answer_key(item)
            if key and key not in keys:
                keys.append(key)
        return keys
    key = answer_key(value)
    return [key] if key else []


def is_empty_answer(value: Any) -> bool:
    return not answer_keys(value)


def is_present(value: Any) -> bool:
    """True when a boolean-like answer means presence (true/yes) rather than absence."""
    keys = answer_keys(value)
    if not keys:
        return False
    return any(key.lower() not in _NEGATIVE_TOKENS for key in keys)
