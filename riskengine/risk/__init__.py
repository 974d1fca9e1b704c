"""
Risk interpretation boundary for the assessment engine.

Design intent:
- Map scores and stored labels onto a fixed Low/Moderate/High tier set.
- Resolve tiers to advice through explicit, auditable fallbacks.
- Never fail on inconsistent admin data; fall back and report the fallback.
"""
from __future__ import annotations
