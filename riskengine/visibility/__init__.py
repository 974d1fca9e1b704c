"""
Conditional question visibility boundary.

Design intent:
- Evaluate declarative parent -> child display rules against live answers.
- Keep evaluation pure so the form layer can re-run it on every change.
- Skip validation of questions the current answers hide or disable.
"""
from __future__ import annotations
