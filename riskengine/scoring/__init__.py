"""
Questionnaire scoring boundary.

Design intent:
- Turn submitted answers into a numeric risk score using admin-curated weights.
- Treat unknown or unweighted answers as inert instead of failing.
- Keep a per-answer breakdown so reviewers can see where points came from.
"""
from __future__ import annotations
