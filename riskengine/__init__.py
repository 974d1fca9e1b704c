"""
Risk assessment scoring and recommendation engine.

Design intent:
- Score completed clinical questionnaires from admin-curated weights.
- Classify scores into Low/Moderate/High and resolve caregiver advice.
- Keep every component a pure function over caller-supplied snapshots.
"""
