"""
Assessment orchestration boundary.

Design intent:
- Bundle fetched configuration rows into one immutable, validated snapshot.
- Run scoring, tier classification and advice resolution in a fixed order.
- Keep persistence and transport with the caller; this layer performs no I/O.
"""
from __future__ import annotations
