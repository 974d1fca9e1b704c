from __future__ import annotations

import datetime as _dt

from .contracts import AuditEvent, AuditEventType


def _ts_iso() -> str:
    return _dt.datetime.now(_dt.timezone.utc).isoformat()


def _sanitize_detail(detail: str, max_chars: int) -> str:
    # Advice text and free-text answers can be long; keep audit detail to one short line.
    detail = " ".join((detail or "").split())
    if len(detail) > max_chars:
        detail = detail[:max_chars] + "…"
    return detail


def build_audit_event(
    event_type: AuditEventType,
    code: str,
    detail: str,
    *,
    max_chars: int = 200,
) -> AuditEvent:
    return AuditEvent(
        ts_iso=_ts_iso(),
        type=event_type,
        code=code,
        detail=_sanitize_detail(detail, max_chars),
    )
