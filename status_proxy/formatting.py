from __future__ import annotations

from datetime import datetime, timezone

FALLBACK_DETAIL = "request failed"


def serialize_ts(dt: datetime | None) -> str | None:
    if dt is None:
        return None
    return dt.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def utcnow_iso() -> str:
    return serialize_ts(datetime.now(timezone.utc)) or ""


def timeout_detail(timeout_ms: int) -> str:
    return f"timeout after {timeout_ms}ms"


def error_detail(exc: BaseException) -> str:
    return str(exc) or FALLBACK_DETAIL
