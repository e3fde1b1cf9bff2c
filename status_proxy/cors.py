from __future__ import annotations

from typing import Sequence

ALLOW_METHODS = "GET, OPTIONS"
ALLOW_HEADERS = "content-type"
JSON_CONTENT_TYPE = "application/json; charset=utf-8"


def parse_origins(raw: str) -> tuple[str, ...]:
    return tuple(origin.strip() for origin in raw.split(",") if origin.strip())


def resolve_allowed_origin(allowed: Sequence[str], request_origin: str | None) -> str:
    """
    Pick the single origin to echo in access-control-allow-origin.
    Unlisted origins get the first configured origin rather than their own.
    """
    if not allowed:
        return "*"
    if "*" in allowed:
        return "*"
    if not request_origin:
        return allowed[0]
    if request_origin in allowed:
        return request_origin
    return allowed[0]


def response_headers(allowed: Sequence[str], request_origin: str | None) -> dict[str, str]:
    return {
        "content-type": JSON_CONTENT_TYPE,
        "cache-control": "no-store",
        "access-control-allow-origin": resolve_allowed_origin(allowed, request_origin),
        "access-control-allow-methods": ALLOW_METHODS,
        "access-control-allow-headers": ALLOW_HEADERS,
    }
