from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Mapping

from dotenv import load_dotenv

from status_proxy.cors import parse_origins
from status_proxy.models import Registry
from status_proxy.registry import build_registry

load_dotenv()

DEFAULT_CORS_ORIGIN = "https://foxxone.one"


@dataclass(frozen=True)
class Settings:
    port: int = 8788
    bind_host: str = "127.0.0.1"
    request_timeout_ms: int = 7000
    allowed_origins: tuple[str, ...] = (DEFAULT_CORS_ORIGIN,)
    log_level: str = "INFO"
    registry: Registry = field(default_factory=Registry)

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "Settings":
        env = os.environ if environ is None else environ
        return cls(
            port=int(env.get("PORT") or 8788),
            bind_host=env.get("BIND_HOST") or "127.0.0.1",
            request_timeout_ms=int(env.get("REQUEST_TIMEOUT_MS") or 7000),
            allowed_origins=parse_origins(env.get("CORS_ORIGIN") or DEFAULT_CORS_ORIGIN),
            log_level=(env.get("LOG_LEVEL") or "INFO").upper(),
            registry=build_registry(env),
        )
