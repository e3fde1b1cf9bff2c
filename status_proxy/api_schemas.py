from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    ok: bool = Field(description="Always true while the process serves requests")
    uptime_s: int = Field(ge=0, description="Seconds since the service started")


class ProbeOutcomeResponse(BaseModel):
    status: Literal["UP", "DOWN"]
    detail: str
    latency_ms: int | None = Field(default=None, ge=0)


class StatusReportResponse(BaseModel):
    checked_at: str
    source: Literal["server"] = "server"
    statuses: dict[str, ProbeOutcomeResponse]


class ErrorResponse(BaseModel):
    error: str
    detail: str | None = None
