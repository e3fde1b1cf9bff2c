from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal

ProbeStatus = Literal["UP", "DOWN"]


class ProbeError(Exception):
    """A probe reached its endpoint but the answer counts as a failure."""


@dataclass
class ProbeOutcome:
    status: ProbeStatus
    detail: str
    latency_ms: int | None = None

    @classmethod
    def up(cls, latency_ms: int) -> "ProbeOutcome":
        return cls(status="UP", detail=f"Latency {latency_ms}ms", latency_ms=latency_ms)

    @classmethod
    def down(cls, detail: str) -> "ProbeOutcome":
        return cls(status="DOWN", detail=detail, latency_ms=None)


@dataclass
class StatusReport:
    checked_at: str
    source: str = "server"
    statuses: dict[str, ProbeOutcome] = field(default_factory=dict)
