from __future__ import annotations

import asyncio
import logging
import time
from typing import Sequence

import httpx

from status_proxy.checks.http_check import probe_jsonrpc, probe_tendermint
from status_proxy.checks.results import ProbeOutcome, StatusReport
from status_proxy.checks.tcp_check import probe_tcp
from status_proxy.formatting import error_detail, timeout_detail, utcnow_iso
from status_proxy.models import Check

logger = logging.getLogger(__name__)


def _probe_for(check: Check, client: httpx.AsyncClient):
    if check.kind == "jsonrpc":
        return probe_jsonrpc(client, check.url)
    if check.kind == "tendermint":
        return probe_tendermint(client, check.url)
    if check.kind == "tcp":
        return probe_tcp(check.host, check.port)
    raise ValueError(f"Unknown check kind: {check.kind}")


async def run_check(check: Check, client: httpx.AsyncClient, timeout_ms: int) -> ProbeOutcome:
    start = time.perf_counter()
    try:
        # wait_for cancels the probe when the timeout fires.
        await asyncio.wait_for(_probe_for(check, client), timeout=timeout_ms / 1000)
    except asyncio.TimeoutError as e:
        # On 3.11+ an OS-level TimeoutError from the probe lands here too.
        if time.perf_counter() - start >= timeout_ms / 1000:
            detail = timeout_detail(timeout_ms)
        else:
            detail = error_detail(e)
    except Exception as e:
        detail = error_detail(e)
    else:
        latency_ms = int((time.perf_counter() - start) * 1000)
        return ProbeOutcome.up(latency_ms)

    logger.warning("Check %s (%s) is DOWN: %s", check.id, check.kind, detail)
    return ProbeOutcome.down(detail)


async def run_checks(
    checks: Sequence[Check],
    timeout_ms: int,
    transport: httpx.AsyncBaseTransport | None = None,
) -> StatusReport:
    # Per-probe timeouts come from wait_for, not from the client.
    async with httpx.AsyncClient(transport=transport, timeout=None) as client:
        outcomes = await asyncio.gather(
            *(run_check(c, client, timeout_ms) for c in checks)
        )

    statuses = {c.id: outcome for c, outcome in zip(checks, outcomes)}
    return StatusReport(checked_at=utcnow_iso(), source="server", statuses=statuses)
