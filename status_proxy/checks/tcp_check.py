from __future__ import annotations

import asyncio

from status_proxy.checks.results import ProbeError


async def probe_tcp(host: str, port: int | None) -> None:
    if port is None:
        raise ProbeError(f"invalid port for {host}")

    _, writer = await asyncio.open_connection(host, port)
    writer.close()
    await writer.wait_closed()
