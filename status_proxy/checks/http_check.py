from __future__ import annotations

import httpx

from status_proxy.checks.results import ProbeError

JSONRPC_PAYLOAD = {
    "jsonrpc": "2.0",
    "id": 1,
    "method": "web3_clientVersion",
    "params": [],
}


def _raise_for_status(r: httpx.Response) -> None:
    if not 200 <= r.status_code < 300:
        raise ProbeError(f"HTTP {r.status_code}")


async def probe_jsonrpc(client: httpx.AsyncClient, url: str) -> None:
    r = await client.post(url, json=JSONRPC_PAYLOAD)
    _raise_for_status(r)

    # ValueError from a malformed body propagates with the decoder's message.
    data = r.json()
    error = data.get("error") if isinstance(data, dict) else None
    # Any error member counts, even an empty one.
    if error is not None:
        message = error.get("message") if isinstance(error, dict) else None
        raise ProbeError(message or "json-rpc error")


async def probe_tendermint(client: httpx.AsyncClient, url: str) -> None:
    r = await client.get(f"{url}/status")
    _raise_for_status(r)
