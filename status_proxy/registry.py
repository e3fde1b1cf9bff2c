from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Mapping

import yaml

from status_proxy.models import JsonRpcCheck, Registry, TcpCheck, TendermintCheck

logger = logging.getLogger(__name__)

DEFAULT_EVM_URL = "https://evm-rpc.infinitedrive.xyz"
DEFAULT_COMET_URL = "https://comet-rpc.infinitedrive.xyz"
DEFAULT_GRPC_HOST = "grpc.infinitedrive.xyz"
DEFAULT_EVM_TESTNET_URL = "https://evm-rpc-testnet.infinitedrive.xyz"
DEFAULT_COMET_TESTNET_URL = "https://comet-rpc-testnet.infinitedrive.xyz"
DEFAULT_GRPC_TESTNET_HOST = "grpc-testnet.infinitedrive.xyz"
DEFAULT_GRPC_PORT = 443


def _env(environ: Mapping[str, str], name: str, default: str) -> str:
    return environ.get(name) or default


def _coerce_port(check_id: str, raw: str | None) -> int | None:
    if not raw:
        return DEFAULT_GRPC_PORT
    try:
        return int(raw.strip())
    except ValueError:
        logger.warning("Check %s has an unparsable port %r; it will report DOWN", check_id, raw)
        return None


def checks_from_env(environ: Mapping[str, str] | None = None) -> Registry:
    """Build the built-in check list, letting the environment override targets."""
    env = os.environ if environ is None else environ

    return Registry(
        checks=(
            JsonRpcCheck(id="infinite-evm", url=_env(env, "INFINITE_EVM_URL", DEFAULT_EVM_URL)),
            TendermintCheck(
                id="infinite-comet",
                url=_env(env, "INFINITE_COMET_URL", DEFAULT_COMET_URL),
            ),
            TcpCheck(
                id="infinite-grpc",
                host=_env(env, "INFINITE_GRPC_HOST", DEFAULT_GRPC_HOST),
                port=_coerce_port("infinite-grpc", env.get("INFINITE_GRPC_PORT")),
            ),
            JsonRpcCheck(
                id="infinite-evm-testnet",
                url=_env(env, "INFINITE_EVM_TESTNET_URL", DEFAULT_EVM_TESTNET_URL),
            ),
            TendermintCheck(
                id="infinite-comet-testnet",
                url=_env(env, "INFINITE_COMET_TESTNET_URL", DEFAULT_COMET_TESTNET_URL),
            ),
            TcpCheck(
                id="infinite-grpc-testnet",
                host=_env(env, "INFINITE_GRPC_TESTNET_HOST", DEFAULT_GRPC_TESTNET_HOST),
                port=_coerce_port("infinite-grpc-testnet", env.get("INFINITE_GRPC_TESTNET_PORT")),
            ),
        )
    )


def load_registry(path: Path) -> Registry:
    if not path.exists():
        raise FileNotFoundError(f"Missing checks file at {path}")

    data = yaml.safe_load(path.read_text()) or {}
    reg = Registry.model_validate(data)

    # Ensure unique IDs
    seen = set()
    for c in reg.checks:
        if c.id in seen:
            raise ValueError(f"Duplicate check id: {c.id}")
        seen.add(c.id)

    return reg


def build_registry(environ: Mapping[str, str] | None = None) -> Registry:
    env = os.environ if environ is None else environ
    checks_file = env.get("CHECKS_FILE")
    if checks_file:
        reg = load_registry(Path(checks_file))
        logger.info("Loaded %d checks from %s", len(reg.checks), checks_file)
        return reg
    return checks_from_env(env)
