"""
Configuration for the action engine.

Values come from the environment, optionally seeded from a ``.env``
file (``~/.praxis/.env`` by default). The engine itself only receives
the resulting ``EngineConfig``; nothing below reads ambient state later.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

from .spec.models import NetworkId

PRAXIS_DIR = Path.home() / ".praxis"
PRAXIS_ENV = PRAXIS_DIR / ".env"

# Counterparty the action endpoints expect as ``toAddress``.
DEFAULT_COUNTERPARTY = "0xe975d15fd30e20768cb5f2dc05d5966c31e235324bb2794e1c49df63c475799e"

DEFAULT_NETWORK = "base-sepolia"
DEFAULT_RPC_URL = "https://sepolia.base.org"
DEFAULT_CHAIN_ID = 84532  # Base Sepolia

KNOWN_NETWORKS: dict[str, NetworkId] = {
    "base-sepolia": NetworkId(
        name="base-sepolia",
        chain_id=84532,
        rpc_url="https://sepolia.base.org",
        explorer_url="https://sepolia.basescan.org",
    ),
    "base": NetworkId(
        name="base",
        chain_id=8453,
        rpc_url="https://mainnet.base.org",
        explorer_url="https://basescan.org",
    ),
    "sepolia": NetworkId(
        name="sepolia",
        chain_id=11155111,
        rpc_url="https://rpc.sepolia.org",
        explorer_url="https://sepolia.etherscan.io",
    ),
}


@dataclass(frozen=True)
class EngineConfig:
    network: NetworkId
    counterparty: str = DEFAULT_COUNTERPARTY
    request_timeout: float = 30.0
    confirm_timeout: float = 120.0
    poll_interval: float = 2.0
    log_level: str = "WARNING"

    @classmethod
    def from_env(cls, env_path: Optional[Path] = None) -> "EngineConfig":
        """
        Build a config from environment variables.

        Args:
            env_path: Path to a .env file (default: ~/.praxis/.env)

        Returns:
            EngineConfig with defaults for anything unset
        """
        env_path = env_path or PRAXIS_ENV
        if env_path.exists():
            load_dotenv(env_path, override=False)

        return cls(
            network=resolve_network(
                os.environ.get("PRAXIS_NETWORK", DEFAULT_NETWORK),
                rpc_url=os.environ.get("PRAXIS_RPC_URL"),
                chain_id=os.environ.get("CHAIN_ID"),
            ),
            counterparty=os.environ.get("PRAXIS_COUNTERPARTY", DEFAULT_COUNTERPARTY),
            request_timeout=float(os.environ.get("PRAXIS_REQUEST_TIMEOUT", "30")),
            confirm_timeout=float(os.environ.get("PRAXIS_CONFIRM_TIMEOUT", "120")),
            poll_interval=float(os.environ.get("PRAXIS_POLL_INTERVAL", "2.0")),
            log_level=os.environ.get("PRAXIS_LOG_LEVEL", "WARNING"),
        )


def resolve_network(
    name: str,
    rpc_url: Optional[str] = None,
    chain_id: Optional[str | int] = None,
) -> NetworkId:
    """Look up a known network, letting explicit RPC URL / chain id win."""
    known = KNOWN_NETWORKS.get(name)
    if known is None:
        return NetworkId(
            name=name,
            chain_id=int(chain_id) if chain_id else DEFAULT_CHAIN_ID,
            rpc_url=rpc_url or DEFAULT_RPC_URL,
        )
    return NetworkId(
        name=known.name,
        chain_id=int(chain_id) if chain_id else known.chain_id,
        rpc_url=rpc_url or known.rpc_url,
        explorer_url=known.explorer_url,
    )
