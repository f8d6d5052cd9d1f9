"""
Local ECDSA / secp256k1 wallet session.

Signs the unsigned transactions returned by action endpoints with a
key read from the environment (or ``~/.praxis/.env``) and submits them
over JSON-RPC. Keys are only read here, never generated or written.

Dependencies: eth-account (lightweight, no full web3.py needed)
"""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

import httpx
from dotenv import load_dotenv
from eth_account import Account
from eth_account.signers.local import LocalAccount
from eth_hash.auto import keccak

from ..config import PRAXIS_ENV
from ..errors import WalletNotConnected
from ..pneuma.rpc import get_gas_price, get_nonce, send_raw_transaction
from ..spec.models import NetworkId, SubmissionHandle, WalletAccount

logger = logging.getLogger(__name__)

DEFAULT_GAS_LIMIT = 500_000

_INT_FIELDS = (
    "value",
    "nonce",
    "gas",
    "gasPrice",
    "maxFeePerGas",
    "maxPriorityFeePerGas",
    "chainId",
    "type",
)


def load_private_key(env_path: Optional[Path] = None) -> str:
    """
    Load private key from .env file or environment.

    A PRIVATE_KEY already set in the environment wins over the file.

    Args:
        env_path: Path to .env file (default: ~/.praxis/.env)

    Returns:
        0x-prefixed hex private key

    Raises:
        ValueError: If PRIVATE_KEY is not set
    """
    env_path = env_path or PRAXIS_ENV

    if env_path.exists():
        load_dotenv(env_path, override=False)

    private_key = os.environ.get("PRIVATE_KEY")
    if not private_key:
        raise ValueError(f"PRIVATE_KEY not found. Set PRIVATE_KEY in the environment or in {env_path}")

    if not private_key.startswith("0x"):
        private_key = "0x" + private_key

    return private_key


def get_account(private_key: Optional[str] = None) -> LocalAccount:
    if private_key is None:
        private_key = load_private_key()
    return Account.from_key(private_key)


def get_address(private_key: Optional[str] = None) -> str:
    return get_account(private_key).address


def to_checksum_address(address: str) -> str:
    """Convert an address to EIP-55 checksummed format."""
    addr = address.lower().replace("0x", "")
    addr_hash = keccak(addr.encode("utf-8")).hex()
    result = "0x"
    for i, c in enumerate(addr):
        if c in "abcdef":
            result += c.upper() if int(addr_hash[i], 16) >= 8 else c
        else:
            result += c
    return result


def _coerce_int(value: Any) -> int:
    if isinstance(value, str):
        return int(value, 0)
    return int(value)


@dataclass
class LocalWallet:
    """
    Wallet session backed by a local private key.

    ``account`` is ``None`` when no key is configured, which the
    orchestrator treats as a disconnected wallet.
    """

    network: NetworkId
    private_key: Optional[str] = None
    client: Optional[httpx.Client] = None
    _signer: Optional[LocalAccount] = field(default=None, init=False, repr=False)

    def __post_init__(self) -> None:
        if self.private_key:
            self._signer = Account.from_key(self.private_key)

    @classmethod
    def from_env(
        cls,
        network: NetworkId,
        env_path: Optional[Path] = None,
        client: Optional[httpx.Client] = None,
    ) -> "LocalWallet":
        try:
            private_key: Optional[str] = load_private_key(env_path)
        except ValueError:
            logger.info("No wallet key configured")
            private_key = None
        return cls(network=network, private_key=private_key, client=client)

    @property
    def account(self) -> Optional[WalletAccount]:
        if self._signer is None:
            return None
        return WalletAccount(address=self._signer.address)

    def prepare_transaction(self, transaction: Any) -> dict[str, Any]:
        """
        Turn an endpoint's unsigned payload into a signable tx dict.

        Fills nonce, gas price, gas limit and chain id when the endpoint
        left them out.
        """
        if self._signer is None:
            raise WalletNotConnected()

        if isinstance(transaction, str):
            transaction = json.loads(transaction)
        if not isinstance(transaction, dict):
            raise ValueError("Unsigned transaction must be a JSON object")

        tx = dict(transaction)
        sender = tx.pop("from", None)
        if sender and sender.lower() != self._signer.address.lower():
            raise ValueError(f"Transaction sender {sender} is not the connected account")

        for key in _INT_FIELDS:
            if key in tx and tx[key] is not None:
                tx[key] = _coerce_int(tx[key])

        if tx.get("to"):
            tx["to"] = to_checksum_address(tx["to"])

        chain_id = tx.setdefault("chainId", self.network.chain_id)
        if chain_id != self.network.chain_id:
            raise ValueError(
                f"Transaction targets chain {chain_id}, wallet is on {self.network.chain_id}"
            )

        if "nonce" not in tx:
            tx["nonce"] = get_nonce(self._signer.address, self.network.rpc_url, client=self.client)
        if "gasPrice" not in tx and "maxFeePerGas" not in tx:
            tx["gasPrice"] = get_gas_price(self.network.rpc_url, client=self.client)
        tx.setdefault("gas", DEFAULT_GAS_LIMIT)
        tx.setdefault("value", 0)

        return tx

    def sign_and_submit(self, transaction: Any) -> SubmissionHandle:
        tx = self.prepare_transaction(transaction)
        signed = self._signer.sign_transaction(tx)  # type: ignore[union-attr]
        raw_tx = signed.raw_transaction.hex()
        if not raw_tx.startswith("0x"):
            raw_tx = "0x" + raw_tx

        tx_hash = send_raw_transaction(raw_tx, self.network.rpc_url, client=self.client)
        logger.info("Submitted transaction %s", tx_hash)
        return SubmissionHandle(hash=tx_hash)
