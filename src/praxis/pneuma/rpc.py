"""
JSON-RPC client for EVM chains.

Lightweight alternative to web3.py: uses httpx for HTTP. Covers what a
local wallet needs to submit a transaction and what the chain client
needs to wait for its receipt.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Any, Callable, Optional

import httpx

from ..errors import ConfirmationFailure
from ..spec.models import NetworkId

logger = logging.getLogger(__name__)


class RpcError(RuntimeError):
    pass


def _rpc_call(
    method: str,
    params: list,
    rpc_url: str,
    client: Optional[httpx.Client] = None,
    timeout: float = 30,
) -> Any:
    """
    Make a JSON-RPC call.

    Args:
        method: RPC method name (e.g., "eth_getTransactionReceipt")
        params: RPC parameters
        rpc_url: RPC endpoint URL
        client: Shared httpx client (a short-lived one is used otherwise)
        timeout: Request timeout in seconds

    Returns:
        Result field from the RPC response

    Raises:
        RpcError: If the transport fails or the node returns an error
    """
    payload = {
        "jsonrpc": "2.0",
        "method": method,
        "params": params,
        "id": 1,
    }

    try:
        if client is not None:
            response = client.post(rpc_url, json=payload, timeout=timeout)
        else:
            with httpx.Client(timeout=timeout) as short_lived:
                response = short_lived.post(rpc_url, json=payload)
        response.raise_for_status()
        data = response.json()
    except (httpx.HTTPError, ValueError) as exc:
        raise RpcError(f"RPC {method} failed: {exc}") from exc

    if "error" in data:
        raise RpcError(f"RPC error: {data['error']}")

    return data.get("result")


def get_nonce(address: str, rpc_url: str, client: Optional[httpx.Client] = None) -> int:
    result = _rpc_call("eth_getTransactionCount", [address, "pending"], rpc_url, client=client)
    return int(result, 16)


def get_gas_price(rpc_url: str, client: Optional[httpx.Client] = None) -> int:
    result = _rpc_call("eth_gasPrice", [], rpc_url, client=client)
    return int(result, 16)


def send_raw_transaction(raw_tx: str, rpc_url: str, client: Optional[httpx.Client] = None) -> str:
    """
    Send a signed raw transaction.

    Args:
        raw_tx: 0x-prefixed hex encoded signed transaction

    Returns:
        Transaction hash (0x-prefixed hex)
    """
    return _rpc_call("eth_sendRawTransaction", [raw_tx], rpc_url, client=client)


def get_transaction_receipt(
    tx_hash: str, rpc_url: str, client: Optional[httpx.Client] = None
) -> Optional[dict]:
    return _rpc_call("eth_getTransactionReceipt", [tx_hash], rpc_url, client=client)


@dataclass
class RpcChainClient:
    """
    Chain client that waits for finality by polling transaction receipts.

    A receipt with ``status == 0x1`` is success. A reverted receipt, an
    RPC failure, or no receipt within the timeout is a
    ``ConfirmationFailure``. Polling never resubmits anything.
    """

    client: Optional[httpx.Client] = None
    poll_interval: float = 2.0
    sleep: Callable[[float], None] = time.sleep
    clock: Callable[[], float] = time.monotonic

    def wait_for_transaction(
        self, network: NetworkId, tx_hash: str, timeout: float = 120
    ) -> dict:
        start = self.clock()
        while True:
            try:
                receipt = get_transaction_receipt(tx_hash, network.rpc_url, client=self.client)
            except RpcError as exc:
                raise ConfirmationFailure(f"Could not confirm {tx_hash}: {exc}") from exc

            if receipt is not None:
                status = int(receipt.get("status", "0x0"), 16)
                if status != 1:
                    raise ConfirmationFailure(f"Transaction {tx_hash} reverted")
                logger.info("Transaction %s confirmed on %s", tx_hash, network.name)
                return receipt

            if self.clock() - start >= timeout:
                raise ConfirmationFailure(
                    f"Transaction {tx_hash} not confirmed within {timeout}s"
                )
            self.sleep(self.poll_interval)
