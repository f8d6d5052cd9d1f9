"""Shared fakes for the wallet, chain client and HTTP endpoints."""

from __future__ import annotations

import json
from typing import Any, Callable, Optional

import httpx
import pytest

from praxis.config import DEFAULT_COUNTERPARTY
from praxis.engine.orchestrator import ActionExecutor
from praxis.errors import ConfirmationFailure
from praxis.spec.models import NetworkId, SubmissionHandle, WalletAccount

TEST_NETWORK = NetworkId(
    name="testnet",
    chain_id=84532,
    rpc_url="https://rpc.test",
    explorer_url="https://explorer.test",
)

ADDRESS = "0x1111111111111111111111111111111111111111"
TX_HASH = "0x" + "ab" * 32

TIP_MANIFEST = {
    "title": "Tip",
    "description": " Send a tip ",
    "icon": "https://x/i.png",
    "links": {"actions": [{"href": "https://x/tip", "label": "Tip 1 APT"}]},
}

PAY_MANIFEST = {
    "title": "Pay",
    "description": "Pay any amount",
    "icon": "https://x/p.png",
    "links": {
        "actions": [
            {
                "href": "https://x/pay/{amount}",
                "label": "Pay",
                "parameters": [{"name": "amount", "label": "Amount", "required": True}],
            }
        ]
    },
}

UNSIGNED_TX = {"to": "0x2222222222222222222222222222222222222222", "value": "0x1", "data": "0x"}


class FakeWallet:
    def __init__(
        self,
        address: Optional[str] = ADDRESS,
        network: NetworkId = TEST_NETWORK,
        tx_hash: Optional[str] = TX_HASH,
        error: Optional[Exception] = None,
    ) -> None:
        self._account = WalletAccount(address) if address else None
        self.network = network
        self.tx_hash = tx_hash
        self.error = error
        self.submitted: list[Any] = []

    @property
    def account(self) -> Optional[WalletAccount]:
        return self._account

    def sign_and_submit(self, transaction: Any) -> SubmissionHandle:
        self.submitted.append(transaction)
        if self.error is not None:
            raise self.error
        return SubmissionHandle(hash=self.tx_hash)


class FakeChain:
    def __init__(self, fail: bool = False) -> None:
        self.fail = fail
        self.waited: list[tuple[NetworkId, str, float]] = []

    def wait_for_transaction(self, network: NetworkId, tx_hash: str, timeout: float = 120) -> dict:
        self.waited.append((network, tx_hash, timeout))
        if self.fail:
            raise ConfirmationFailure(f"Transaction {tx_hash} reverted")
        return {"status": "0x1", "transactionHash": tx_hash}


class FakeEndpoints:
    """MockTransport handler keyed by (method, url)."""

    def __init__(self) -> None:
        self.routes: dict[tuple[str, str], Callable[[httpx.Request], httpx.Response]] = {}
        self.requests: list[httpx.Request] = []

    def json(self, method: str, url: str, payload: Any, status: int = 200) -> None:
        self.routes[(method, url)] = lambda request: httpx.Response(status, json=payload)

    def text(self, method: str, url: str, body: str, status: int = 200) -> None:
        self.routes[(method, url)] = lambda request: httpx.Response(status, text=body)

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        handler = self.routes.get((request.method, str(request.url)))
        if handler is None:
            return httpx.Response(404, json={"error": "not found"})
        return handler(request)

    def bodies(self, method: str = "POST") -> list[dict]:
        return [json.loads(r.content) for r in self.requests if r.method == method]

    def client(self) -> httpx.Client:
        return httpx.Client(transport=httpx.MockTransport(self), follow_redirects=True)


@pytest.fixture()
def endpoints() -> FakeEndpoints:
    return FakeEndpoints()


@pytest.fixture()
def http_client(endpoints: FakeEndpoints):
    client = endpoints.client()
    yield client
    client.close()


@pytest.fixture()
def wallet() -> FakeWallet:
    return FakeWallet()


@pytest.fixture()
def chain() -> FakeChain:
    return FakeChain()


@pytest.fixture()
def executor(wallet: FakeWallet, chain: FakeChain, http_client: httpx.Client) -> ActionExecutor:
    return ActionExecutor(
        wallet=wallet,
        chain=chain,
        counterparty=DEFAULT_COUNTERPARTY,
        client=http_client,
    )
