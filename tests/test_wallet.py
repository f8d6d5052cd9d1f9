"""Tests for the local eth-account wallet session."""

from __future__ import annotations

import os
import secrets
from pathlib import Path
from unittest.mock import patch

import pytest
from eth_account import Account

from conftest import TEST_NETWORK
from praxis.errors import WalletNotConnected
from praxis.sigil import eth
from praxis.sigil.eth import LocalWallet, load_private_key, to_checksum_address

RECIPIENT = "0x5aaeb6053f3e94c9b9a09f33669435e7ef1beaed"


@pytest.fixture()
def private_key() -> str:
    return "0x" + secrets.token_hex(32)


@pytest.fixture()
def offline_rpc(monkeypatch: pytest.MonkeyPatch) -> list[str]:
    sent: list[str] = []
    monkeypatch.setattr(eth, "get_nonce", lambda address, rpc_url, client=None: 3)
    monkeypatch.setattr(eth, "get_gas_price", lambda rpc_url, client=None: 1_000_000_000)

    def fake_send(raw_tx: str, rpc_url: str, client=None) -> str:
        sent.append(raw_tx)
        return "0x" + "cd" * 32

    monkeypatch.setattr(eth, "send_raw_transaction", fake_send)
    return sent


class TestLoadPrivateKey:
    def test_from_environment_adds_prefix(self, tmp_path: Path) -> None:
        with patch.dict(os.environ, {"PRIVATE_KEY": "ab" * 32}):
            assert load_private_key(tmp_path / ".env") == "0x" + "ab" * 32

    def test_from_env_file(self, tmp_path: Path) -> None:
        env_path = tmp_path / ".env"
        env_path.write_text("PRIVATE_KEY=0x" + "cd" * 32 + "\n", encoding="utf-8")
        env = {k: v for k, v in os.environ.items() if k != "PRIVATE_KEY"}
        with patch.dict(os.environ, env, clear=True):
            assert load_private_key(env_path) == "0x" + "cd" * 32

    def test_environment_wins_over_env_file(self, tmp_path: Path) -> None:
        env_path = tmp_path / ".env"
        env_path.write_text("PRIVATE_KEY=0x" + "cd" * 32 + "\n", encoding="utf-8")
        with patch.dict(os.environ, {"PRIVATE_KEY": "0x" + "ab" * 32}):
            assert load_private_key(env_path) == "0x" + "ab" * 32

    def test_missing_key(self, tmp_path: Path) -> None:
        env = {k: v for k, v in os.environ.items() if k != "PRIVATE_KEY"}
        with patch.dict(os.environ, env, clear=True):
            with pytest.raises(ValueError, match="PRIVATE_KEY not found"):
                load_private_key(tmp_path / ".env")


class TestLocalWallet:
    def test_account_matches_key(self, private_key: str) -> None:
        wallet = LocalWallet(network=TEST_NETWORK, private_key=private_key)
        assert wallet.account.address == Account.from_key(private_key).address
        assert wallet.network is TEST_NETWORK

    def test_no_key_means_disconnected(self, tmp_path: Path) -> None:
        env = {k: v for k, v in os.environ.items() if k != "PRIVATE_KEY"}
        with patch.dict(os.environ, env, clear=True):
            wallet = LocalWallet.from_env(TEST_NETWORK, env_path=tmp_path / ".env")
        assert wallet.account is None
        with pytest.raises(WalletNotConnected):
            wallet.sign_and_submit({"to": RECIPIENT})

    def test_prepare_fills_missing_fields(self, private_key: str, offline_rpc: list[str]) -> None:
        wallet = LocalWallet(network=TEST_NETWORK, private_key=private_key)

        tx = wallet.prepare_transaction({"to": RECIPIENT, "value": "0x10", "data": "0x"})

        assert tx == {
            "to": "0x5aAeb6053F3E94C9b9A09f33669435E7Ef1BeAed",
            "value": 16,
            "data": "0x",
            "chainId": TEST_NETWORK.chain_id,
            "nonce": 3,
            "gasPrice": 1_000_000_000,
            "gas": 500_000,
        }

    def test_prepare_keeps_endpoint_fields(self, private_key: str, offline_rpc: list[str]) -> None:
        wallet = LocalWallet(network=TEST_NETWORK, private_key=private_key)
        tx = wallet.prepare_transaction(
            '{"to": "%s", "nonce": "0x9", "gas": 21000, "maxFeePerGas": "0x2", '
            '"maxPriorityFeePerGas": "0x1"}' % RECIPIENT
        )
        assert tx["nonce"] == 9
        assert tx["gas"] == 21000
        assert "gasPrice" not in tx

    def test_prepare_rejects_foreign_sender(self, private_key: str, offline_rpc: list[str]) -> None:
        wallet = LocalWallet(network=TEST_NETWORK, private_key=private_key)
        with pytest.raises(ValueError, match="not the connected account"):
            wallet.prepare_transaction({"to": RECIPIENT, "from": RECIPIENT})

    def test_prepare_rejects_other_chain(self, private_key: str, offline_rpc: list[str]) -> None:
        wallet = LocalWallet(network=TEST_NETWORK, private_key=private_key)
        with pytest.raises(ValueError, match="targets chain 1"):
            wallet.prepare_transaction({"to": RECIPIENT, "chainId": 1})

    def test_prepare_rejects_non_object(self, private_key: str) -> None:
        wallet = LocalWallet(network=TEST_NETWORK, private_key=private_key)
        with pytest.raises(ValueError):
            wallet.prepare_transaction(["not", "a", "tx"])

    def test_sign_and_submit_sends_raw_transaction(self, private_key: str, offline_rpc: list[str]) -> None:
        wallet = LocalWallet(network=TEST_NETWORK, private_key=private_key)

        handle = wallet.sign_and_submit({"to": RECIPIENT, "value": 1, "data": "0x"})

        assert handle.hash == "0x" + "cd" * 32
        assert len(offline_rpc) == 1
        assert offline_rpc[0].startswith("0x")
        assert Account.recover_transaction(offline_rpc[0]) == wallet.account.address


class TestChecksum:
    def test_eip55_vector(self) -> None:
        assert to_checksum_address(RECIPIENT) == "0x5aAeb6053F3E94C9b9A09f33669435E7Ef1BeAed"

    def test_idempotent(self) -> None:
        once = to_checksum_address(RECIPIENT)
        assert to_checksum_address(once) == once
