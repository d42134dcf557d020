"""Common test fixtures for Finternet SDK tests.

This module provides fixtures and builders that can be reused across
different test modules.
"""

import base64
import struct
from typing import List, Optional, Sequence, Tuple

import base58
import pytest
from unittest.mock import AsyncMock

from finternet_sdk.clients.ledger_client import LedgerClient
from finternet_sdk.config import FinternetConfig
from finternet_sdk.services.submission import LedgerSubmitter


def make_pubkey(seed: int) -> str:
    """Deterministic base58 public key made of one repeated byte."""
    return base58.b58encode(bytes([seed]) * 32).decode("ascii")


def make_signature(seed: int) -> str:
    """Deterministic base58 transaction signature."""
    return base58.b58encode(bytes([seed]) * 64).decode("ascii")


def token_account_bytes(mint: str, owner: str, amount: int, size: int = 165) -> bytes:
    """Build an SPL token account buffer."""
    data = base58.b58decode(mint) + base58.b58decode(owner) + struct.pack("<Q", amount)
    return data + bytes(size - len(data))


def base64_entry(data: bytes, pubkey: Optional[str] = None) -> dict:
    return {"pubkey": pubkey, "account": {"data": [base64.b64encode(data).decode("ascii"), "base64"]}}


def base58_entry(data: bytes, pubkey: Optional[str] = None) -> dict:
    return {"pubkey": pubkey, "account": {"data": [base58.b58encode(data).decode("ascii"), "base58"]}}


def json_parsed_entry(mint: str, amount: str, owner: Optional[str] = None, pubkey: Optional[str] = None) -> dict:
    info = {"mint": mint, "tokenAmount": {"amount": amount, "decimals": 0, "uiAmountString": amount}}
    if owner is not None:
        info["owner"] = owner
    return {
        "pubkey": pubkey,
        "account": {"data": {"program": "spl-token", "parsed": {"type": "account", "info": info}}},
    }


def _borsh_padded(value: str, width: int) -> bytes:
    encoded = value.encode("utf-8").ljust(width, b"\x00")
    return struct.pack("<I", len(encoded)) + encoded


def metadata_account_bytes(
    mint: str,
    name: str,
    symbol: str = "FINT",
    uri: str = "",
    update_authority: Optional[str] = None,
    creators: Sequence[Tuple[str, bool, int]] = (),
) -> bytes:
    """Build a Metaplex metadata account buffer with NUL-padded strings."""
    data = bytearray([4])
    data += base58.b58decode(update_authority or make_pubkey(9))
    data += base58.b58decode(mint)
    data += _borsh_padded(name, 32)
    data += _borsh_padded(symbol, 10)
    data += _borsh_padded(uri, 200)
    data += struct.pack("<H", 0)
    if creators:
        data += b"\x01" + struct.pack("<I", len(creators))
        for address, verified, share in creators:
            data += base58.b58decode(address) + bytes([1 if verified else 0, share])
    else:
        data += b"\x00"
    # Trailing fields the parser ignores
    data += b"\x01\x01\x00"
    return bytes(data)


def base64_account(data: bytes, owner: Optional[str] = None) -> dict:
    """A ``getAccountInfo`` value with base64 data."""
    return {
        "data": [base64.b64encode(data).decode("ascii"), "base64"],
        "owner": owner or make_pubkey(8),
        "lamports": 1461600,
        "executable": False,
    }


def balance_entry(account_index: int, mint: str, amount: Optional[str], owner: Optional[str] = None) -> dict:
    """A ``preTokenBalances`` / ``postTokenBalances`` item."""
    ui_amount = {"decimals": 0, "uiAmountString": amount}
    if amount is not None:
        ui_amount["amount"] = amount
    entry = {"accountIndex": account_index, "mint": mint, "uiTokenAmount": ui_amount}
    if owner is not None:
        entry["owner"] = owner
    return entry


def transfer_transaction(
    pre: Optional[List[dict]],
    post: Optional[List[dict]],
    block_time: Optional[int] = 1628000000,
    instructions: Optional[List[dict]] = None,
    account_keys: Optional[List[str]] = None,
) -> dict:
    """A ``getTransaction`` result with the given balance snapshots."""
    meta = {"fee": 5000, "err": None}
    if pre is not None:
        meta["preTokenBalances"] = pre
    if post is not None:
        meta["postTokenBalances"] = post
    return {
        "slot": 12345,
        "blockTime": block_time,
        "meta": meta,
        "transaction": {
            "signatures": [make_signature(1)],
            "message": {
                "accountKeys": account_keys or [make_pubkey(1), make_pubkey(2)],
                "instructions": instructions or [],
            },
        },
    }


@pytest.fixture
def config():
    """Default configuration that ignores the environment."""
    return FinternetConfig()


@pytest.fixture
def mock_ledger(config):
    """Create a mock ledger client."""
    ledger = AsyncMock(spec=LedgerClient)
    ledger.config = config

    # Common mock responses
    ledger.get_balance.return_value = 1000000000  # 1 SOL in lamports
    ledger.get_token_accounts_by_owner.return_value = []
    ledger.get_signatures_for_address.return_value = []
    ledger.get_account.return_value = None
    ledger.get_minimum_balance_for_rent_exemption.return_value = 1461600
    ledger.get_slot.return_value = 12345
    ledger.get_block_time.return_value = 1628000000

    return ledger


@pytest.fixture
def mock_submitter():
    """Create a mock transaction submitter."""
    submitter = AsyncMock(spec=LedgerSubmitter)
    submitter.submit.return_value = make_signature(7)
    return submitter


@pytest.fixture
def owner():
    return make_pubkey(1)


@pytest.fixture
def mint():
    return make_pubkey(2)


@pytest.fixture
def other_mint():
    return make_pubkey(3)


@pytest.fixture
def sample_signature():
    return make_signature(5)


@pytest.fixture
def sample_transfer_transaction(mint, owner):
    """A transaction moving 40 units out of the owner's account."""
    return transfer_transaction(
        pre=[balance_entry(1, mint, "100", owner)],
        post=[balance_entry(1, mint, "60", owner)],
    )
