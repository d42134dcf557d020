"""Unit tests for IdentityService."""

import json

import pytest
from solders.keypair import Keypair

from finternet_sdk.constants import MEMO_PROGRAM_ID, SYSTEM_PROGRAM_ID, TOKEN_PROGRAM_ID
from finternet_sdk.services.identity_service import IdentityService
from finternet_sdk.utils.errors import InvalidPublicKeyError, RpcError, ValidationError


@pytest.fixture
def identity_service(mock_ledger, mock_submitter):
    return IdentityService(mock_ledger, mock_submitter)


@pytest.mark.asyncio
async def test_get_identity_active(identity_service, mock_ledger, owner):
    mock_ledger.get_balance.return_value = 1500000000

    identity = await identity_service.get_identity(owner)

    assert identity.pubkey == owner
    assert identity.display_name is None
    assert identity.metadata == {"sol_balance": "1.5", "account_status": "active"}


@pytest.mark.asyncio
async def test_get_identity_inactive(identity_service, mock_ledger, owner):
    mock_ledger.get_balance.return_value = 0

    identity = await identity_service.get_identity(owner)

    assert identity.metadata["account_status"] == "inactive"


@pytest.mark.asyncio
async def test_get_identity_unreadable(identity_service, mock_ledger, owner):
    mock_ledger.get_balance.side_effect = RpcError("Network error")

    identity = await identity_service.get_identity(owner)

    assert identity.metadata == {"account_status": "not_found"}


@pytest.mark.asyncio
@pytest.mark.parametrize("pubkey,name", [
    (SYSTEM_PROGRAM_ID, "System Program"),
    (TOKEN_PROGRAM_ID, "SPL Token Program"),
])
async def test_get_identity_well_known(identity_service, pubkey, name):
    identity = await identity_service.get_identity(pubkey)
    assert identity.display_name == name


@pytest.mark.asyncio
async def test_get_identity_invalid_pubkey(identity_service):
    with pytest.raises(InvalidPublicKeyError):
        await identity_service.get_identity("nope")


@pytest.mark.asyncio
async def test_write_ledger_entry(identity_service, mock_submitter):
    wallet = Keypair()

    signature = await identity_service.write_ledger_entry(wallet, "audit: checked vault 3")

    assert signature == mock_submitter.submit.return_value
    (instruction,) = mock_submitter.submit.call_args.args[0]
    assert str(instruction.program_id) == MEMO_PROGRAM_ID
    assert bytes(instruction.data) == b"audit: checked vault 3"
    assert instruction.accounts[0].pubkey == wallet.pubkey()
    assert instruction.accounts[0].is_signer


@pytest.mark.asyncio
async def test_write_empty_ledger_entry(identity_service, mock_submitter):
    with pytest.raises(ValidationError):
        await identity_service.write_ledger_entry(Keypair(), "")
    assert not mock_submitter.submit.called


@pytest.mark.asyncio
async def test_register_identity(identity_service, mock_submitter):
    wallet = Keypair()

    await identity_service.register_identity(wallet, "Acme Vaults", {"country": "CH"})

    (instruction,) = mock_submitter.submit.call_args.args[0]
    entry = json.loads(bytes(instruction.data))
    assert entry["action"] == "register_identity"
    assert entry["pubkey"] == str(wallet.pubkey())
    assert entry["display_name"] == "Acme Vaults"
    assert entry["metadata"] == {"country": "CH"}
    assert entry["timestamp"] > 0


def test_ownership_signature_verifies(identity_service):
    wallet = Keypair()
    challenge = "login:1628000000"

    signature = identity_service.verify_wallet_ownership(wallet, challenge)

    assert identity_service.verify_signature(str(wallet.pubkey()), challenge, signature)
    assert not identity_service.verify_signature(str(wallet.pubkey()), "login:other", signature)
    assert not identity_service.verify_signature(str(Keypair().pubkey()), challenge, signature)


def test_verify_signature_malformed_inputs(identity_service, owner):
    assert not identity_service.verify_signature(owner, "challenge", "not-a-signature")
    assert not identity_service.verify_signature("bad-key", "challenge", "1" * 64)


def test_create_readable_address(owner):
    readable = IdentityService.create_readable_address(owner)

    assert readable == f"{owner[:8]}...{owner[-8:]}"
    assert IdentityService.create_readable_address("short") == "short"


@pytest.mark.asyncio
async def test_is_account_active(identity_service, mock_ledger, owner):
    mock_ledger.get_balance.return_value = 1
    assert await identity_service.is_account_active(owner)

    mock_ledger.get_balance.return_value = 0
    assert not await identity_service.is_account_active(owner)

    mock_ledger.get_balance.side_effect = RpcError("Network error")
    assert not await identity_service.is_account_active(owner)
