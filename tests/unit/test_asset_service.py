"""Unit tests for AssetService."""

import pytest
from solders.keypair import Keypair
from solders.pubkey import Pubkey
from unittest.mock import AsyncMock

from finternet_sdk.constants import (
    ASSOCIATED_TOKEN_PROGRAM_ID,
    METADATA_PROGRAM_ID,
    MINT_ACCOUNT_SIZE,
    SYSTEM_PROGRAM_ID,
    TOKEN_PROGRAM_ID,
)
from finternet_sdk.core.metadata import MetadataResolver
from finternet_sdk.services.asset_service import AssetService
from finternet_sdk.utils.errors import SubmissionError, ValidationError


@pytest.fixture
def resolver():
    return AsyncMock(spec=MetadataResolver)


@pytest.fixture
def asset_service(mock_ledger, mock_submitter, resolver):
    return AssetService(mock_ledger, mock_submitter, resolver)


@pytest.mark.asyncio
async def test_tokenize_asset(asset_service, mock_ledger, mock_submitter):
    """Test the instruction sequence and the returned metadata."""
    wallet = Keypair()

    mint, metadata = await asset_service.tokenize_asset("Gold Bar", "1kg bar", 65000, "commodity", wallet)

    mock_ledger.get_minimum_balance_for_rent_exemption.assert_called_with(MINT_ACCOUNT_SIZE)
    instructions = mock_submitter.submit.call_args.args[0]
    assert [str(ix.program_id) for ix in instructions] == [
        SYSTEM_PROGRAM_ID,
        TOKEN_PROGRAM_ID,
        ASSOCIATED_TOKEN_PROGRAM_ID,
        TOKEN_PROGRAM_ID,
        METADATA_PROGRAM_ID,
    ]

    kwargs = mock_submitter.submit.call_args.kwargs
    assert kwargs["fee_payer"] is wallet
    assert str(kwargs["signers"][0].pubkey()) == mint

    assert metadata.name == "Gold Bar"
    assert metadata.description == "1kg bar"
    assert metadata.value == 65000
    assert metadata.asset_type == "commodity"
    assert metadata.issuer == str(wallet.pubkey())
    assert metadata.token_mint == mint
    assert metadata.symbol == "FINT"
    assert metadata.uri == f"https://api.finternet.com/metadata/{mint}"
    assert metadata.created_at > 0
    assert metadata.is_authoritative


@pytest.mark.asyncio
async def test_tokenize_asset_uses_fresh_mint(asset_service):
    wallet = Keypair()

    first, _ = await asset_service.tokenize_asset("A", "", 1, "t", wallet)
    second, _ = await asset_service.tokenize_asset("A", "", 1, "t", wallet)

    assert first != second
    Pubkey.from_string(first)


@pytest.mark.asyncio
@pytest.mark.parametrize("name,value,asset_type", [
    ("", 1, "t"),
    ("x" * 33, 1, "t"),
    ("ok", -5, "t"),
    ("ok", True, "t"),
    ("ok", 1, ""),
])
async def test_tokenize_asset_validation(asset_service, mock_submitter, name, value, asset_type):
    with pytest.raises(ValidationError):
        await asset_service.tokenize_asset(name, "desc", value, asset_type, Keypair())
    assert not mock_submitter.submit.called


@pytest.mark.asyncio
async def test_tokenize_asset_submission_failure(asset_service, mock_submitter):
    mock_submitter.submit.side_effect = SubmissionError("Transaction failed")

    with pytest.raises(SubmissionError):
        await asset_service.tokenize_asset("Gold Bar", "", 1, "commodity", Keypair())


@pytest.mark.asyncio
async def test_get_asset_info_delegates(asset_service, resolver, mint):
    resolver.resolve.return_value = None

    assert await asset_service.get_asset_info(mint) is None
    resolver.resolve.assert_called_with(mint)


@pytest.mark.asyncio
async def test_is_valid_asset_delegates(asset_service, resolver, mint):
    resolver.is_valid_asset.return_value = True

    assert await asset_service.is_valid_asset(mint)
    resolver.is_valid_asset.assert_called_with(mint)
