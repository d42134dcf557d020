"""Unit tests for FinternetClient wiring."""

import pytest

from finternet_sdk import FinternetClient
from finternet_sdk.config import FinternetConfig
from tests.fixtures.common import base64_entry, token_account_bytes


@pytest.fixture
def client(mock_ledger):
    return FinternetClient(ledger=mock_ledger)


def test_components_share_the_ledger(client, mock_ledger):
    assert client.config is mock_ledger.config
    assert client.holdings.ledger is mock_ledger
    assert client.history.ledger is mock_ledger
    assert client.resolver.ledger is mock_ledger
    assert client.submitter.ledger is mock_ledger
    assert client.holdings.resolver is client.resolver
    assert client.assets.resolver is client.resolver
    assert client.history.reconstructor is client.reconstructor


def test_config_drives_components(mock_ledger):
    config = FinternetConfig(history_limit=25, confirm_timeout=5)

    client = FinternetClient(config, ledger=mock_ledger)

    assert client.history.default_limit == 25
    assert client.submitter.confirm_timeout == 5


def test_devnet_client():
    client = FinternetClient.devnet()
    assert client.config.rpc_url == "https://api.devnet.solana.com"


@pytest.mark.asyncio
async def test_get_owned_assets(client, mock_ledger, owner, mint, other_mint):
    mock_ledger.get_token_accounts_by_owner.return_value = [
        base64_entry(token_account_bytes(mint, owner, 3)),
        base64_entry(token_account_bytes(other_mint, owner, 0)),
    ]

    assert await client.get_owned_assets(owner) == {mint: 3}
    assert await client.get_holdings(owner) == {mint: 3, other_mint: 0}


@pytest.mark.asyncio
async def test_context_manager_closes_ledger(mock_ledger):
    async with FinternetClient(ledger=mock_ledger):
        pass

    mock_ledger.close.assert_called_once()
