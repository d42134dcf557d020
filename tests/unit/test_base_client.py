"""Unit tests for the JSON-RPC transport.

Requests go through ``httpx.MockTransport`` so no network is used.
"""

import json

import httpx
import pytest

from finternet_sdk.clients.ledger_client import LedgerClient
from finternet_sdk.config import FinternetConfig
from finternet_sdk.utils.errors import ErrorCode, InvalidPublicKeyError, RpcError, RpcTimeoutError
from tests.fixtures.common import make_pubkey


def _client(handler, **config_overrides):
    config = FinternetConfig(**config_overrides)
    http_client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    client = LedgerClient(config, http_client=http_client)
    client.initial_retry_delay = 0
    return client


def _result(value):
    return httpx.Response(200, json={"jsonrpc": "2.0", "id": 1, "result": value})


def _error(code, message):
    return httpx.Response(200, json={"jsonrpc": "2.0", "id": 1, "error": {"code": code, "message": message}})


@pytest.mark.asyncio
async def test_get_balance_request_shape():
    """Test the JSON-RPC payload and result unwrapping."""
    requests = []

    def handler(request):
        requests.append(json.loads(request.content))
        return _result({"context": {"slot": 1}, "value": 5000})

    client = _client(handler, commitment="finalized")
    pubkey = make_pubkey(1)

    assert await client.get_balance(pubkey) == 5000
    assert requests == [{
        "jsonrpc": "2.0",
        "id": 1,
        "method": "getBalance",
        "params": [pubkey, {"commitment": "finalized"}],
    }]


@pytest.mark.asyncio
async def test_get_account_missing_returns_none():
    client = _client(lambda request: _result({"context": {"slot": 1}, "value": None}))
    assert await client.get_account(make_pubkey(1)) is None


@pytest.mark.asyncio
async def test_get_token_accounts_uses_configured_encoding():
    requests = []

    def handler(request):
        requests.append(json.loads(request.content))
        return _result({"context": {"slot": 1}, "value": [{"pubkey": make_pubkey(3), "account": {}}]})

    client = _client(handler, account_encoding="jsonParsed")

    accounts = await client.get_token_accounts_by_owner(make_pubkey(1))

    assert len(accounts) == 1
    assert requests[0]["params"][2]["encoding"] == "jsonParsed"


@pytest.mark.asyncio
async def test_retries_transient_status():
    calls = []

    def handler(request):
        calls.append(request)
        if len(calls) < 3:
            return httpx.Response(503)
        return _result(12345)

    client = _client(handler, max_retries=3)

    assert await client.get_slot() == 12345
    assert len(calls) == 3


@pytest.mark.asyncio
async def test_retries_rate_limit_error():
    calls = []

    def handler(request):
        calls.append(request)
        if len(calls) == 1:
            return _error(-32005, "Node is behind")
        return _result(7)

    client = _client(handler)

    assert await client.get_slot() == 7
    assert len(calls) == 2


@pytest.mark.asyncio
async def test_gives_up_after_max_retries():
    calls = []

    def handler(request):
        calls.append(request)
        return httpx.Response(502)

    client = _client(handler, max_retries=2)

    with pytest.raises(RpcError) as exc_info:
        await client.get_slot()

    assert exc_info.value.error_code == ErrorCode.NETWORK_ERROR
    assert len(calls) == 3


@pytest.mark.asyncio
async def test_rpc_error_is_mapped():
    client = _client(lambda request: _error(-32602, "Invalid param: could not find account"))

    with pytest.raises(RpcError) as exc_info:
        await client.get_token_account_balance(make_pubkey(1))

    assert exc_info.value.error_code == ErrorCode.RPC_INVALID_PARAMETER_ERROR
    assert "could not find account" in exc_info.value.message


@pytest.mark.asyncio
async def test_connection_failure_is_mapped():
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    client = _client(handler, max_retries=1)

    with pytest.raises(RpcError) as exc_info:
        await client.get_slot()

    assert exc_info.value.error_code == ErrorCode.NETWORK_ERROR


@pytest.mark.asyncio
async def test_timeout_is_mapped():
    def handler(request):
        raise httpx.ReadTimeout("timed out", request=request)

    client = _client(handler, max_retries=0)

    with pytest.raises(RpcTimeoutError):
        await client.get_slot()


@pytest.mark.asyncio
async def test_send_is_never_retried():
    calls = []

    def handler(request):
        calls.append(json.loads(request.content))
        return httpx.Response(503)

    client = _client(handler, max_retries=3)

    with pytest.raises(RpcError):
        await client.send_raw_transaction(b"\x01\x02")

    assert len(calls) == 1
    assert calls[0]["method"] == "sendTransaction"
    assert calls[0]["params"][0] == "AQI="
    assert calls[0]["params"][1]["encoding"] == "base64"


@pytest.mark.asyncio
async def test_invalid_pubkey_fails_before_request():
    calls = []

    def handler(request):
        calls.append(request)
        return _result(None)

    client = _client(handler)

    with pytest.raises(InvalidPublicKeyError):
        await client.get_balance("not-a-pubkey")
    assert calls == []


@pytest.mark.asyncio
async def test_close_leaves_external_http_client_open():
    http_client = httpx.AsyncClient(transport=httpx.MockTransport(lambda request: _result(1)))
    client = LedgerClient(FinternetConfig(), http_client=http_client)

    async with client:
        await client.get_slot()

    assert not http_client.is_closed
    await http_client.aclose()
