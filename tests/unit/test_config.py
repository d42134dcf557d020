"""Unit tests for configuration loading."""

import pytest

from finternet_sdk.config import FinternetConfig, get_config
from finternet_sdk.utils.errors import ConfigurationError

ENV_VARS = [
    "FINTERNET_RPC_URL",
    "FINTERNET_RPC_USER",
    "FINTERNET_RPC_PASSWORD",
    "FINTERNET_COMMITMENT",
    "FINTERNET_TIMEOUT",
    "FINTERNET_MAX_RETRIES",
    "FINTERNET_ACCOUNT_ENCODING",
    "FINTERNET_HISTORY_LIMIT",
    "FINTERNET_CONFIRM_TIMEOUT",
    "FINTERNET_METADATA_CACHE_SIZE",
    "FINTERNET_METADATA_CACHE_TTL",
    "LOG_LEVEL",
]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    get_config.cache_clear()
    yield
    get_config.cache_clear()


def test_defaults():
    config = get_config()

    assert config == FinternetConfig()
    assert config.rpc_url == "https://api.devnet.solana.com"
    assert config.commitment == "confirmed"
    assert config.history_limit == 10
    assert not config.has_auth


def test_environment_overrides(monkeypatch):
    monkeypatch.setenv("FINTERNET_RPC_URL", "http://localhost:8899")
    monkeypatch.setenv("FINTERNET_COMMITMENT", "FINALIZED")
    monkeypatch.setenv("FINTERNET_ACCOUNT_ENCODING", "jsonParsed")
    monkeypatch.setenv("FINTERNET_METADATA_CACHE_TTL", "0")
    monkeypatch.setenv("FINTERNET_RPC_USER", "user")
    monkeypatch.setenv("FINTERNET_RPC_PASSWORD", "secret")
    monkeypatch.setenv("LOG_LEVEL", "debug")

    config = get_config()

    assert config.rpc_url == "http://localhost:8899"
    assert config.commitment == "finalized"
    assert config.account_encoding == "jsonParsed"
    assert config.metadata_cache_ttl == 0
    assert config.log_level == "DEBUG"
    assert config.has_auth


def test_get_config_is_cached():
    assert get_config() is get_config()


@pytest.mark.parametrize("name,value", [
    ("FINTERNET_RPC_URL", "not a url"),
    ("FINTERNET_COMMITMENT", "max"),
    ("FINTERNET_TIMEOUT", "0"),
    ("FINTERNET_MAX_RETRIES", "-1"),
    ("FINTERNET_ACCOUNT_ENCODING", "base64+zstd"),
    ("FINTERNET_HISTORY_LIMIT", "ten"),
    ("LOG_LEVEL", "LOUD"),
])
def test_invalid_environment(monkeypatch, name, value):
    monkeypatch.setenv(name, value)

    with pytest.raises(ConfigurationError):
        get_config()


def test_direct_construction_is_validated():
    with pytest.raises(ConfigurationError):
        FinternetConfig(history_limit=1001)
    with pytest.raises(ConfigurationError):
        FinternetConfig(commitment="recent")
