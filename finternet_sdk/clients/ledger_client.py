"""Facade client for the Finternet SDK.

This module provides a unified query client composing account, token and
transaction operations over one HTTP connection pool.
"""

from contextlib import asynccontextmanager
from typing import Optional

from finternet_sdk.clients.account_client import AccountClient
from finternet_sdk.clients.token_client import TokenClient
from finternet_sdk.clients.transaction_client import TransactionClient
from finternet_sdk.config import FinternetConfig


class LedgerClient(AccountClient, TokenClient, TransactionClient):
    """Unified read/submit client for the ledger's JSON-RPC API.

    The client holds no per-call state and can be shared by concurrent scans.
    """


@asynccontextmanager
async def get_ledger_client(config: Optional[FinternetConfig] = None):
    """Get a ledger client as an async context manager.

    Yields:
        LedgerClient: An initialized client.
    """
    client = LedgerClient(config)
    try:
        yield client
    finally:
        await client.close()
