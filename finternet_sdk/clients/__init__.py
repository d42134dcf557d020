"""Solana client modules for the Finternet SDK.

This package provides the query collaborator used by the core engine.
"""

from finternet_sdk.clients.base_client import BaseLedgerClient
from finternet_sdk.clients.account_client import AccountClient
from finternet_sdk.clients.token_client import TokenClient
from finternet_sdk.clients.transaction_client import TransactionClient
from finternet_sdk.clients.ledger_client import LedgerClient, get_ledger_client

__all__ = [
    'BaseLedgerClient',
    'AccountClient',
    'TokenClient',
    'TransactionClient',
    'LedgerClient',
    'get_ledger_client',
]
