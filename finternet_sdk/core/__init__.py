"""Ledger activity reconstruction and holdings discovery."""

from finternet_sdk.core.account_decoder import AccountEncoding, RawAccount, decode_account, unpack_token_account
from finternet_sdk.core.holdings import HoldingsAggregator, filter_owned
from finternet_sdk.core.history import HistoryScanner
from finternet_sdk.core.metadata import (
    LookupStatus,
    MetadataLookup,
    MetadataResolver,
    get_metadata_account_address,
)
from finternet_sdk.core.transfers import TransferReconstructor, extract_memo

__all__ = [
    'AccountEncoding',
    'RawAccount',
    'decode_account',
    'unpack_token_account',
    'HoldingsAggregator',
    'filter_owned',
    'HistoryScanner',
    'LookupStatus',
    'MetadataLookup',
    'MetadataResolver',
    'get_metadata_account_address',
    'TransferReconstructor',
    'extract_memo',
]
