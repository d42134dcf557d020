"""Data models for the Finternet SDK."""

from finternet_sdk.models.asset import AssetMetadata
from finternet_sdk.models.identity import Identity, WalletInfo
from finternet_sdk.models.token import (
    DecodeFailure,
    DiscoveredToken,
    HoldingsScan,
    TokenAccountView,
)
from finternet_sdk.models.transaction import TokenBalance, TransferRecord

__all__ = [
    'AssetMetadata',
    'DecodeFailure',
    'DiscoveredToken',
    'HoldingsScan',
    'Identity',
    'TokenAccountView',
    'TokenBalance',
    'TransferRecord',
    'WalletInfo',
]
