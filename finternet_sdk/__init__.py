"""Finternet SDK.

Client-side toolkit for reconstructing token holdings, asset metadata and
transfer history from a Solana-compatible ledger, and for submitting asset,
payment and identity transactions.
"""

from finternet_sdk.client import FinternetClient
from finternet_sdk.config import FinternetConfig, get_config
from finternet_sdk.logging_config import configure_logging
from finternet_sdk.utils.errors import FinternetError

__version__ = "0.1.0"
__author__ = "Finternet SDK Developers"
__email__ = "dev@finternet.com"

__all__ = [
    'FinternetClient',
    'FinternetConfig',
    'get_config',
    'configure_logging',
    'FinternetError',
]
