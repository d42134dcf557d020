"""Top-level client for the Finternet SDK.

``FinternetClient`` wires the query client, the core engine and the
services together. Nothing is global: construct one client per
configuration and close it when done.
"""

from typing import Dict, List, Optional, Tuple

from solders.keypair import Keypair

from finternet_sdk.clients.ledger_client import LedgerClient
from finternet_sdk.config import FinternetConfig, devnet_config, get_config
from finternet_sdk.core.history import HistoryScanner
from finternet_sdk.core.holdings import HoldingsAggregator
from finternet_sdk.core.metadata import MetadataResolver
from finternet_sdk.core.transfers import TransferReconstructor
from finternet_sdk.logging_config import get_logger
from finternet_sdk.models.asset import AssetMetadata
from finternet_sdk.models.identity import Identity, WalletInfo
from finternet_sdk.models.token import DiscoveredToken
from finternet_sdk.models.transaction import TransferRecord
from finternet_sdk.services.asset_service import AssetService
from finternet_sdk.services.identity_service import IdentityService
from finternet_sdk.services.payment_service import PaymentService
from finternet_sdk.services.submission import LedgerSubmitter

# Get logger
logger = get_logger(__name__)


class FinternetClient:
    """Entry point bundling holdings, history, metadata and services.

    Example:
        async with FinternetClient.devnet() as client:
            assets = await client.get_owned_assets(owner)
    """

    def __init__(self, config: Optional[FinternetConfig] = None, ledger: Optional[LedgerClient] = None):
        """Initialize the client.

        Args:
            config: Configuration; defaults to the environment configuration
            ledger: Query client to use; one is created from ``config`` if omitted
        """
        self.config = config or (ledger.config if ledger is not None else get_config())
        self.ledger = ledger or LedgerClient(self.config)

        self.resolver = MetadataResolver(
            self.ledger,
            cache_size=self.config.metadata_cache_size,
            cache_ttl=self.config.metadata_cache_ttl,
        )
        self.reconstructor = TransferReconstructor()
        self.holdings = HoldingsAggregator(self.ledger, resolver=self.resolver)
        self.history = HistoryScanner(
            self.ledger, reconstructor=self.reconstructor, default_limit=self.config.history_limit
        )
        self.submitter = LedgerSubmitter(self.ledger, confirm_timeout=self.config.confirm_timeout)
        self.assets = AssetService(self.ledger, self.submitter, self.resolver)
        self.payments = PaymentService(self.ledger, self.submitter)
        self.identity = IdentityService(self.ledger, self.submitter)

        logger.info(f"Finternet client initialized for {self.config.rpc_url}")

    @classmethod
    def devnet(cls) -> "FinternetClient":
        """Create a client for the public devnet endpoint."""
        return cls(devnet_config())

    async def close(self) -> None:
        await self.ledger.close()

    async def __aenter__(self) -> "FinternetClient":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    # Holdings

    async def get_holdings(self, owner: str) -> Dict[str, int]:
        return await self.holdings.get_holdings(owner)

    async def get_owned_assets(self, owner: str) -> Dict[str, int]:
        return await self.holdings.get_owned_assets(owner)

    async def discover_all_tokens(self, owner: str) -> List[DiscoveredToken]:
        return await self.holdings.discover_all_tokens(owner)

    async def get_wallet_info(self, owner: str) -> WalletInfo:
        return await self.holdings.get_wallet_info(owner)

    # History

    async def get_transaction_history(self, address: str, limit: Optional[int] = None) -> List[TransferRecord]:
        return await self.history.get_history(address, limit=limit)

    async def get_transaction_details(self, signature: str) -> Optional[TransferRecord]:
        return await self.history.get_transaction_details(signature)

    async def get_transaction_status(self, signature: str) -> str:
        return await self.history.get_transaction_status(signature)

    async def get_current_slot_and_time(self) -> Tuple[int, int]:
        return await self.history.get_current_slot_and_time()

    # Assets

    async def get_asset_info(self, token_mint: str) -> Optional[AssetMetadata]:
        return await self.assets.get_asset_info(token_mint)

    async def is_valid_asset(self, token_mint: str) -> bool:
        return await self.assets.is_valid_asset(token_mint)

    async def tokenize_asset(
        self,
        name: str,
        description: str,
        value: int,
        asset_type: str,
        wallet: Keypair
    ) -> Tuple[str, AssetMetadata]:
        return await self.assets.tokenize_asset(name, description, value, asset_type, wallet)

    # Payments

    async def send_payment(
        self,
        from_wallet: Keypair,
        to_pubkey: str,
        amount: int,
        token_mint: str,
        memo: Optional[str] = None
    ) -> str:
        return await self.payments.send_payment(from_wallet, to_pubkey, amount, token_mint, memo)

    async def get_token_balance(self, wallet_pubkey: str, token_mint: str) -> int:
        return await self.payments.get_token_balance(wallet_pubkey, token_mint)

    # Identity

    async def get_identity(self, pubkey: str) -> Identity:
        return await self.identity.get_identity(pubkey)

    async def write_ledger_entry(self, wallet: Keypair, data: str) -> str:
        return await self.identity.write_ledger_entry(wallet, data)
