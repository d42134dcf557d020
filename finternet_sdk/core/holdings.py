"""Holdings discovery for token owners.

Every call queries the ledger afresh; nothing is cached between calls.
"""

from typing import Dict, List, Optional

from finternet_sdk.clients.ledger_client import LedgerClient
from finternet_sdk.constants import TOKEN_PROGRAM_ID
from finternet_sdk.core.account_decoder import RawAccount, decode_account
from finternet_sdk.core.metadata import MetadataResolver
from finternet_sdk.logging_config import get_logger, log_with_context
from finternet_sdk.models.identity import WalletInfo
from finternet_sdk.models.token import DecodeFailure, DiscoveredToken, HoldingsScan
from finternet_sdk.utils.errors import AccountDecodeError
from finternet_sdk.utils.validation import require_public_key

# Get logger
logger = get_logger(__name__)


def filter_owned(holdings: Dict[str, int]) -> Dict[str, int]:
    """Keep only the mints with a positive balance.

    Args:
        holdings: Mint to base-unit amount

    Returns:
        A new mapping without zero balances
    """
    return {mint: amount for mint, amount in holdings.items() if amount > 0}


class HoldingsAggregator:
    """Builds balance maps from an owner's token accounts."""

    def __init__(
        self,
        ledger: LedgerClient,
        resolver: Optional[MetadataResolver] = None,
        program_id: str = TOKEN_PROGRAM_ID
    ):
        """Initialize the aggregator.

        Args:
            ledger: Query client
            resolver: Metadata resolver used to name discovered tokens
            program_id: Token program whose accounts are scanned
        """
        self.ledger = ledger
        self.resolver = resolver
        self.program_id = program_id

    async def scan_holdings(self, owner: str) -> HoldingsScan:
        """Decode every token account of an owner.

        Accounts that cannot be decoded are skipped and reported in the
        scan's ``failures``. Later accounts for the same mint overwrite
        earlier ones.

        Args:
            owner: The owner public key

        Returns:
            HoldingsScan

        Raises:
            InvalidPublicKeyError: If the owner is not a valid public key
            RpcError: If the account listing itself fails
        """
        require_public_key(owner)
        logger.info(f"Fetching token accounts for: {owner}")

        entries = await self.ledger.get_token_accounts_by_owner(owner, program_id=self.program_id)

        holdings: Dict[str, int] = {}
        failures: List[DecodeFailure] = []
        for index, entry in enumerate(entries):
            raw = RawAccount.from_rpc(entry) if isinstance(entry, dict) else RawAccount("unknown", entry)
            try:
                view = decode_account(raw, index=index, default_owner=owner)
            except AccountDecodeError as e:
                log_with_context(
                    logger, "warning", f"Skipping undecodable token account: {e.message}",
                    index=index, pubkey=raw.pubkey, encoding=raw.encoding
                )
                failures.append(DecodeFailure(
                    index=index, pubkey=raw.pubkey, encoding=raw.encoding, reason=e.message
                ))
                continue
            holdings[view.mint] = view.amount

        logger.info(f"Found {len(holdings)} token accounts ({len(failures)} skipped)")
        return HoldingsScan(owner=owner, holdings=holdings, failures=failures, account_count=len(entries))

    async def get_holdings(self, owner: str) -> Dict[str, int]:
        """Get the mint to base-unit balance map of an owner."""
        scan = await self.scan_holdings(owner)
        return scan.holdings

    async def get_owned_assets(self, owner: str) -> Dict[str, int]:
        """Get the holdings of an owner with zero balances removed."""
        logger.info(f"Fetching owned assets for: {owner}")
        assets = filter_owned(await self.get_holdings(owner))
        logger.info(f"Found {len(assets)} owned assets")
        return assets

    async def discover_all_tokens(self, owner: str) -> List[DiscoveredToken]:
        """List the owner's positive holdings with best-effort display names.

        Args:
            owner: The owner public key

        Returns:
            DiscoveredToken list; display_name is None where no metadata exists
        """
        assets = await self.get_owned_assets(owner)

        discovered = []
        for mint, balance in assets.items():
            display_name = None
            if self.resolver is not None:
                metadata = await self.resolver.resolve(mint)
                display_name = metadata.name if metadata else None
            discovered.append(DiscoveredToken(mint=mint, balance=balance, display_name=display_name))
        return discovered

    async def get_wallet_info(self, owner: str) -> WalletInfo:
        """Get SOL balance and token holdings of a wallet."""
        logger.info(f"Getting wallet info for: {owner}")
        sol_balance = await self.ledger.get_balance(owner)
        holdings = await self.get_holdings(owner)
        return WalletInfo(pubkey=owner, sol_balance=sol_balance, token_balances=holdings)
