"""Asset tokenization service.

Mints a one-unit SPL token with Metaplex metadata to represent an asset.
"""

import time
from typing import Optional, Tuple

from solders.keypair import Keypair

from finternet_sdk.clients.ledger_client import LedgerClient
from finternet_sdk.constants import (
    ASSET_METADATA_URI,
    ASSET_SYMBOL,
    MAX_NAME_LENGTH,
    MAX_URI_LENGTH,
    MINT_ACCOUNT_SIZE,
)
from finternet_sdk.core.metadata import MetadataResolver
from finternet_sdk.models.asset import AssetMetadata
from finternet_sdk.programs.instructions import (
    associated_token_address,
    build_create_associated_account,
    build_create_metadata_v3,
    build_create_mint_account,
    build_initialize_mint,
    build_mint_to,
)
from finternet_sdk.services.base_service import BaseService
from finternet_sdk.services.submission import LedgerSubmitter
from finternet_sdk.utils.errors import ValidationError


class AssetService(BaseService):
    """Service for tokenizing assets and reading them back."""

    def __init__(self, ledger: LedgerClient, submitter: LedgerSubmitter, resolver: MetadataResolver):
        """Initialize the asset service.

        Args:
            ledger: Query client
            submitter: Transaction submitter
            resolver: Metadata resolver used for lookups
        """
        super().__init__()
        self.ledger = ledger
        self.submitter = submitter
        self.resolver = resolver

    @staticmethod
    def _validate_asset(name: str, description: str, value: int, asset_type: str) -> None:
        if not name or not name.strip():
            raise ValidationError("Asset name must not be empty")
        if len(name.encode("utf-8")) > MAX_NAME_LENGTH:
            raise ValidationError(f"Asset name must be at most {MAX_NAME_LENGTH} bytes",
                                  details={"name": name})
        if isinstance(value, bool) or not isinstance(value, int) or value < 0:
            raise ValidationError(f"Asset value must be a non-negative integer, got {value!r}")
        if not asset_type:
            raise ValidationError("Asset type must not be empty")

    async def tokenize_asset(
        self,
        name: str,
        description: str,
        value: int,
        asset_type: str,
        wallet: Keypair
    ) -> Tuple[str, AssetMetadata]:
        """Tokenize an asset by minting a single SPL token with metadata.

        The transaction creates the mint (0 decimals, ``wallet`` as mint and
        freeze authority), the wallet's associated token account, mints one
        unit into it and creates the metadata account.

        Args:
            name: Asset name (at most 32 bytes)
            description: Free-text description
            value: Declared value in base currency units
            asset_type: Asset category
            wallet: Issuer keypair; pays fees and signs

        Returns:
            Tuple of (mint address, AssetMetadata)

        Raises:
            ValidationError: If the asset fields are invalid
            SubmissionError: If the transaction fails
        """
        self._validate_asset(name, description, value, asset_type)
        self.logger.info(f"Tokenizing asset: {name} of type: {asset_type} with value: {value}")

        mint_keypair = Keypair()
        mint = mint_keypair.pubkey()
        owner = wallet.pubkey()
        uri = ASSET_METADATA_URI.format(mint=mint)
        if len(uri) > MAX_URI_LENGTH:
            raise ValidationError("Metadata URI too long", details={"uri": uri})

        async with self.log_timing(f"tokenize_asset({name})"):
            rent = await self.ledger.get_minimum_balance_for_rent_exemption(MINT_ACCOUNT_SIZE)
            associated_account = associated_token_address(owner, mint)
            instructions = [
                build_create_mint_account(owner, mint, rent),
                build_initialize_mint(mint, owner, decimals=0),
                build_create_associated_account(owner, owner, mint),
                build_mint_to(mint, associated_account, owner, 1),
                build_create_metadata_v3(mint, owner, owner, name, ASSET_SYMBOL, uri),
            ]
            signature = await self.submitter.submit(instructions, fee_payer=wallet, signers=[mint_keypair])

        self.logger.info(f"Asset tokenized successfully! Mint: {mint}, Signature: {signature}")

        metadata = AssetMetadata(
            name=name,
            description=description,
            value=value,
            issuer=str(owner),
            asset_type=asset_type,
            created_at=int(time.time()),
            token_mint=str(mint),
            symbol=ASSET_SYMBOL,
            uri=uri,
        )
        return str(mint), metadata

    async def get_asset_info(self, token_mint: str) -> Optional[AssetMetadata]:
        """Get asset information from the ledger.

        Only the name and issuer are stored on the ledger; the other fields
        are placeholders (see ``AssetMetadata.placeholder_fields``).

        Returns:
            AssetMetadata, or None when the mint has no readable metadata
        """
        self.logger.info(f"Fetching asset info for mint: {token_mint}")
        return await self.resolver.resolve(token_mint)

    async def is_valid_asset(self, token_mint: str) -> bool:
        """Check if a mint account exists and is valid."""
        return await self.resolver.is_valid_asset(token_mint)
