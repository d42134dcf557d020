"""Best-effort metadata lookup for token mints.

Reads the Metaplex metadata account of a mint and projects it into an
``AssetMetadata``. ``lookup`` reports whether a mint has no metadata or the
lookup failed; ``resolve`` collapses both to ``None``.
"""

import base64
import binascii
import struct
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Tuple

import base58
from cachetools import TTLCache
from solders.pubkey import Pubkey

from finternet_sdk.clients.ledger_client import LedgerClient
from finternet_sdk.constants import (
    DEFAULT_PUBKEY,
    METADATA_PROGRAM_ID,
    MINT_ACCOUNT_SIZE,
    TOKEN_PROGRAM_ID,
)
from finternet_sdk.logging_config import get_logger
from finternet_sdk.models.asset import AssetMetadata
from finternet_sdk.utils.errors import FinternetError
from finternet_sdk.utils.validation import validate_public_key

# Get logger
logger = get_logger(__name__)

# Placeholder values for fields the metadata account does not store.
# They are never real data; see AssetMetadata.placeholder_fields.
PLACEHOLDER_DESCRIPTION = "Asset tokenized on Finternet"
PLACEHOLDER_VALUE = 0
PLACEHOLDER_ASSET_TYPE = "tokenized_asset"
PLACEHOLDER_CREATED_AT = 0
PLACEHOLDER_FIELDS = ("description", "value", "asset_type", "created_at")

METADATA_V1_KEY = 4
METADATA_SEED = b"metadata"


class MetadataParseError(ValueError):
    """Raised when a metadata account buffer cannot be parsed."""


@dataclass(frozen=True)
class Creator:
    address: str
    verified: bool
    share: int


@dataclass(frozen=True)
class OnChainMetadata:
    """The fields of a Metaplex metadata account this SDK reads."""
    update_authority: str
    mint: str
    name: str
    symbol: str
    uri: str
    seller_fee_basis_points: int
    creators: Tuple[Creator, ...]


def get_metadata_account_address(mint: str) -> str:
    """Derive the metadata account address of a mint.

    Pure derivation, no network call.

    Args:
        mint: The mint address

    Returns:
        The metadata program-derived address, base58 encoded
    """
    program_id = Pubkey.from_string(METADATA_PROGRAM_ID)
    mint_key = Pubkey.from_string(mint)
    address, _ = Pubkey.find_program_address(
        [METADATA_SEED, bytes(program_id), bytes(mint_key)],
        program_id
    )
    return str(address)


class _Reader:
    """Sequential reader over a Borsh-encoded buffer."""

    def __init__(self, data: bytes):
        self.data = data
        self.offset = 0

    def take(self, size: int) -> bytes:
        end = self.offset + size
        if end > len(self.data):
            raise MetadataParseError(
                f"Unexpected end of data at offset {self.offset} (need {size} bytes)"
            )
        chunk = self.data[self.offset:end]
        self.offset = end
        return chunk

    def u8(self) -> int:
        return self.take(1)[0]

    def u16(self) -> int:
        return struct.unpack("<H", self.take(2))[0]

    def u32(self) -> int:
        return struct.unpack("<I", self.take(4))[0]

    def pubkey(self) -> str:
        return base58.b58encode(self.take(32)).decode("ascii")

    def string(self) -> str:
        length = self.u32()
        try:
            return self.take(length).decode("utf-8")
        except UnicodeDecodeError as e:
            raise MetadataParseError(f"String is not valid UTF-8: {e}")


def parse_metadata_account(data: bytes) -> OnChainMetadata:
    """Parse a Metaplex metadata account.

    Only the leading fields up to the creators list are read; trailing
    fields vary between program versions.

    Args:
        data: Raw account bytes

    Returns:
        OnChainMetadata with NUL padding stripped from strings

    Raises:
        MetadataParseError: If the buffer is not a metadata account
    """
    reader = _Reader(data)
    key = reader.u8()
    if key != METADATA_V1_KEY:
        raise MetadataParseError(f"Not a metadata account (key={key})")

    update_authority = reader.pubkey()
    mint = reader.pubkey()
    name = reader.string().strip("\x00")
    symbol = reader.string().strip("\x00")
    uri = reader.string().strip("\x00")
    seller_fee_basis_points = reader.u16()

    creators: List[Creator] = []
    if reader.u8() == 1:
        for _ in range(reader.u32()):
            address = reader.pubkey()
            verified = bool(reader.u8())
            share = reader.u8()
            creators.append(Creator(address=address, verified=verified, share=share))

    return OnChainMetadata(
        update_authority=update_authority,
        mint=mint,
        name=name,
        symbol=symbol,
        uri=uri,
        seller_fee_basis_points=seller_fee_basis_points,
        creators=tuple(creators),
    )


def _account_bytes(account: dict) -> bytes:
    if not isinstance(account, dict):
        raise MetadataParseError(f"Account is not an object: {type(account).__name__}")
    data = account.get("data")
    if isinstance(data, list) and len(data) == 2 and isinstance(data[0], str) and data[1] == "base64":
        try:
            return base64.b64decode(data[0], validate=True)
        except (binascii.Error, ValueError) as e:
            raise MetadataParseError(f"Invalid base64 account data: {e}")
    raise MetadataParseError("Account data is not base64 encoded")


class LookupStatus(str, Enum):
    """Outcome of a metadata lookup."""
    FOUND = "found"
    NOT_FOUND = "not_found"
    FAILED = "failed"


@dataclass(frozen=True)
class MetadataLookup:
    """Result of a metadata lookup that keeps absence and failure apart."""
    mint: str
    status: LookupStatus
    metadata: Optional[AssetMetadata] = None
    reason: Optional[str] = None

    @property
    def found(self) -> bool:
        return self.status is LookupStatus.FOUND


class MetadataResolver:
    """Resolves display metadata for mints."""

    def __init__(self, ledger: LedgerClient, cache_size: int = 256, cache_ttl: int = 300):
        """Initialize the resolver.

        Args:
            ledger: Query client
            cache_size: Maximum number of cached lookups
            cache_ttl: Seconds a successful lookup is reused; 0 disables caching
        """
        self.ledger = ledger
        self._cache: Optional[TTLCache] = TTLCache(maxsize=cache_size, ttl=cache_ttl) if cache_ttl > 0 else None

    async def lookup(self, mint: str) -> MetadataLookup:
        """Look up the metadata of a mint, reporting why nothing was found.

        Never raises. A mint without a metadata account is ``NOT_FOUND``;
        an invalid mint, a transport failure, an unparseable account or an
        account belonging to another mint is ``FAILED``.

        Args:
            mint: The mint address

        Returns:
            MetadataLookup
        """
        if not validate_public_key(mint):
            logger.warning(f"Cannot resolve metadata for invalid mint {mint!r}")
            return MetadataLookup(mint, LookupStatus.FAILED, reason="invalid mint address")

        if self._cache is not None and mint in self._cache:
            return MetadataLookup(mint, LookupStatus.FOUND, metadata=self._cache[mint])

        metadata_address = get_metadata_account_address(mint)
        try:
            account = await self.ledger.get_account(metadata_address, encoding="base64")
        except FinternetError as e:
            logger.warning(f"Metadata lookup for {mint} failed: {e.message}")
            return MetadataLookup(mint, LookupStatus.FAILED, reason=e.message)

        if account is None:
            logger.debug(f"No metadata account for mint {mint}")
            return MetadataLookup(mint, LookupStatus.NOT_FOUND)

        try:
            on_chain = parse_metadata_account(_account_bytes(account))
        except MetadataParseError as e:
            logger.warning(f"Could not parse metadata account {metadata_address} for {mint}: {e}")
            return MetadataLookup(mint, LookupStatus.FAILED, reason=str(e))

        if on_chain.mint != mint:
            logger.warning(f"Metadata account {metadata_address} belongs to {on_chain.mint}, not {mint}")
            return MetadataLookup(mint, LookupStatus.FAILED, reason=f"metadata belongs to {on_chain.mint}")

        issuer = on_chain.creators[0].address if on_chain.creators else DEFAULT_PUBKEY
        metadata = AssetMetadata(
            name=on_chain.name,
            description=PLACEHOLDER_DESCRIPTION,
            value=PLACEHOLDER_VALUE,
            issuer=issuer,
            asset_type=PLACEHOLDER_ASSET_TYPE,
            created_at=PLACEHOLDER_CREATED_AT,
            token_mint=mint,
            symbol=on_chain.symbol or None,
            uri=on_chain.uri or None,
            placeholder_fields=PLACEHOLDER_FIELDS,
        )
        if self._cache is not None:
            self._cache[mint] = metadata

        logger.info(f"Asset info retrieved for {mint}: {metadata.name}")
        return MetadataLookup(mint, LookupStatus.FOUND, metadata=metadata)

    async def resolve(self, mint: str) -> Optional[AssetMetadata]:
        """Look up the metadata of a mint.

        Returns:
            AssetMetadata, with placeholder values for the fields the
            metadata account does not store, or None when the lookup did
            not find any (see ``lookup`` for the reason)
        """
        return (await self.lookup(mint)).metadata

    async def is_valid_asset(self, mint: str) -> bool:
        """Check whether a mint account exists and looks like an SPL mint.

        Args:
            mint: The mint address

        Returns:
            True if the account is owned by the token program and is a mint-sized buffer
        """
        if not validate_public_key(mint):
            return False
        try:
            account = await self.ledger.get_account(mint, encoding="base64")
            if account is None:
                return False
            data = _account_bytes(account)
            return account.get("owner") == TOKEN_PROGRAM_ID and len(data) == MINT_ACCOUNT_SIZE
        except (FinternetError, MetadataParseError) as e:
            logger.debug(f"Mint check for {mint} failed: {e}")
            return False
